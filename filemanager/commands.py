"""Command table and the handler for every shell command.

A handler receives the command context and its argument tokens (the command
keyword already stripped). The dispatcher enforces the declared arity before
calling it, so handlers can index ``args`` directly.
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List

from filemanager import fs_ops, system_info
from filemanager.errors import InvalidInputError
from filemanager.output import OutputWriter
from filemanager.sandbox import validate_directory, validate_file
from filemanager.schemas import Settings
from filemanager.session import Session


class Command(str, Enum):
    EXIT = "exit"
    GO_UP = "go-up"
    CHANGE_DIR = "change-dir"
    LIST_DIR = "list-dir"
    PRINT_FILE = "print-file"
    CREATE_FILE = "create-file"
    RENAME_FILE = "rename-file"
    COPY_FILE = "copy-file"
    MOVE_FILE = "move-file"
    DELETE_FILE = "delete-file"
    OS_QUERY = "os-query"
    HASH_FILE = "hash-file"
    COMPRESS_FILE = "compress-file"
    DECOMPRESS_FILE = "decompress-file"


class OsQuery(str, Enum):
    EOL = "--EOL"
    CPUS = "--cpus"
    HOMEDIR = "--homedir"
    USERNAME = "--username"
    ARCHITECTURE = "--architecture"


@dataclass
class CommandContext:
    session: Session
    writer: OutputWriter
    settings: Settings


Handler = Callable[[CommandContext, List[str]], Awaitable[None]]


@dataclass(frozen=True)
class CommandSpec:
    command: Command
    arity: int
    handler: Handler


# --- General ---
async def exit_session(ctx: CommandContext, args: List[str]) -> None:
    ctx.session.closed = True


# --- Navigation ---
async def go_up(ctx: CommandContext, args: List[str]) -> None:
    session = ctx.session
    if session.at_root:
        return
    session.current_dir = session.current_dir.parent


async def change_dir(ctx: CommandContext, args: List[str]) -> None:
    ctx.session.current_dir = validate_directory(ctx.session, args[0])


async def list_dir(ctx: CommandContext, args: List[str]) -> None:
    entries = await fs_ops.list_directory(ctx.session.current_dir)
    ctx.writer.table(["Name", "Type"], [(name, kind.value) for name, kind in entries])


# --- Files ---
async def print_file(ctx: CommandContext, args: List[str]) -> None:
    path = validate_file(ctx.session, args[0], check_existence=True)
    await fs_ops.stream_file(path, ctx.writer.write_bytes, ctx.settings.chunk_size)
    ctx.writer.writeln("")


async def create_file(ctx: CommandContext, args: List[str]) -> None:
    path = validate_file(ctx.session, args[0], check_non_existence=True)
    await fs_ops.create_empty_file(path)


def _source_and_destination(ctx: CommandContext, args: List[str]):
    src = validate_file(ctx.session, args[0], check_existence=True)
    dst = validate_file(ctx.session, args[1], check_non_existence=True)
    return src, dst


async def rename_file(ctx: CommandContext, args: List[str]) -> None:
    src, dst = _source_and_destination(ctx, args)
    await fs_ops.rename_file(src, dst)


async def copy_file(ctx: CommandContext, args: List[str]) -> None:
    src, dst = _source_and_destination(ctx, args)
    await fs_ops.copy_file(src, dst, ctx.settings.chunk_size)


async def move_file(ctx: CommandContext, args: List[str]) -> None:
    src, dst = _source_and_destination(ctx, args)
    await fs_ops.move_file(src, dst, ctx.settings.chunk_size)


async def delete_file(ctx: CommandContext, args: List[str]) -> None:
    path = validate_file(ctx.session, args[0], check_existence=True)
    await fs_ops.delete_file(path)


# --- System ---
async def os_query(ctx: CommandContext, args: List[str]) -> None:
    try:
        query = OsQuery(args[0])
    except ValueError:
        raise InvalidInputError() from None
    writer = ctx.writer
    if query == OsQuery.EOL:
        writer.writeln(json.dumps(system_info.default_eol()))
    elif query == OsQuery.CPUS:
        cpus = system_info.cpu_info()
        writer.writeln(f"Overall amount of CPUS: {len(cpus)}")
        writer.table(["model", "speed"], [(c.model, c.speed_label) for c in cpus])
    elif query == OsQuery.HOMEDIR:
        writer.writeln(str(ctx.session.root_dir))
    elif query == OsQuery.USERNAME:
        writer.writeln(ctx.session.user_name)
    elif query == OsQuery.ARCHITECTURE:
        writer.writeln(system_info.architecture())


# --- Hash / compression ---
async def hash_file(ctx: CommandContext, args: List[str]) -> None:
    path = validate_file(ctx.session, args[0], check_existence=True)
    digest = await fs_ops.hash_file(path, ctx.settings.hash_algorithm, ctx.settings.chunk_size)
    ctx.writer.writeln(digest)


async def compress_file(ctx: CommandContext, args: List[str]) -> None:
    src, dst = _source_and_destination(ctx, args)
    await fs_ops.compress_file(src, dst, ctx.settings.compression_quality, ctx.settings.chunk_size)


async def decompress_file(ctx: CommandContext, args: List[str]) -> None:
    src, dst = _source_and_destination(ctx, args)
    await fs_ops.decompress_file(src, dst, ctx.settings.chunk_size)


COMMAND_TABLE: Dict[str, CommandSpec] = {
    ".exit": CommandSpec(Command.EXIT, 0, exit_session),
    "up": CommandSpec(Command.GO_UP, 0, go_up),
    "cd": CommandSpec(Command.CHANGE_DIR, 1, change_dir),
    "ls": CommandSpec(Command.LIST_DIR, 0, list_dir),
    "cat": CommandSpec(Command.PRINT_FILE, 1, print_file),
    "add": CommandSpec(Command.CREATE_FILE, 1, create_file),
    "rn": CommandSpec(Command.RENAME_FILE, 2, rename_file),
    "cp": CommandSpec(Command.COPY_FILE, 2, copy_file),
    "mv": CommandSpec(Command.MOVE_FILE, 2, move_file),
    "rm": CommandSpec(Command.DELETE_FILE, 1, delete_file),
    "os": CommandSpec(Command.OS_QUERY, 1, os_query),
    "hash": CommandSpec(Command.HASH_FILE, 1, hash_file),
    "compress": CommandSpec(Command.COMPRESS_FILE, 2, compress_file),
    "decompress": CommandSpec(Command.DECOMPRESS_FILE, 2, decompress_file),
}


def lookup(keyword: str) -> CommandSpec:
    spec = COMMAND_TABLE.get(keyword)
    if spec is None:
        raise InvalidInputError()
    return spec
