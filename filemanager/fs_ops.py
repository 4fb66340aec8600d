"""Blocking filesystem work, pushed onto worker threads so the event loop stays free.

Every public coroutine converts I/O and codec failures into
``OperationFailedError`` carrying the underlying message. Operations that
write a new file open it exclusively and remove the partial file when the
copy or codec step fails midway.
"""
import asyncio
import hashlib
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Tuple

import brotli

from filemanager.errors import OperationFailedError
from filemanager.schemas import PathKind

DEFAULT_CHUNK_SIZE = 64 * 1024


def _describe(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return f"{exc.strerror}: {exc.filename}" if exc.filename else exc.strerror
    return str(exc) or exc.__class__.__name__


@contextmanager
def _operation_errors() -> Iterator[None]:
    try:
        yield
    except (OSError, brotli.error) as exc:
        raise OperationFailedError(_describe(exc)) from exc


def _write_fresh(dst: Path, fill: Callable) -> None:
    """Creates ``dst`` (which must not exist) and fills it; a failed fill leaves nothing behind."""
    with open(dst, "xb") as fout:
        try:
            fill(fout)
        except BaseException:
            fout.close()
            try:
                os.remove(dst)
            except OSError:
                pass
            raise


# --- Directory listing ---
def _scan(directory: Path) -> List[Tuple[str, PathKind]]:
    entries: List[Tuple[str, PathKind]] = []
    with os.scandir(directory) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            entries.append((entry.name, PathKind.DIRECTORY if is_dir else PathKind.FILE))
    entries.sort(key=lambda e: (e[1] != PathKind.DIRECTORY, e[0]))
    return entries


async def list_directory(directory: Path) -> List[Tuple[str, PathKind]]:
    """Entries of ``directory``: directories first, then files, each group by name."""
    with _operation_errors():
        return await asyncio.to_thread(_scan, directory)


# --- Reading ---
async def stream_file(path: Path, sink: Callable[[bytes], None], chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    with _operation_errors():
        f = await asyncio.to_thread(open, path, "rb")
        try:
            while True:
                chunk = await asyncio.to_thread(f.read, chunk_size)
                if not chunk:
                    break
                sink(chunk)
        finally:
            f.close()


def _hash_sync(path: Path, algorithm: str, chunk_size: int) -> str:
    h = hashlib.new(algorithm)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


async def hash_file(path: Path, algorithm: str = "sha256", chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    with _operation_errors():
        return await asyncio.to_thread(_hash_sync, path, algorithm, chunk_size)


# --- Mutations ---
def _touch_sync(path: Path) -> None:
    with open(path, "xb"):
        pass


async def create_empty_file(path: Path) -> None:
    with _operation_errors():
        await asyncio.to_thread(_touch_sync, path)


async def rename_file(src: Path, dst: Path) -> None:
    """Falls back to copy-and-delete when the destination is on another filesystem."""
    with _operation_errors():
        await asyncio.to_thread(shutil.move, src, dst)


def _copy_sync(src: Path, dst: Path, chunk_size: int) -> None:
    with open(src, "rb") as fin:
        _write_fresh(dst, lambda fout: shutil.copyfileobj(fin, fout, chunk_size))


async def copy_file(src: Path, dst: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    with _operation_errors():
        await asyncio.to_thread(_copy_sync, src, dst, chunk_size)


async def move_file(src: Path, dst: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    """Copy, then remove the source; works across filesystems."""
    with _operation_errors():
        await asyncio.to_thread(_copy_sync, src, dst, chunk_size)
        await asyncio.to_thread(os.remove, src)


async def delete_file(path: Path) -> None:
    with _operation_errors():
        await asyncio.to_thread(os.remove, path)


# --- Compression ---
def _compress_sync(src: Path, dst: Path, quality: int, chunk_size: int) -> None:
    def fill(fout) -> None:
        compressor = brotli.Compressor(quality=quality)
        with open(src, "rb") as fin:
            for chunk in iter(lambda: fin.read(chunk_size), b""):
                fout.write(compressor.process(chunk))
        fout.write(compressor.finish())

    _write_fresh(dst, fill)


def _decompress_sync(src: Path, dst: Path, chunk_size: int) -> None:
    def fill(fout) -> None:
        decompressor = brotli.Decompressor()
        with open(src, "rb") as fin:
            for chunk in iter(lambda: fin.read(chunk_size), b""):
                fout.write(decompressor.process(chunk))
        if not decompressor.is_finished():
            raise OperationFailedError("compressed stream is truncated")

    _write_fresh(dst, fill)


async def compress_file(src: Path, dst: Path, quality: int = 11, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    with _operation_errors():
        await asyncio.to_thread(_compress_sync, src, dst, quality, chunk_size)


async def decompress_file(src: Path, dst: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    with _operation_errors():
        await asyncio.to_thread(_decompress_sync, src, dst, chunk_size)
