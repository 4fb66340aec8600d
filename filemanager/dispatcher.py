import asyncio
import sys
import threading
from pathlib import Path
from typing import List, Optional, TextIO, Union

from rich.console import Console

from filemanager.commands import CommandContext, lookup
from filemanager.errors import FileManagerError, InvalidInputError, OperationFailedError
from filemanager.log_utils import get_logger
from filemanager.output import OutputWriter
from filemanager.schemas import Settings
from filemanager.session import UNKNOWN_USERNAME, Session
from filemanager.tokenizer import tokenize
from filemanager.workers import DaemonThreadExecutor

# End-of-input marker on the line queue
_EOF = None


class FileManager:
    """
    One interactive session: owns the session state, the writer and the command lock.

    Lines are handled one at a time. ``handle_line`` holds a lock across the whole
    tokenize/dispatch/await cycle, so a second line arriving while a file operation
    is pending waits for it instead of interleaving with it.
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        user_name: str = UNKNOWN_USERNAME,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.session = Session(root_dir=Path(root_dir), user_name=user_name)
        self.settings = settings or Settings()
        self.writer = OutputWriter(self.session, console)
        self.logger = get_logger("dispatcher")
        self.commands_run = 0
        self._lock = asyncio.Lock()
        self._farewell_done = False
        self.executor = DaemonThreadExecutor()

    @property
    def closed(self) -> bool:
        return self.session.closed

    def _context(self) -> CommandContext:
        return CommandContext(session=self.session, writer=self.writer, settings=self.settings)

    def _show_prompt(self) -> None:
        self.writer.print_current_dir()
        self.writer.prompt(self.settings.prompt)

    def greet(self) -> None:
        self.logger.info("session_start root=%s", self.session.root_dir)
        self.writer.writeln(f"Welcome to the File Manager, {self.session.user_name}!")
        self._show_prompt()

    def close(self) -> None:
        """Farewell and mark the session closed; safe to call more than once."""
        self.session.closed = True
        if self._farewell_done:
            return
        self._farewell_done = True
        self.writer.writeln(f"Thank you for using File Manager, {self.session.user_name}, goodbye!")
        self.logger.info("session_end commands=%d", self.commands_run)

    async def handle_line(self, line: str) -> None:
        if self.session.input_suppressed or self.session.closed:
            return
        tokens = tokenize(line)
        if not tokens:
            return
        async with self._lock:
            if self.session.closed:
                return
            await self._dispatch(tokens)
            if self.session.closed:
                self.close()
            else:
                self._show_prompt()

    async def _dispatch(self, tokens: List[str]) -> None:
        keyword, args = tokens[0], tokens[1:]
        self.commands_run += 1
        try:
            spec = lookup(keyword)
            if len(args) != spec.arity:
                raise InvalidInputError()
            self.logger.info("command %s", spec.command.value)
            await spec.handler(self._context(), args)
        except FileManagerError as exc:
            self.logger.debug("command_failed %s: %s", keyword, exc.__class__.__name__)
            self.writer.error(str(exc))
        except Exception as exc:
            self.logger.exception("command_exception %s", keyword)
            self.writer.error(str(OperationFailedError(str(exc) or exc.__class__.__name__)))

    # --- REPL ---
    def _start_reader(self, stream: TextIO, queue: "asyncio.Queue[Optional[str]]") -> threading.Thread:
        loop = asyncio.get_running_loop()

        def _pump() -> None:
            try:
                while True:
                    raw = stream.readline()
                    if not raw:
                        break
                    loop.call_soon_threadsafe(queue.put_nowait, raw.rstrip("\r\n"))
            except (OSError, ValueError):
                self.logger.exception("stdin_read_failed")
            finally:
                try:
                    loop.call_soon_threadsafe(queue.put_nowait, _EOF)
                except RuntimeError:
                    # loop already closed after .exit
                    pass

        # daemon: a blocked readline must not keep the process alive after close
        reader = threading.Thread(target=_pump, name="filemanager-stdin", daemon=True)
        reader.start()
        return reader

    async def run(self, stream: Optional[TextIO] = None) -> None:
        """Reads lines into a queue and handles them strictly in arrival order until close or EOF."""
        asyncio.get_running_loop().set_default_executor(self.executor)
        queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self._start_reader(stream or sys.stdin, queue)
        self.greet()
        while not self.session.closed:
            line = await queue.get()
            if line is _EOF:
                self.close()
                break
            await self.handle_line(line)
