from contextlib import contextmanager
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from filemanager.session import Session

THEME = {
    "error": "red",
    "status": "bold cyan",
    "header": "bright_cyan",
}


class MessageKind(str, Enum):
    PLAIN = "plain"
    ERROR = "error"
    STATUS = "status"


class OutputWriter:
    """Terminal output for one session; input handling is suppressed while it writes."""

    def __init__(self, session: Session, console: Optional[Console] = None) -> None:
        self.session = session
        self.console = console or Console()

    @contextmanager
    def _suppress_input(self) -> Iterator[None]:
        previous = self.session.input_suppressed
        self.session.input_suppressed = True
        try:
            yield
        finally:
            self.session.input_suppressed = previous

    def write(self, data: str, kind: MessageKind = MessageKind.PLAIN, newline: bool = False) -> None:
        style = THEME.get(kind.value)
        text = f"$ {data} " if kind == MessageKind.ERROR else data
        with self._suppress_input():
            self.console.print(
                text,
                style=style,
                end="\n" if newline else "",
                markup=False,
                highlight=False,
                emoji=False,
                soft_wrap=True,
            )

    def writeln(self, data: str, kind: MessageKind = MessageKind.PLAIN) -> None:
        self.write(data, kind, newline=True)

    def error(self, message: str) -> None:
        self.writeln(message, MessageKind.ERROR)

    def print_current_dir(self) -> None:
        self.writeln(f"You are currently in {self.session.current_dir}", MessageKind.STATUS)

    def prompt(self, text: str) -> None:
        if text:
            self.write(text)
            self.flush()

    def write_bytes(self, chunk: bytes) -> None:
        """Raw file content, passed through untouched when the console has a byte stream."""
        with self._suppress_input():
            stream = self.console.file
            buffer = getattr(stream, "buffer", None)
            if buffer is not None:
                stream.flush()
                buffer.write(chunk)
                buffer.flush()
            else:
                stream.write(chunk.decode("utf-8", errors="replace"))

    def table(self, columns: Sequence[str], rows: Iterable[Sequence[str]], title: Optional[str] = None) -> None:
        table = Table(title=title, show_header=True, header_style=THEME["header"])
        table.add_column("(index)", style="dim")
        for col in columns:
            table.add_column(col, style="white")
        for idx, row in enumerate(rows):
            table.add_row(str(idx), *[Text(str(v)) for v in row])
        with self._suppress_input():
            self.console.print(table, markup=False, highlight=False, emoji=False)

    def flush(self) -> None:
        try:
            self.console.file.flush()
        except (AttributeError, ValueError):
            pass
