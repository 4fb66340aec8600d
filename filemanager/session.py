from dataclasses import dataclass, field
from pathlib import Path

UNKNOWN_USERNAME = "Unknown"


@dataclass
class Session:
    """State of one interactive session; owned by the dispatcher."""

    root_dir: Path
    user_name: str = UNKNOWN_USERNAME
    current_dir: Path = field(default=None)  # type: ignore[assignment]
    input_suppressed: bool = False
    closed: bool = False

    def __post_init__(self) -> None:
        self.root_dir = Path(self.root_dir).absolute()
        if self.current_dir is None:
            self.current_dir = self.root_dir
        else:
            self.current_dir = Path(self.current_dir).absolute()

    @property
    def at_root(self) -> bool:
        # same case-insensitive comparison the sandbox uses
        return str(self.current_dir).lower() == str(self.root_dir).lower()
