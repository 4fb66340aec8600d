import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from filemanager import __version__
from filemanager.config_loader import load_config
from filemanager.dispatcher import FileManager
from filemanager.log_utils import setup_logger
from filemanager.program_args import WrongArgumentsError, get_username
from filemanager.session import UNKNOWN_USERNAME
from filemanager.system_info import home_dir


def resolve_username(argv: List[str], console: Console) -> str:
    try:
        return get_username(argv)
    except WrongArgumentsError as exc:
        console.print(str(exc), style="red", markup=False, highlight=False)
        return UNKNOWN_USERNAME


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if argv == ["--version"]:
        print(__version__)
        return 0
    settings = load_config()
    logger = setup_logger(Path(settings.log_path) if settings.log_path else None, level=settings.log_level)
    console = Console()
    user_name = resolve_username(argv, console)
    manager = FileManager(home_dir(), user_name, settings=settings, console=console)
    try:
        asyncio.run(manager.run())
    except KeyboardInterrupt:
        logger.info("session_interrupt")
        # a stalled file operation keeps running on its daemon thread; it is not joined
        manager.executor.shutdown(wait=False, cancel_futures=True)
        console.print()
        manager.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
