import os
from pathlib import Path
from typing import Union

from filemanager.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    OutsideRootError,
)
from filemanager.log_utils import get_logger
from filemanager.schemas import PathKind, ValidationRequest
from filemanager.session import Session

logger = get_logger("sandbox")


# --- Path utility ---
def resolve_path(session: Session, candidate: Union[str, Path]) -> Path:
    """Resolves a relative or absolute path against the session's current directory."""
    return Path(os.path.abspath(os.path.join(str(session.current_dir), str(candidate))))


def is_within_root(path: Union[str, Path], root: Union[str, Path]) -> bool:
    """
    Case-insensitive containment check. The root itself counts as inside;
    a sibling sharing the root's name as a prefix (``/home/user2``) does not.
    """
    p = str(path).lower()
    r = str(root).lower()
    if p == r:
        return True
    return p.startswith(r.rstrip(os.sep) + os.sep)


def _matches_kind(path: Path, kind: PathKind) -> bool:
    if kind == PathKind.DIRECTORY:
        return path.is_dir()
    return path.is_file()


# --- Validation ---
def validate(session: Session, request: ValidationRequest) -> Path:
    """
    Returns the resolved absolute path when every precondition in ``request`` holds.
    The root check comes before any existence check, so a path outside the root is
    reported as such whether or not it exists.
    """
    if not request.path:
        raise InvalidArgumentError("Path argument is empty")
    resolved = resolve_path(session, request.path)
    if not resolved.is_absolute():
        raise InvalidArgumentError(f"Path is not absolute: {resolved}")
    real_root = os.path.realpath(session.root_dir)
    if not is_within_root(resolved, session.root_dir) or not is_within_root(os.path.realpath(resolved), real_root):
        logger.debug("sandbox_reject outside_root")
        raise OutsideRootError(f"Path is outside the root directory: {request.path}")
    if request.check_existence and not _matches_kind(resolved, request.kind):
        raise NotFoundError(f"No such {request.kind.value}: {request.path}")
    if request.check_non_existence and os.path.lexists(resolved):
        raise AlreadyExistsError(f"Already exists: {request.path}")
    return resolved


def validate_directory(session: Session, raw: str) -> Path:
    """Target of a directory-changing command: must be an existing directory inside root."""
    return validate(session, ValidationRequest(path=raw, kind=PathKind.DIRECTORY, check_existence=True))


def validate_file(
    session: Session,
    raw: str,
    check_existence: bool = False,
    check_non_existence: bool = False,
) -> Path:
    """
    Target of a file command. The parent must be an existing directory inside root,
    then the file itself is checked against the existence flags.
    """
    if not raw:
        raise InvalidArgumentError("Path argument is empty")
    target = resolve_path(session, raw)
    validate(session, ValidationRequest(path=str(target.parent), kind=PathKind.DIRECTORY, check_existence=True))
    return validate(
        session,
        ValidationRequest(
            path=raw,
            kind=PathKind.FILE,
            check_existence=check_existence,
            check_non_existence=check_non_existence,
        ),
    )
