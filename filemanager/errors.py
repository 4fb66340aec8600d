"""Error kinds raised by the validator and the command handlers.

Every one of them is caught once, at the dispatch boundary, and shown to the
user as a single error line.
"""


class FileManagerError(Exception):
    """Base class for all user-visible command failures."""


class InvalidInputError(FileManagerError):
    """Unknown command, malformed syntax or wrong argument count.

    The message is fixed so that unparseable input never echoes paths back.
    """

    def __init__(self) -> None:
        super().__init__("Invalid input")


class InvalidArgumentError(FileManagerError):
    pass


class NotFoundError(FileManagerError):
    pass


class AlreadyExistsError(FileManagerError):
    pass


class OutsideRootError(FileManagerError):
    pass


class OperationFailedError(FileManagerError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Operation failed: {detail}")
