from typing import Dict, List, Optional, Sequence

from filemanager.session import UNKNOWN_USERNAME

WRONG_COMMAND_LINE_ARGUMENTS = "Wrong command line arguments!"
USERNAME_ARG_NAME = "username"


class WrongArgumentsError(ValueError):
    def __init__(self) -> None:
        super().__init__(WRONG_COMMAND_LINE_ARGUMENTS)


def parse_named_args(argv: Optional[Sequence[str]]) -> List[Dict[str, str]]:
    """Each argument must look like ``--name=value``."""
    parsed = []
    for arg in argv or []:
        parts = arg.split("=")
        if len(parts) != 2 or not parts[0].startswith("--") or len(parts[0]) == 2:
            raise WrongArgumentsError()
        parsed.append({"name": parts[0][2:], "value": parts[1]})
    return parsed


def get_username(argv: Optional[Sequence[str]]) -> str:
    """
    Extracts the user name from exactly one ``--username=<value>`` argument.
    Raises WrongArgumentsError for anything else; an empty value yields the unknown marker.
    """
    parsed = parse_named_args(argv)
    if len(parsed) != 1 or parsed[0]["name"] != USERNAME_ARG_NAME:
        raise WrongArgumentsError()
    return parsed[0]["value"] or UNKNOWN_USERNAME
