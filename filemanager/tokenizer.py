from typing import List

QUOTE_CHARS = ("'", '"')


def _unwrap(token: str) -> str:
    if len(token) >= 2 and token[0] in QUOTE_CHARS and token[0] == token[-1]:
        return token[1:-1]
    return token


def tokenize(line: str) -> List[str]:
    """
    Splits an input line into argument tokens on unquoted spaces.
    Any quote character toggles quoting, whichever quote opened it; an unmatched
    quote is tolerated and simply keeps spaces literal until the end of the line.
    A token whose first and last characters are the same quote is unwrapped.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_quotes = False
    for ch in (line or "").strip():
        if ch in QUOTE_CHARS:
            in_quotes = not in_quotes
            current.append(ch)
        elif ch == " " and not in_quotes:
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(ch)
    if current:
        tokens.append("".join(current))
    return [_unwrap(t) for t in tokens]
