from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Optional, Union

from csvopal.errors import CsvOpalUserError

QUOTE = '"'


def dequote(text: str) -> str:
    """Remove every literal double-quote character from `text`."""
    return text.replace(QUOTE, "")


def is_quoted(text: str) -> bool:
    return len(text) >= 2 and text.startswith(QUOTE) and text.endswith(QUOTE)


def _split_list(value: str) -> list:
    # "" means an empty list, not one empty token
    if value is None or value == "":
        return []
    return value.split(",")


def parse_column_number(token: Union[str, int], *, what: str = "column number") -> int:
    """Parse a 1-based column number, rejecting anything that is not a positive integer."""
    if isinstance(token, bool):
        token = str(token)
    if isinstance(token, int):
        n = token
    else:
        s = str(token).strip()
        if not s.isdigit():
            raise CsvOpalUserError(
                "E_COLUMN_NUMBER",
                f"Invalid {what}: {token!r}.",
                hint="Column numbers are positive integers counted from 1, e.g. -x 2,5",
            )
        n = int(s)
    if n < 1:
        raise CsvOpalUserError(
            "E_COLUMN_NUMBER",
            f"Invalid {what}: {token!r}.",
            hint="Column numbers are counted from 1.",
        )
    return n


def parse_column_numbers(value: Union[str, Iterable[Union[str, int]], None]) -> FrozenSet[int]:
    """Parse a comma separated list (or an iterable) of column numbers.

    Empty tokens are skipped, duplicates collapse.
    """
    if value is None:
        return frozenset()
    tokens = _split_list(value) if isinstance(value, str) else list(value)
    out = set()
    for tok in tokens:
        if isinstance(tok, str) and tok.strip() == "":
            continue
        out.add(parse_column_number(tok))
    return frozenset(out)


def parse_indexed_list(value: Optional[str]) -> Dict[int, str]:
    """Parse a dual-syntax list into {column number: value}.

    Each comma separated token is either a bare value, assigned to the column
    equal to its 1-based position in the list, or `N:value`, pinned to column
    N. Every token consumes a position. Later tokens override earlier ones.
    Empty tokens assign nothing.

        >>> parse_indexed_list("1:vf,vt,4:last")
        {1: 'vf', 2: 'vt', 4: 'last'}
    """
    out: Dict[int, str] = {}
    for pos, tok in enumerate(_split_list(value), start=1):
        if tok == "":
            continue
        if ":" in tok:
            idx, _, name = tok.partition(":")
            out[parse_column_number(idx, what=f"column number in {tok!r}")] = name
        else:
            out[pos] = tok
    return out
