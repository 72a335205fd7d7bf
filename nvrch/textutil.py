"""Small string helpers shared by the server code."""

from __future__ import annotations

from collections.abc import Iterable

# Characters treated as whitespace by the C locale's isspace().
WHITESPACE = " \t\n\v\f\r"


def join_with_delim(strings: Iterable[str], delimiter: str) -> str:
    """Join ``strings`` with ``delimiter`` placed between consecutive items."""
    return delimiter.join(strings)


def strip_whitespace(text: str) -> str:
    """Return ``text`` without leading and trailing whitespace."""
    return text.strip(WHITESPACE)