"""Sequential id allocation for nodes and edges.

Ids are integer-valued strings (``"1"``, ``"2"``, ...), optionally prefixed
(edges use ``"e1"``, ``"e2"``, ...). The allocator is an explicit value owned
by the editor session and handed to the graph store; there is no module-level
counter.

INVARIANT: after ``reseed(ids)``, every allocated id is strictly larger than
any numeric id in *ids*. Reseed after every bulk load, before any new id is
handed out.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Leading integer, the way a lenient parser reads "12", "7abc", " 3".
_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def parse_numeric_id(value: str, prefix: str = "") -> int | None:
    """Return the integer part of *value*, or None if it has none.

    With a *prefix*, only ids starting with it are considered and the
    prefix is stripped before parsing.

    Examples:
        >>> parse_numeric_id("12")
        12
        >>> parse_numeric_id("7abc")
        7
        >>> parse_numeric_id("abc") is None
        True
        >>> parse_numeric_id("e4", prefix="e")
        4
    """
    if prefix:
        if not value.startswith(prefix):
            return None
        value = value[len(prefix) :]
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(0))


class IdAllocator:
    """Issues strictly increasing ids, starting at 1.

    Not thread-safe. The editor session is the only writer.
    """

    def __init__(self, prefix: str = "", *, start: int = 1) -> None:
        if start < 1:
            msg = f"Allocator start must be >= 1, got {start}"
            raise ValueError(msg)
        self._prefix = prefix
        self._next = start

    @property
    def prefix(self) -> str:
        return self._prefix

    def peek(self) -> int:
        """The numeric value the next call to :meth:`next` will use."""
        return self._next

    def next(self) -> str:
        value = self._next
        self._next += 1
        return f"{self._prefix}{value}"

    def reseed(self, existing_ids: Iterable[str]) -> None:
        """Set the next value to ``max(numeric ids) + 1``, or 1 if none.

        Non-numeric ids and values below 1 are ignored.
        """
        highest = 0
        for raw in existing_ids:
            parsed = parse_numeric_id(str(raw), self._prefix)
            if parsed is not None and parsed > highest:
                highest = parsed
        self._next = highest + 1

    def observe(self, existing_id: str) -> None:
        """Advance past *existing_id* if it is numeric. Never moves backwards."""
        parsed = parse_numeric_id(str(existing_id), self._prefix)
        if parsed is not None and parsed >= self._next:
            self._next = parsed + 1

    def __repr__(self) -> str:
        return f"IdAllocator(prefix={self._prefix!r}, next={self._next})"
