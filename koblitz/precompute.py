"""
Explicit side table of wNAF precomputations.

Each entry is keyed by the *identity* of an affine point (not its value)
and records the window width chosen for that point together with the
table built for that width.  Entries hold a strong reference to their
point, so an ``id()`` can never be recycled while it is registered;
nothing is dropped implicitly.  Changing the width discards the table.

The cache is not synchronised.  Building a table is a multi-step
sequence (compute, normalise, store); threads that may race on the first
use of the same point must serialise that call themselves.  Reading a
finished table is safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger("koblitz.precompute")

DEFAULT_WINDOW = 1
# tables hold (128/W + 1)·2^(W-1) points
MAX_WINDOW = 16


@dataclass
class _Entry:
    point: Any
    window: int
    table: Optional[List[Any]] = None


class PrecomputeCache:
    """Point-identity → (window width, precompute table)."""

    def __init__(self) -> None:
        self._entries: Dict[int, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, point: object) -> bool:
        return self._lookup(point) is not None

    def _lookup(self, point: object) -> Optional[_Entry]:
        entry = self._entries.get(id(point))
        if entry is None or entry.point is not point:
            return None
        return entry

    # window width -----------------------------------------------------------
    def window_size(self, point: object) -> int:
        entry = self._lookup(point)
        return entry.window if entry is not None else DEFAULT_WINDOW

    def set_window_size(self, point: object, window: int) -> None:
        """Assign *window* to *point*, discarding any existing table."""
        if not 1 <= window <= MAX_WINDOW or 256 % window:
            raise ValueError(
                f"invalid precomputation window {window}, "
                f"must divide 256 and be at most {MAX_WINDOW}"
            )
        old = self._lookup(point)
        if old is not None and old.table is not None:
            logger.debug(
                "discarding %d-entry table for %r (window %d -> %d)",
                len(old.table), point, old.window, window,
            )
        self._entries[id(point)] = _Entry(point=point, window=window)

    # tables -----------------------------------------------------------------
    def get(self, point: object) -> Optional[List[Any]]:
        entry = self._lookup(point)
        return entry.table if entry is not None else None

    def store(self, point: object, table: List[Any]) -> None:
        entry = self._lookup(point)
        if entry is None:
            raise KeyError(f"no window registered for {point!r}")
        entry.table = table
        logger.debug(
            "stored %d-entry table for %r (window %d)",
            len(table), point, entry.window,
        )

    def discard(self, point: object) -> None:
        """Forget *point* entirely (window width and table)."""
        if self._lookup(point) is not None:
            del self._entries[id(point)]

    def clear(self) -> None:
        self._entries.clear()


# process-wide table used by ``Point`` / ``JacobianPoint``
PRECOMPUTES = PrecomputeCache()
