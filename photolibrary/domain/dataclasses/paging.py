# photolibrary/domain/dataclasses/paging.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PageSlice:
    start: int
    end: int
    has_more: bool

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def __len__(self) -> int:
        return max(0, self.end - self.start)


@dataclass(frozen=True)
class PageWindow:
    """
    (offset, limit) request against an ordered result set. Resolution against
    a total count clamps both ends and never raises:

        offset >= total        -> empty slice, has_more=False
        limit None (or <= 0)   -> everything from offset
    """
    offset: int = 0
    limit: Optional[int] = None

    def resolve(self, total: int) -> PageSlice:
        total = max(0, int(total))
        start = min(max(int(self.offset), 0), total)
        if self.limit is not None and self.limit > 0:
            end = min(total, start + int(self.limit))
        else:
            end = total
        if start >= end:
            return PageSlice(start=start, end=start, has_more=False)
        return PageSlice(start=start, end=end, has_more=end < total)
