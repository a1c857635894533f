"""
Source and view access to a report's records.

source() is the complete record list in generation order. view() returns a
sorted/filtered/paged copy for interactive display and never changes the source.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from app.features.reports.columns import ColumnSet, cell_text, column_value


@dataclass(frozen=True)
class ListView:
    """One page of a sorted and filtered report."""
    items: List[Any]
    total: int
    page: int
    page_size: Optional[int]
    pages: int


class ReportList:
    """Materialized report records with two access modes."""

    def __init__(self, records: Sequence[Any], columns: ColumnSet, sortable: Optional[Sequence[str]] = None):
        self._records = tuple(records)
        self.columns = columns
        self.sortable = tuple(sortable if sortable is not None else columns.keys())

    def __len__(self) -> int:
        return len(self._records)

    def source(self) -> List[Any]:
        """Every record, unsorted, unfiltered and unpaginated."""
        return list(self._records)

    def view(
        self,
        sort: Optional[str] = None,
        direction: str = "asc",
        filters: Optional[Dict[str, str]] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ListView:
        """
        Filtered, sorted and paged records.

        Args:
            sort: Column key to sort by; must be one of the sortable keys
            direction: "asc" or "desc"
            filters: {column key: text}; case-insensitive substring match, all must match
            page: 1-based page number
            page_size: Records per page; None disables paging

        Raises:
            ValueError: On unknown sort/filter keys or invalid paging arguments
        """
        if direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction: {direction}")
        if page < 1:
            raise ValueError("Page must be 1 or greater")
        if page_size is not None and page_size < 1:
            raise ValueError("Page size must be 1 or greater")

        items = list(self._records)

        for key, text in (filters or {}).items():
            if key not in self.columns:
                raise ValueError(f"Unknown filter column: {key}")
            needle = text.lower()
            column = self.columns[key]
            items = [item for item in items if needle in cell_text(column_value(item, column)).lower()]

        if sort is not None:
            if sort not in self.sortable:
                raise ValueError(f"Column is not sortable: {sort}")
            column = self.columns[sort]
            items.sort(key=lambda item: _sort_key(column_value(item, column)), reverse=direction == "desc")

        total = len(items)
        if page_size is None:
            return ListView(items=items, total=total, page=1, page_size=None, pages=1)

        start = (page - 1) * page_size
        return ListView(
            items=items[start:start + page_size],
            total=total,
            page=page,
            page_size=page_size,
            pages=max(1, math.ceil(total / page_size)),
        )


def _sort_key(value: Any):
    # None sorts first ascending; strings compare case-insensitively
    if value is None:
        return (0, "")
    if isinstance(value, str):
        return (1, value.lower())
    return (1, value)
