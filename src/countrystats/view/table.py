"""Tabular view model: search, sort, pagination and export over one row set.

Derived views are recomputed from the held rows and the current controls on
every access; nothing derived is cached.
"""

import math
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from countrystats.view.columns import COLUMNS
from countrystats.view.export import to_csv, write_csv
from countrystats.view.formatting import render_cell
from countrystats.view.sorting import Row, SortSpec, sort_rows

DEFAULT_PAGE_SIZE = 25


def _country_name(row: Row) -> str:
    name = row.get("Country Name")
    return "" if name is None else str(name)


def filter_rows(rows: Sequence[Row], query: str) -> Sequence[Row]:
    """
    Case-insensitive substring match on the country name.

    A blank query returns the input sequence itself.
    """
    needle = (query or "").strip().casefold()
    if not needle:
        return rows
    return [row for row in rows if needle in _country_name(row).casefold()]


def page_count_for(total: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return max(1, math.ceil(total / page_size))


def paginate(rows: Sequence[Row], page_size: int, page_number: int) -> Tuple[List[Row], int, int]:
    """
    Slice one page out of rows.

    Args:
        rows: Full (filtered, sorted) rows
        page_size: Rows per page (>= 1)
        page_number: Requested 1-based page; clamped into [1, page_count]

    Returns:
        (page_rows, effective_page, page_count)
    """
    page_count = page_count_for(len(rows), page_size)
    effective_page = max(1, min(page_number, page_count))
    start = (effective_page - 1) * page_size
    return list(rows[start:start + page_size]), effective_page, page_count


@dataclass(frozen=True)
class PageView:
    rows: List[Row]
    page: int
    page_count: int
    total_rows: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count


@dataclass
class TableView:
    """View state for the country stats table.

    `rows` is the canonical fetched row set and is never modified here.
    `page` is the requested page; the effective page is always clamped to
    the current filtered row count.
    """
    rows: Sequence[Row] = field(default_factory=list)
    query: str = ""
    sort: SortSpec = field(default_factory=SortSpec)
    page_size: int = DEFAULT_PAGE_SIZE
    page: int = 1
    loading: bool = False
    error: Optional[str] = None
    tz: Optional[tzinfo] = timezone.utc

    # Controls

    def set_rows(self, rows: Sequence[Row]) -> None:
        self.rows = list(rows)
        self.error = None
        self.loading = False

    def set_error(self, message: str) -> None:
        """Replace the whole view with an error state."""
        self.rows = []
        self.error = message
        self.loading = False

    def set_query(self, query: str) -> None:
        self.query = query
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.page_size = page_size
        self.page = 1

    def toggle_sort(self, key: str) -> SortSpec:
        self.sort = self.sort.toggled(key)
        return self.sort

    def go_to_page(self, page: int) -> int:
        self.page = max(1, min(page, self.page_count))
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    # Derived views

    @property
    def filtered_rows(self) -> Sequence[Row]:
        return filter_rows(self.rows, self.query)

    @property
    def sorted_rows(self) -> List[Row]:
        return sort_rows(self.filtered_rows, self.sort.key, self.sort.direction)

    @property
    def page_count(self) -> int:
        return page_count_for(len(self.filtered_rows), self.page_size)

    @property
    def current_page(self) -> int:
        return max(1, min(self.page, self.page_count))

    def page_view(self) -> PageView:
        ordered = self.sorted_rows
        page_rows, effective_page, page_count = paginate(ordered, self.page_size, self.page)
        return PageView(page_rows, effective_page, page_count, len(ordered))

    def header_labels(self) -> List[str]:
        labels = []
        for column in COLUMNS:
            if column.key == self.sort.key:
                arrow = "▲" if self.sort.direction == "asc" else "▼"
                labels.append(f"{column.label} {arrow}")
            else:
                labels.append(column.label)
        return labels

    def rendered_page(self) -> List[List[str]]:
        return [[render_cell(row, column, self.tz) for column in COLUMNS] for row in self.page_view().rows]

    def status_text(self) -> str:
        if self.loading:
            return "Loading…"
        return f"{len(self.filtered_rows):,} rows"

    def to_csv(self) -> str:
        """CSV of the full filtered and sorted set (not just the current page)."""
        return to_csv(self.sorted_rows, self.tz)

    def download_csv(self, out: Path) -> Path:
        return write_csv(self.to_csv(), out)


def column_alignments() -> List[str]:
    return [column.align or "left" for column in COLUMNS]
