"""Kind-aware row sorting."""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, List, Literal, Mapping, Sequence

from countrystats.errors import MalformedValue
from countrystats.utils.time import parse_timestamp
from countrystats.view.columns import Column, get_column
from countrystats.view.formatting import canonical_percent, to_number

Direction = Literal["asc", "desc"]

Row = Mapping[str, Any]


@dataclass(frozen=True)
class SortSpec:
    key: str = "Country Name"
    direction: Direction = "asc"

    def toggled(self, key: str) -> "SortSpec":
        """Same column flips direction; a new column starts ascending."""
        if key == self.key:
            return SortSpec(key, "desc" if self.direction == "asc" else "asc")
        return SortSpec(key, "asc")


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def compare_text(a: Any, b: Any) -> int:
    sa, sb = str(a), str(b)
    return _sign((sa.casefold(), sa), (sb.casefold(), sb))


def compare_values(a: Any, b: Any, kind: str) -> int:
    """
    Compare two raw cell values under a column kind.

    None sorts after any present value. If either side cannot be read under
    the kind, both sides are compared as strings.
    """
    if a is None:
        return 0 if b is None else 1
    if b is None:
        return -1

    try:
        if kind == "number":
            return _sign(to_number(a), to_number(b))
        if kind == "percent":
            return _sign(canonical_percent(a), canonical_percent(b))
        if kind == "date":
            return _sign(parse_timestamp(a), parse_timestamp(b))
    except MalformedValue:
        return compare_text(a, b)
    return compare_text(a, b)


def compare_rows(a: Row, b: Row, column: Column) -> int:
    return compare_values(a.get(column.key), b.get(column.key), column.kind)


def sort_rows(rows: Sequence[Row], column_key: str, direction: Direction = "asc") -> List[Row]:
    """
    Stable sort of rows by one column.

    "desc" reverses the complete ascending result, so absent values come
    first and equal rows appear in reverse input order.

    Args:
        rows: Rows to sort (not modified)
        column_key: Catalog key; unknown keys sort by country name
        direction: "asc" or "desc"

    Returns:
        New list of rows
    """
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unsupported sort direction: {direction}")

    column = get_column(column_key)
    ordered = sorted(rows, key=cmp_to_key(lambda a, b: compare_rows(a, b, column)))
    if direction == "desc":
        ordered.reverse()
    return ordered
