"""Kind-aware cell formatting for screen display and CSV.

Screen rendering shows absent values as a placeholder glyph; CSV leaves them
empty. Values that cannot be read under their column kind are shown as-is.

Percent columns accept both fractions and percentages: any value whose
magnitude is at most 1 is treated as a fraction and scaled by 100. A true
0.5% therefore displays as 50.00%.
"""

import math
from datetime import timezone, tzinfo
from typing import Any, Mapping, Optional

from countrystats.errors import MalformedValue
from countrystats.utils.time import calendar_date
from countrystats.view.columns import Column

PLACEHOLDER = "—"


def resolve_timezone(name: str) -> Optional[tzinfo]:
    """Map the view.date_timezone setting to a tzinfo (None = host local time)."""
    return None if name.lower() == "local" else timezone.utc


def to_number(value: Any) -> int | float:
    """
    Read a cell value as a finite number.

    Raises:
        MalformedValue: For None, booleans, blank or non-numeric text, NaN and infinities
    """
    if isinstance(value, bool) or value is None:
        raise MalformedValue(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        num = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            num = int(text)
        except ValueError:
            try:
                num = float(text)
            except ValueError as e:
                raise MalformedValue(f"Not a number: {value!r}") from e
    else:
        raise MalformedValue(f"Not a number: {value!r}")

    if isinstance(num, float) and not math.isfinite(num):
        raise MalformedValue(f"Not a finite number: {value!r}")
    return num


def canonical_percent(value: Any) -> float:
    """Scale fractions (|v| <= 1) to percentages; larger values pass through."""
    num = to_number(value)
    if abs(num) <= 1:
        # round off binary noise so 0.42 and 42 compare equal
        num = round(num * 100, 12)
    return num


def plain_number(num: int | float) -> str:
    """Shortest round-trip rendering; integral floats drop the ".0"."""
    if isinstance(num, int):
        return str(num)
    if num.is_integer():
        return str(int(num))
    return repr(num)


def format_text(value: Any) -> str:
    return PLACEHOLDER if value is None else str(value)


def format_number(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        num = to_number(value)
    except MalformedValue:
        return str(value)
    if isinstance(num, int) or num.is_integer():
        return f"{int(num):,}"
    return f"{num:,.3f}".rstrip("0").rstrip(".")


def format_percent(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        num = canonical_percent(value)
    except MalformedValue:
        return str(value)
    return f"{num:.2f}%"


def format_date(value: Any, tz: Optional[tzinfo] = timezone.utc) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    try:
        return calendar_date(value, tz)
    except MalformedValue:
        return str(value)


def format_value(value: Any, kind: str, tz: Optional[tzinfo] = timezone.utc) -> str:
    """Screen rendering of one raw value under a column kind."""
    if kind == "number":
        return format_number(value)
    if kind == "percent":
        return format_percent(value)
    if kind == "date":
        return format_date(value, tz)
    return format_text(value)


def render_cell(row: Mapping[str, Any], column: Column, tz: Optional[tzinfo] = timezone.utc) -> str:
    return format_value(row.get(column.key), column.kind, tz)


def csv_value(value: Any, kind: str, tz: Optional[tzinfo] = timezone.utc) -> str:
    """
    CSV rendering of one raw value under a column kind.

    Absent values are empty. Percents are canonicalized at full precision
    without the '%' suffix; dates are YYYY-MM-DD. Unreadable values are kept
    as their raw string.
    """
    if value is None:
        return ""
    try:
        if kind == "date":
            return calendar_date(value, tz)
        if kind == "percent":
            return plain_number(canonical_percent(value))
        if kind == "number":
            return plain_number(to_number(value))
    except MalformedValue:
        return str(value)
    return str(value)
