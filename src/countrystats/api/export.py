"""Export API: country stats export for external consumption."""

import json
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from ..utils.time import utc_now_z
from ..view.export import to_csv, write_csv
from ..view.sorting import sort_rows
from ..view.table import filter_rows


def export_stats(
    rows: Sequence[Mapping[str, Any]],
    format: str = "csv",
    query: str = "",
    sort_key: str = "Country Name",
    direction: str = "asc",
    out: Path | None = None,
    tz: Optional[tzinfo] = timezone.utc,
) -> str:
    """
    Export stats rows after applying the same search and sort as the table.

    Args:
        rows: Wire records (as returned by the country-stats endpoint)
        format: Export format ("csv" or "json")
        query: Country name search text
        sort_key: Column key to sort by
        direction: "asc" or "desc"
        out: Output file path (if None, returns as string)
        tz: Calendar used for CSV dates

    Returns:
        Exported data as string (if out is None) or a confirmation message
    """
    selected = sort_rows(filter_rows(rows, query), sort_key, direction)

    if format == "csv":
        output = to_csv(selected, tz)
        if out:
            written = write_csv(output, out)
            return f"Exported to {written}"
        return output
    elif format == "json":
        export_data: Dict[str, Any] = {
            "export_schema_version": "1",
            "exported_at_utc": utc_now_z(),
            "data": [dict(row) for row in selected],
        }
        output = json.dumps(export_data, indent=2, ensure_ascii=False)
        if out:
            out.write_text(output, encoding="utf-8")
            return f"Exported to {out}"
        return output
    else:
        raise ValueError(f"Unsupported format: {format}")
