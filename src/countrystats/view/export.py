"""CSV projection of the (filtered, sorted) row set."""

import csv
from datetime import timezone, tzinfo
from io import StringIO
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from countrystats.view.columns import COLUMNS
from countrystats.view.formatting import csv_value

DEFAULT_CSV_FILENAME = "country_stats.csv"


def to_csv(rows: Sequence[Mapping[str, Any]], tz: Optional[tzinfo] = timezone.utc) -> str:
    """
    Serialize rows as CSV text with the catalog labels as header.

    Fields containing a comma, double quote or newline are quoted with inner
    quotes doubled. Lines are joined with a bare newline and the text has no
    trailing newline.
    """
    output_buffer = StringIO()
    writer = csv.writer(output_buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow([column.label for column in COLUMNS])
    for row in rows:
        writer.writerow([csv_value(row.get(column.key), column.kind, tz) for column in COLUMNS])
    return output_buffer.getvalue().rstrip("\n")


def write_csv(text: str, out: Path) -> Path:
    """Write CSV text to a file; a directory target gets country_stats.csv."""
    if out.is_dir():
        out = out / DEFAULT_CSV_FILENAME
    out.write_text(text, encoding="utf-8", newline="")
    return out
