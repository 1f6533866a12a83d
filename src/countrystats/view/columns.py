"""Column catalog shared by rendering, sorting and CSV export."""

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional

ColumnKind = Literal["text", "number", "percent", "date"]


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    kind: ColumnKind = "text"
    align: Optional[str] = None


COLUMNS: List[Column] = [
    Column("No.", "No.", "number", "right"),
    Column("Country Name", "Country Name", "text"),
    Column("Population", "Population", "number", "right"),
    Column("1% Population", "1% Population", "number", "right"),
    Column("Est. Count", "Est. Count", "number", "right"),
    Column("% of Population", "% of Population", "percent", "right"),
    Column("Source", "Source", "text"),
    Column("Conservative Est.", "Conservative Est.", "number", "right"),
    Column("Mid Est.", "Mid Est.", "number", "right"),
    Column("High Est.", "High Est.", "number", "right"),
    Column("% Conservative", "% Conservative", "percent", "right"),
    Column("% Mid", "% Mid", "percent", "right"),
    Column("% High", "% High", "percent", "right"),
    Column("es_created", "ES Created", "date"),
    Column("pg_created", "PG Created", "date"),
]

COLUMNS_BY_KEY: Dict[str, Column] = {column.key: column for column in COLUMNS}

NAME_COLUMN = COLUMNS_BY_KEY["Country Name"]


def get_column(key: str) -> Column:
    """Resolve a column key; unknown keys fall back to the country name column."""
    return COLUMNS_BY_KEY.get(key, NAME_COLUMN)
