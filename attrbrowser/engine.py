"""
Query engine
============

Given the full record list, a free-text query and an effect filter, select the
matching records. Nothing here mutates records; every call returns a new
result.

Matching rules:
- the effect filter is either "all" or an exact (case-sensitive) category,
  compared with the record's effect type ("none" when absent);
- the query is trimmed and case-folded, then searched as a substring of the
  name, attribute class and description; a query equal to a record id also
  matches that record;
- both rules must hold, and the input order is kept.

The export helpers write the current selection with pandas.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import List, Optional, Sequence, Tuple
import logging
import pandas as pd
from .models import AttributeRecord
from .indices import ALL, Indices, build_indices

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json", "xlsx")

@dataclass(frozen=True)
class QueryResult:
    """Matching records (in input order) plus their count."""
    records: Tuple[AttributeRecord, ...]

    @property
    def count(self) -> int:
        return len(self.records)


def matches_text(r: AttributeRecord, folded: str, trimmed: str) -> bool:
    if not folded:
        return True
    return (
        folded in r.name.casefold()
        or folded in (r.attribute_class or "").casefold()
        or folded in (r.description_string or "").casefold()
        or r.id == trimmed
    )

def filter_records(
    records: Sequence[AttributeRecord],
    query: str = "",
    effect: str = ALL,
    idx: Optional[Indices] = None,
) -> QueryResult:
    """Apply the effect filter and the text query.

    With `idx`, the effect filter picks candidates from `idx.by_effect`
    instead of scanning every record.
    """
    query = query or ""
    effect = effect or ALL
    trimmed = query.strip()
    folded = trimmed.casefold()

    if effect == ALL:
        candidates: Sequence[AttributeRecord] = records
    elif idx is not None:
        candidates = [records[i] for i in idx.by_effect.get(effect, [])]
    else:
        candidates = [r for r in records if r.effect_key == effect]

    out = tuple(r for r in candidates if matches_text(r, folded, trimmed))
    return QueryResult(records=out)

def build_effect_options(records: Sequence[AttributeRecord]) -> List[str]:
    """"all" followed by every effect category, in first-seen order."""
    return build_indices(records).effect_options


# ---------------- Export ----------------
def records_to_frame(records: Sequence[AttributeRecord]) -> pd.DataFrame:
    """One row per record, one column per typed field."""
    columns = [f.name for f in fields(AttributeRecord) if f.name != "raw"]
    return pd.DataFrame([r.to_row() for r in records], columns=columns)

def export_records(records: Sequence[AttributeRecord], path: str, fmt: str) -> str:
    """Write records to CSV, JSON or XLSX. Returns the path written."""
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"export format must be one of: {', '.join(EXPORT_FORMATS)}")
    df = records_to_frame(records)
    if fmt == "csv":
        df.to_csv(path, index=False, encoding="utf-8")
    elif fmt == "json":
        df.to_json(path, orient="records", indent=2, force_ascii=False)
    else:
        df.to_excel(path, index=False, engine="openpyxl")
    logger.info("Exported %d records to %s (%s)", len(df), path, fmt)
    return path
