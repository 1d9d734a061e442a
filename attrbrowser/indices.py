"""
Indices (precomputed lookup tables)
===================================

Built once after loading, since the record list never changes:

- `by_id["42"]` gives the position of record 42 in the sorted list.
- `by_effect["buff"]` gives the ascending positions of all "buff" records.
- `effect_options` is the category list for the effect filter.

Position lists are ascending, so selecting through an index keeps the same
order as a full scan.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
from .models import AttributeRecord

ALL = "all"

@dataclass
class Indices:
    """Container of precomputed indices for lookup and filtering."""
    by_id: Dict[str, int]
    by_effect: Dict[str, List[int]]
    effect_options: List[str]

def build_indices(records: Sequence[AttributeRecord]) -> Indices:
    """Build indices from the normalized record list."""
    by_id: Dict[str, int] = {}
    by_effect: Dict[str, List[int]] = {}

    for pos, r in enumerate(records):
        by_id.setdefault(r.id, pos)
        # dict keeps first-seen order of categories
        by_effect.setdefault(r.effect_key, []).append(pos)

    return Indices(by_id=by_id, by_effect=by_effect, effect_options=[ALL, *by_effect.keys()])

def find_record(records: Sequence[AttributeRecord], idx: Optional[Indices], record_id: str) -> Optional[AttributeRecord]:
    """Exact-id lookup. Returns None when no record has that id."""
    if idx is not None:
        pos = idx.by_id.get(record_id)
        return records[pos] if pos is not None else None
    return next((r for r in records if r.id == record_id), None)
