"""
Dataset loader (JSON -> AttributeRecord list)
=============================================

This module reads the custom attributes JSON document and converts each entry
into an `AttributeRecord`.

Key ideas:
- The document is a mapping of id -> field mapping, and every field is optional.
- Conversion helpers (_to_flag/_to_opt_str/_to_name) never fail; bad values
  degrade to defaults.
- Only the fetch/parse step can fail, and it fails as a whole (DataLoadFailure).
"""

from __future__ import annotations
from typing import Any, List, Mapping, Optional, Tuple
import json
import logging
import math
import requests
from .models import AttributeRecord

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "data/custom_attributes.json"
DEFAULT_TIMEOUT = 20.0

# Always read the freshest copy of the document
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class DataLoadFailure(Exception):
    """The attributes document could not be fetched or parsed."""


def _to_flag(x: Any) -> bool:
    """True only for "1", 1 or true; anything else (incl. missing) is False."""
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        return x == 1
    return x == "1"

def _to_text(x: Any) -> str:
    if isinstance(x, bool):
        return "true" if x else "false"
    return str(x)

def _to_opt_str(x: Any) -> Optional[str]:
    """Convert a field to text, keeping None as None."""
    if x is None:
        return None
    return _to_text(x)

def _to_name(x: Any, record_id: str) -> str:
    if x is None:
        return f"attribute {record_id}"
    return _to_text(x)

def _id_sort_key(record_id: str) -> Tuple[int, float, str]:
    """Numeric ids first (by value), then the rest lexicographically."""
    try:
        value = float(record_id)
    except ValueError:
        return (1, 0.0, record_id)
    if math.isnan(value):
        return (1, 0.0, record_id)
    return (0, value, record_id)


def normalize(raw: Mapping[str, Any]) -> List[AttributeRecord]:
    """Build the ordered record list from the decoded document.

    Args:
        raw: mapping of record id -> field mapping (or None).

    Returns:
        One AttributeRecord per key, sorted by numeric id.
    """
    if not isinstance(raw, Mapping):
        raise DataLoadFailure(f"Expected a JSON object at top level, got {type(raw).__name__}")

    records: List[AttributeRecord] = []
    for key, data in raw.items():
        record_id = str(key)
        d = data if isinstance(data, Mapping) else {}
        records.append(AttributeRecord(
            id=record_id,
            name=_to_name(d.get("name"), record_id),
            attribute_class=_to_opt_str(d.get("attribute_class")),
            description_string=_to_opt_str(d.get("description_string")),
            description_format=_to_opt_str(d.get("description_format")),
            effect_type=_to_opt_str(d.get("effect_type")),
            hidden=_to_flag(d.get("hidden")),
            stored_as_integer=_to_flag(d.get("stored_as_integer")),
            raw=dict(d),
        ))
    records.sort(key=lambda r: _id_sort_key(r.id))
    return records


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))

def fetch_json(source: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """Read the JSON document from a local path or an http(s) URL."""
    if _is_url(source):
        try:
            resp = requests.get(source, headers=NO_CACHE_HEADERS, timeout=timeout)
        except requests.RequestException as e:
            raise DataLoadFailure(str(e)) from e
        if not resp.ok:
            raise DataLoadFailure(f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise DataLoadFailure(f"Invalid JSON: {e}") from e

    try:
        with open(source, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise DataLoadFailure(str(e)) from e
    except ValueError as e:
        raise DataLoadFailure(f"Invalid JSON: {e}") from e


def load_attributes(source: str = DEFAULT_SOURCE, timeout: float = DEFAULT_TIMEOUT) -> List[AttributeRecord]:
    """Fetch + normalize in one step. Raises DataLoadFailure on any failure."""
    logger.info("Loading attributes from %s", source)
    try:
        records = normalize(fetch_json(source, timeout=timeout))
    except DataLoadFailure:
        logger.error("Failed to load %s", source, exc_info=True)
        raise
    logger.info("Loaded %d attributes", len(records))
    return records
