import json

import pandas as pd
import pytest

from attrbrowser.engine import build_effect_options, export_records, filter_records, records_to_frame
from attrbrowser.indices import build_indices, find_record
from attrbrowser.loader import normalize


def _ids(result):
    return [r.id for r in result.records]


def test_empty_query_and_all_returns_everything(records) -> None:
    result = filter_records(records, "", "all")

    assert _ids(result) == [r.id for r in records]
    assert result.count == len(records)


def test_effect_filter_is_exact_and_ignores_query() -> None:
    records = normalize({
        "1": {"name": "a", "effect_type": "buff"},
        "2": {"name": "a", "effect_type": "debuff"},
        "3": {"name": "a"},
    })

    assert _ids(filter_records(records, "", "debuff")) == ["2"]
    assert _ids(filter_records(records, "a", "debuff")) == ["2"]
    assert _ids(filter_records(records, "", "Debuff")) == []
    assert _ids(filter_records(records, "", "none")) == ["3"]


def test_substring_search_is_case_insensitive(records) -> None:
    assert _ids(filter_records(records, "FIRE", "all")) == ["10", "30"]
    assert _ids(filter_records(records, "  fire resistance  ", "all")) == ["10"]


def test_search_covers_class_and_description(records) -> None:
    assert _ids(filter_records(records, "set_weapon", "all")) == ["7"]
    assert _ids(filter_records(records, "PENALTY", "all")) == ["2"]


def test_search_does_not_cover_description_format(records) -> None:
    assert _ids(filter_records(records, "value_is_percentage", "all")) == []


def test_exact_id_match(records) -> None:
    # "7" appears in no text field of record 7
    assert "7" in _ids(filter_records(records, "7", "all"))
    assert _ids(filter_records(records, "30", "all")) == ["30"]


def test_query_and_effect_combine(records) -> None:
    assert _ids(filter_records(records, "fire", "positive")) == ["10", "30"]
    assert _ids(filter_records(records, "fire", "negative")) == []


def test_indexed_filter_matches_scan(records) -> None:
    idx = build_indices(records)
    for effect in ["all", "positive", "negative", "neutral", "none", "missing"]:
        for q in ["", "fire", "mult", "2"]:
            assert filter_records(records, q, effect, idx=idx) == filter_records(records, q, effect)


def test_effect_options_first_seen_order(records) -> None:
    # sorted ids: 1 (none), 2 negative, 7 neutral, 10 positive, 30 positive
    assert build_effect_options(records) == ["all", "none", "negative", "neutral", "positive"]
    assert build_effect_options(records) == build_effect_options(records)
    assert build_effect_options([]) == ["all"]


def test_find_record(records) -> None:
    idx = build_indices(records)

    assert find_record(records, idx, "10").name == "Fire Resistance"
    assert find_record(records, None, "10").name == "Fire Resistance"
    assert find_record(records, idx, "42") is None
    assert find_record(records, None, "42") is None


def test_records_to_frame_columns(records) -> None:
    df = records_to_frame(records)

    assert list(df.columns) == [
        "id", "name", "attribute_class", "description_string", "description_format",
        "effect_type", "hidden", "stored_as_integer",
    ]
    assert len(df) == len(records)


def test_export_csv_and_json(tmp_path, records) -> None:
    csv_path = tmp_path / "out.csv"
    json_path = tmp_path / "out.json"

    export_records(records, str(csv_path), "csv")
    export_records(records, str(json_path), "JSON")

    df = pd.read_csv(csv_path, dtype={"id": str})
    assert list(df["id"]) == ["1", "2", "7", "10", "30"]
    rows = json.loads(json_path.read_text(encoding="utf-8"))
    assert rows[1]["name"] == "Damage Penalty"
    assert rows[1]["hidden"] is True


def test_export_xlsx(tmp_path, records) -> None:
    path = tmp_path / "out.xlsx"
    export_records(records, str(path), "xlsx")

    df = pd.read_excel(path, engine="openpyxl", dtype={"id": str})
    assert list(df["name"])[:2] == ["attribute 1", "Damage Penalty"]


def test_export_unknown_format(tmp_path, records) -> None:
    with pytest.raises(ValueError):
        export_records(records, str(tmp_path / "out.txt"), "txt")


def test_exact_id_match_ignores_padding() -> None:
    records = normalize({"7": {"name": "Cloak"}, "8": {"name": "x"}})

    assert _ids(filter_records(records, " 7 ", "all")) == ["7"]
    assert _ids(filter_records(records, "\t8\n", "all")) == ["8"]
