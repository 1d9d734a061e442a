import pytest

from attrbrowser.loader import normalize


SAMPLE = {
    "10": {"name": "Fire Resistance", "attribute_class": "mult_dmgtaken_from_fire",
           "description_string": "+%s1% fire resistance", "description_format": "value_is_percentage",
           "effect_type": "positive", "hidden": "0"},
    "2": {"name": "Damage Penalty", "attribute_class": "mult_dmg",
          "description_string": "-%s1% damage penalty", "effect_type": "negative",
          "hidden": 1, "stored_as_integer": "1"},
    "1": None,
    "7": {"name": "Cloak Type", "attribute_class": "set_weapon_mode", "effect_type": "neutral",
          "hidden": True},
    "30": {"name": "Fire Rate Bonus", "attribute_class": "mult_postfiredelay",
           "effect_type": "positive"},
}


@pytest.fixture
def raw():
    return {k: (dict(v) if v is not None else None) for k, v in SAMPLE.items()}


@pytest.fixture
def records(raw):
    return normalize(raw)
