"""
Data model (AttributeRecord)
============================

Each entry of the attributes JSON document becomes one `AttributeRecord`.
Records are frozen so that nothing downstream (filters, views, exports) can
change them once the loader has built the sequence.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

@dataclass(frozen=True)
class AttributeRecord:
    """One custom attribute.

    `raw` keeps the source mapping exactly as it was read, for the detail view.
    """
    id: str
    name: str
    attribute_class: Optional[str] = None
    description_string: Optional[str] = None
    description_format: Optional[str] = None
    effect_type: Optional[str] = None
    hidden: bool = False
    stored_as_integer: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def effect_key(self) -> str:
        """Category used by the effect filter ("none" when absent)."""
        return self.effect_type if self.effect_type is not None else "none"

    def to_row(self) -> Dict[str, Any]:
        """Flat dict of the typed fields (no raw payload)."""
        return {
            "id": self.id,
            "name": self.name,
            "attribute_class": self.attribute_class,
            "description_string": self.description_string,
            "description_format": self.description_format,
            "effect_type": self.effect_type,
            "hidden": self.hidden,
            "stored_as_integer": self.stored_as_integer,
        }
