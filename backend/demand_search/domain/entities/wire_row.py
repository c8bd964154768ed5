"""Base class for table rows exchanged with the planning backend.

Every row dataclass declares the backend column name of each attribute in
the field metadata (``wire``). Rows are coerced once, when they cross the
load boundary, so the rest of the code only ever sees plain strings.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Self


def wire(name: str) -> Any:
    """Declare a string column with its backend (wire) name."""
    return field(default="", metadata={"wire": name})


def coerce_text(value: Any) -> str:
    """Stringify a backend value; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return str(value)


@dataclass
class WireRow:
    """Row whose attributes map one-to-one onto backend column names."""

    @classmethod
    def wire_names(cls) -> dict[str, str]:
        """Attribute name → backend column name, in declaration order."""
        return {f.name: f.metadata.get("wire", f.name) for f in fields(cls)}

    @classmethod
    def column_for(cls, name: str) -> str | None:
        """Resolve an attribute or backend column name to the attribute name."""
        for attr, wire_name in cls.wire_names().items():
            if name in (attr, wire_name):
                return attr
        return None

    @classmethod
    def from_wire(cls, raw: dict[str, Any]) -> Self:
        """Build a row from a backend dict; missing and null values become ``""``."""
        return cls(**{
            attr: coerce_text(raw.get(wire_name))
            for attr, wire_name in cls.wire_names().items()
        })

    def to_wire(self) -> dict[str, str]:
        """Return the row keyed by backend column names, in declaration order."""
        return {
            wire_name: getattr(self, attr)
            for attr, wire_name in self.wire_names().items()
        }
