from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class Medicine:
    id: str
    name: str
    type: str
    price: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Medicine":
        """Build a Medicine from a loosely-typed dict (JSON row, DB row).

        Missing ids get a fresh UUID; timestamps may be ISO strings or datetimes.
        """
        name = str(record.get("name") or "").strip()
        type_ = str(record.get("type") or "").strip()
        if not name or not type_:
            raise ValueError(f"Medicine record needs a non-empty name and type: {record!r}")
        return cls(
            id=str(record.get("id") or uuid4()),
            name=name,
            type=type_,
            price=float(record.get("price") or 0),
            created_at=_parse_timestamp(record.get("created_at")),
            updated_at=_parse_timestamp(record.get("updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "price": self.price,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_suggestion(self) -> Dict[str, Any]:
        """Reduced projection used by autocomplete: bookkeeping fields are dropped."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "price": self.price,
        }


SEARCHABLE_FIELDS = ("name", "type")
MATCH_OPS = ("contains", "starts_with")


@dataclass(frozen=True)
class FieldMatch:
    """Case-insensitive match of one text field against a value."""

    field: str
    op: str
    value: str

    def __post_init__(self) -> None:
        if self.field not in SEARCHABLE_FIELDS:
            raise ValueError(
                f"Unsupported field {self.field!r}; expected one of {SEARCHABLE_FIELDS}"
            )
        if self.op not in MATCH_OPS:
            raise ValueError(f"Unsupported op {self.op!r}; expected one of {MATCH_OPS}")


@dataclass(frozen=True)
class AnyOf:
    predicates: Tuple[Any, ...]

    def __init__(self, *predicates: Any) -> None:
        object.__setattr__(self, "predicates", tuple(predicates))


@dataclass(frozen=True)
class AllOf:
    predicates: Tuple[Any, ...]

    def __init__(self, *predicates: Any) -> None:
        object.__setattr__(self, "predicates", tuple(predicates))


def contains(field: str, value: str) -> FieldMatch:
    return FieldMatch(field=field, op="contains", value=value)


def starts_with(field: str, value: str) -> FieldMatch:
    return FieldMatch(field=field, op="starts_with", value=value)


def format_medicine(item: Medicine) -> str:
    """Create a compact string representation for logs/printing.

    Example: "id=<uuid>; name=Aspirin; type=Analgesic; price=4.50"
    """
    return f"id={item.id}; name={item.name}; type={item.type}; price={item.price:.2f}"
