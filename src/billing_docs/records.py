"""Billing record and line item models, parsed from stored documents."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
import math
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import MalformedRecordError


class DocumentKind(Enum):
    """Kinds of document that can be rendered from a record."""
    INVOICE = "invoice"
    SUMMARY = "summary"


def to_decimal(value: Any, field_name: str = "value") -> Decimal:
    """Convert a stored numeric value to Decimal; None means 0."""
    if value is None:
        return Decimal("0")
    # bool is an int subclass but never a meaningful amount
    if isinstance(value, bool):
        raise MalformedRecordError(f"{field_name}: expected a number, got {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise MalformedRecordError(f"{field_name}: {value!r} is not a finite number")
        return value
    if isinstance(value, float):
        # json.load accepts NaN and Infinity
        if not math.isfinite(value):
            raise MalformedRecordError(f"{field_name}: {value!r} is not a finite number")
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return Decimal("0")
        try:
            number = Decimal(text)
        except InvalidOperation:
            raise MalformedRecordError(f"{field_name}: {value!r} is not a number") from None
        if not number.is_finite():
            raise MalformedRecordError(f"{field_name}: {value!r} is not a finite number")
        return number
    raise MalformedRecordError(f"{field_name}: expected a number, got {type(value).__name__}")


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class LineItem:
    """One row of billable work or goods. Read-only; fields are looked up by name."""
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Copy so later mutation of the source mapping cannot leak in
        object.__setattr__(self, "fields", dict(self.fields))

    def has(self, name: str) -> bool:
        return self.fields.get(name) is not None

    def number(self, name: str) -> Decimal:
        return to_decimal(self.fields.get(name), name)

    def text(self, name: str, default: str) -> str:
        value = _optional_text(self.fields.get(name))
        return value if value is not None else default


@dataclass(frozen=True)
class BillingRecord:
    """A stored invoice or summary. Never mutated while rendering."""
    id: str
    client_name: Optional[str] = None
    client_address: Optional[str] = None
    client_email: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None
    items: Tuple[LineItem, ...] = ()
    total_amount: Optional[Decimal] = None
    grand_total: Optional[Decimal] = None

    @classmethod
    def from_mapping(cls, record_id: str, data: Mapping[str, Any]) -> "BillingRecord":
        """
        Build a record from a stored document (e.g. a JSON object).

        Missing optional fields stay None and are defaulted at display time.
        A non-list `items` value is treated as no items.
        """
        if not isinstance(data, Mapping):
            raise MalformedRecordError(f"record {record_id!r} is not a mapping")

        raw_items = data.get("items")
        items = []
        if isinstance(raw_items, (list, tuple)):
            for idx, raw in enumerate(raw_items):
                if not isinstance(raw, Mapping):
                    raise MalformedRecordError(
                        f"record {record_id!r}: item {idx} is not a mapping"
                    )
                items.append(LineItem(dict(raw)))

        total_amount = data.get("totalAmount")
        grand_total = data.get("grandTotal")

        return cls(
            id=str(record_id),
            client_name=_optional_text(data.get("clientName")),
            client_address=_optional_text(data.get("clientAddress")),
            client_email=_optional_text(data.get("clientEmail")),
            category=_optional_text(data.get("category")),
            date=_optional_text(data.get("date")),
            items=tuple(items),
            total_amount=None if total_amount is None else to_decimal(total_amount, "totalAmount"),
            grand_total=None if grand_total is None else to_decimal(grand_total, "grandTotal"),
        )

    def display(self, name: str, default: str) -> str:
        """Return a display field, or the placeholder when it is absent."""
        value = getattr(self, name)
        return value if value else default
