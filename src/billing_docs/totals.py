"""Derived total rows appended below the line items."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .column_schemas import TotalsStrategy, format_amount, resolve_profile
from .records import LineItem, to_decimal

DEFAULT_VAT_RATE = Decimal("0.18")
CENTS = Decimal("0.01")

# General category: (item field, row label), in output order
COST_BUILD_UP_ROWS: Tuple[Tuple[str, str], ...] = (
    ("consumables", "Consumables"),
    ("labour", "Labour"),
    ("subTotal2", "Sub-Total 2"),
    ("vat", "VAT"),
    ("grandTotal", "Grand Total"),
)

GRAND_TOTAL_LABEL = "Grand Total"


@dataclass(frozen=True)
class TotalRow:
    """A label/value row; label sits in the first column, value in the last."""
    label: str
    value: Decimal

    @property
    def formatted_value(self) -> str:
        return format_amount(self.value)

    def cells(self, column_count: int) -> List[str]:
        if column_count < 2:
            raise ValueError("total rows need at least two columns")
        return [self.label] + [""] * (column_count - 2) + [self.formatted_value]


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def vat_label(rate: Decimal) -> str:
    """VAT(18%) for a rate of 0.18."""
    percent = (rate * 100).normalize()
    return f"VAT({percent:f}%)"


def _sum_field(items: Sequence[LineItem], name: str) -> Decimal:
    return sum((item.number(name) for item in items), Decimal("0"))


def aggregate(
    category: Optional[str],
    items: Sequence[LineItem],
    vat_rate: Union[Decimal, float, str] = DEFAULT_VAT_RATE,
    total_amount: Optional[Decimal] = None,
    grand_total: Optional[Decimal] = None,
) -> Tuple[TotalRow, ...]:
    """
    Compute the derived rows for a record.

    Args:
        category: Stored category tag (selects the strategy)
        items: Line items of the record
        vat_rate: Fraction applied to the total amount (non-General only)
        total_amount: Precomputed total; used verbatim instead of the item sum
        grand_total: Precomputed grand total; used verbatim for the last row

    Returns:
        Total rows in display order; the last row is always the Grand Total.
    """
    profile = resolve_profile(category)
    rate = to_decimal(vat_rate, "vat_rate")

    if profile.totals == TotalsStrategy.COST_BUILD_UP:
        rows = [
            TotalRow(label, _money(_sum_field(items, name)))
            for name, label in COST_BUILD_UP_ROWS
        ]
        if grand_total is not None:
            rows[-1] = TotalRow(GRAND_TOTAL_LABEL, _money(grand_total))
        return tuple(rows)

    if total_amount is not None:
        total = _money(total_amount)
    else:
        total = _money(_sum_field(items, profile.schema.amount_field))
    vat = _money(total * rate)
    final = _money(grand_total) if grand_total is not None else total + vat

    return (
        TotalRow("Total Amount", total),
        TotalRow(vat_label(rate), vat),
        TotalRow(GRAND_TOTAL_LABEL, final),
    )


def cost_build_up(
    base: Union[Decimal, float],
    consumables_pct: Union[Decimal, float],
    labour_pct: Union[Decimal, float],
    vat_rate: Union[Decimal, float] = DEFAULT_VAT_RATE,
) -> Dict[str, Decimal]:
    """
    Five-stage General build-up for one item.

    base -> + consumables % -> + labour % -> + VAT -> grand total.
    Percentages are whole numbers (10 means 10%).
    """
    base = _money(to_decimal(base, "subTotal1"))
    consumables = _money(base * to_decimal(consumables_pct, "consumablesPercentage") / 100)
    labour = _money(base * to_decimal(labour_pct, "labourPercentage") / 100)
    sub_total_2 = base + consumables + labour
    vat = _money(sub_total_2 * to_decimal(vat_rate, "vat_rate"))
    return {
        "subTotal1": base,
        "consumables": consumables,
        "labour": labour,
        "subTotal2": sub_total_2,
        "vat": vat,
        "grandTotal": sub_total_2 + vat,
    }
