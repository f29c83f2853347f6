"""Column schemas for each billing category."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .records import LineItem


class Category(Enum):
    """Known billing categories. Anything else is treated as UNCATEGORIZED."""
    SUPPLY = "Supply"
    MACHINING = "Machining"
    GENERAL = "General"
    MAINTENANCE = "Maintenance"
    FABRICATION = "Fabrication"
    INSTALLATION = "Installation"
    DESIGNING = "Designing"
    UNCATEGORIZED = "Uncategorized"


class CellKind(Enum):
    """How a column pulls its value out of a line item."""
    POSITION = "position"  # 1-based row number, not a stored field
    TEXT = "text"
    NUMBER = "number"


class TotalsStrategy(Enum):
    """How derived rows are computed for a category."""
    VAT_ON_TOTAL = "vat_on_total"    # Total Amount -> VAT -> Grand Total
    COST_BUILD_UP = "cost_build_up"  # General: per-item precomputed build-up


@dataclass(frozen=True)
class ColumnSpec:
    """Specification for a table column."""
    name: str  # Header label
    width_ratio: float  # Relative width; scaled to the usable page width
    field: Optional[str] = None
    kind: CellKind = CellKind.TEXT
    money: bool = False  # Header carries the currency code
    alignment: str = "center"  # "left", "center", "right"
    fallback_field: Optional[str] = None

    def header_label(self, currency_code: str) -> str:
        if self.money and currency_code:
            return f"{self.name} ({currency_code})"
        return self.name

    def extract(self, item: LineItem, position: int, text_default: str) -> str:
        """Format this column's cell for one line item."""
        if self.kind == CellKind.POSITION:
            return str(position)
        if self.kind == CellKind.NUMBER:
            return format_amount(item.number(self.field))
        if self.fallback_field and not item.has(self.field):
            return item.text(self.fallback_field, text_default)
        return item.text(self.field, text_default)


@dataclass(frozen=True)
class ColumnSchema:
    """Ordered column specs for one table shape."""
    name: str
    column_specs: Tuple[ColumnSpec, ...]

    @property
    def column_count(self) -> int:
        return len(self.column_specs)

    @property
    def width_ratios(self) -> List[float]:
        return [spec.width_ratio for spec in self.column_specs]

    @property
    def amount_field(self) -> Optional[str]:
        """Field read by the last column; summed for the Total Amount row."""
        return self.column_specs[-1].field

    def header_row(self, currency_code: str) -> List[str]:
        return [spec.header_label(currency_code) for spec in self.column_specs]

    def body_row(self, item: LineItem, position: int, text_default: str) -> List[str]:
        return [spec.extract(item, position, text_default) for spec in self.column_specs]

    def body_rows(self, items, text_default: str) -> List[List[str]]:
        return [
            self.body_row(item, position, text_default)
            for position, item in enumerate(items, start=1)
        ]


@dataclass(frozen=True)
class CategoryProfile:
    """A category variant: its schema plus the totals strategy."""
    category: Category
    schema: ColumnSchema
    totals: TotalsStrategy


def format_amount(value) -> str:
    """Two decimals, no grouping separator."""
    return f"{value:.2f}"


_NUMBER = ColumnSpec("Number", 0.08, kind=CellKind.POSITION)
_DESCRIPTION = ColumnSpec("Description", 0.32, field="description", fallback_field="name")

# Volume categories and the generic fallback (0.08+0.32+0.16+0.22+0.22 = 1.0)
VOLUME_SCHEMA = ColumnSchema(
    name="volume",
    column_specs=(
        _NUMBER,
        _DESCRIPTION,
        ColumnSpec("Quantity", 0.16, field="quantity", kind=CellKind.NUMBER),
        ColumnSpec("Rate", 0.22, field="rate", kind=CellKind.NUMBER, money=True),
        ColumnSpec("Amount", 0.22, field="amount", kind=CellKind.NUMBER, money=True),
    ),
)

# Labor categories (0.08+0.26+0.11+0.11+0.12+0.16+0.16 = 1.0)
LABOR_SCHEMA = ColumnSchema(
    name="labor",
    column_specs=(
        _NUMBER,
        ColumnSpec("Description", 0.26, field="description", fallback_field="name"),
        ColumnSpec("Workers", 0.11, field="numberOfWorkers", kind=CellKind.NUMBER),
        ColumnSpec("Days", 0.11, field="numberOfDays", kind=CellKind.NUMBER),
        ColumnSpec("Hours/Day", 0.12, field="hoursInDay", kind=CellKind.NUMBER),
        ColumnSpec("Rate", 0.16, field="rate", kind=CellKind.NUMBER, money=True),
        ColumnSpec("Amount", 0.16, field="amount", kind=CellKind.NUMBER, money=True),
    ),
)

# Cost analysis shown on summaries; labels are short to fit ten columns
INVESTMENT_SCHEMA = ColumnSchema(
    name="investment",
    column_specs=(
        ColumnSpec("No.", 0.05, kind=CellKind.POSITION),
        ColumnSpec("Description", 0.13, field="description", fallback_field="name"),
        ColumnSpec("Days", 0.05, field="daysToSupply", kind=CellKind.NUMBER),
        ColumnSpec("Int. %", 0.06, field="interestPercentage", kind=CellKind.NUMBER),
        ColumnSpec("Market Price", 0.12, field="marketPrice", kind=CellKind.NUMBER),
        ColumnSpec("Other Exp.", 0.11, field="otherExpenses", kind=CellKind.NUMBER),
        ColumnSpec("Immediate Inv.", 0.13, field="immediateInvestment", kind=CellKind.NUMBER),
        ColumnSpec("Total Inv.", 0.13, field="totalInvestment", kind=CellKind.NUMBER),
        ColumnSpec("Markup %", 0.09, field="markupPercentage", kind=CellKind.NUMBER),
        ColumnSpec("Profit", 0.13, field="profit", kind=CellKind.NUMBER),
    ),
)

INVESTMENT_FIELDS = tuple(
    spec.field for spec in INVESTMENT_SCHEMA.column_specs if spec.kind == CellKind.NUMBER
)

LABOR_CATEGORIES = (
    Category.MAINTENANCE, Category.FABRICATION, Category.INSTALLATION, Category.DESIGNING,
)
VOLUME_CATEGORIES = (Category.SUPPLY, Category.MACHINING, Category.GENERAL)


def _build_profiles() -> Dict[Category, CategoryProfile]:
    profiles = {}
    for category in LABOR_CATEGORIES:
        profiles[category] = CategoryProfile(category, LABOR_SCHEMA, TotalsStrategy.VAT_ON_TOTAL)
    for category in VOLUME_CATEGORIES:
        strategy = (
            TotalsStrategy.COST_BUILD_UP if category == Category.GENERAL
            else TotalsStrategy.VAT_ON_TOTAL
        )
        profiles[category] = CategoryProfile(category, VOLUME_SCHEMA, strategy)
    profiles[Category.UNCATEGORIZED] = CategoryProfile(
        Category.UNCATEGORIZED, VOLUME_SCHEMA, TotalsStrategy.VAT_ON_TOTAL
    )
    return profiles


CATEGORY_PROFILES: Dict[Category, CategoryProfile] = _build_profiles()

_CATEGORY_LOOKUP: Dict[str, Category] = {c.value.casefold(): c for c in Category}


def parse_category(tag: Optional[str]) -> Category:
    """Map a stored category tag to a Category, falling back to UNCATEGORIZED."""
    if not tag:
        return Category.UNCATEGORIZED
    return _CATEGORY_LOOKUP.get(str(tag).strip().casefold(), Category.UNCATEGORIZED)


def resolve_profile(category: Optional[str]) -> CategoryProfile:
    """Get the schema and totals strategy for a category tag."""
    return CATEGORY_PROFILES[parse_category(category)]


def resolve(category: Optional[str]) -> ColumnSchema:
    """Get the column schema for a category tag."""
    return resolve_profile(category).schema


def has_investment_data(items) -> bool:
    """True when any item carries a cost-analysis field."""
    return any(item.has(name) for item in items for name in INVESTMENT_FIELDS)
