"""Generate synthetic billing records for demos and tests."""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence
import numpy as np
from faker import Faker

from .column_schemas import Category, LABOR_CATEGORIES
from .profiles import get_profile
from .records import DocumentKind
from .record_store import JsonRecordStore
from .totals import DEFAULT_VAT_RATE, cost_build_up

ITEM_NAMES = {
    Category.SUPPLY: ["Steel Sheets", "Cement Bags", "PVC Pipes", "Copper Wire", "Paint (20L)"],
    Category.MACHINING: ["Shaft Turning", "Gear Cutting", "Surface Milling", "Thread Cutting"],
    Category.GENERAL: ["Workshop Job", "Site Works", "Assembly", "Repairs"],
    Category.MAINTENANCE: ["Generator Service", "Pump Overhaul", "HVAC Service"],
    Category.FABRICATION: ["Gate Fabrication", "Steel Truss", "Water Tank Stand"],
    Category.INSTALLATION: ["Solar Installation", "Conveyor Install", "Piping Install"],
    Category.DESIGNING: ["Structural Design", "CAD Drawings", "Process Layout"],
    Category.UNCATEGORIZED: ["Miscellaneous", "Consultation", "Transport"],
}


def _money(value: float) -> float:
    return float(round(value, 2))


def generate_volume_item(name: str, rng: np.random.Generator, fake: Faker) -> Dict[str, Any]:
    """Quantity x rate item (Supply, Machining, uncategorized)."""
    quantity = int(rng.integers(1, 50))
    rate = _money(rng.uniform(5_000, 250_000))
    return {
        "name": name,
        "description": fake.sentence(nb_words=4).rstrip("."),
        "quantity": quantity,
        "rate": rate,
        "amount": _money(quantity * rate),
    }


def generate_labor_item(name: str, rng: np.random.Generator, fake: Faker) -> Dict[str, Any]:
    """Workers x days x hours x hourly rate item."""
    workers = int(rng.integers(1, 8))
    days = int(rng.integers(1, 15))
    hours = int(rng.choice([6, 8, 10]))
    rate = _money(rng.uniform(3_000, 20_000))
    return {
        "name": name,
        "description": fake.sentence(nb_words=4).rstrip("."),
        "numberOfWorkers": workers,
        "numberOfDays": days,
        "hoursInDay": hours,
        "rate": rate,
        "amount": _money(workers * days * hours * rate),
    }


def generate_general_item(
    name: str,
    rng: np.random.Generator,
    fake: Faker,
    vat_rate=DEFAULT_VAT_RATE,
) -> Dict[str, Any]:
    """Quantity x rate item carrying the full General cost build-up."""
    item = generate_volume_item(name, rng, fake)
    consumables_pct = int(rng.choice([5, 10, 15]))
    labour_pct = int(rng.choice([10, 20, 25]))
    build_up = cost_build_up(item["amount"], consumables_pct, labour_pct, vat_rate)
    item["consumablesPercentage"] = consumables_pct
    item["labourPercentage"] = labour_pct
    item.update({key: float(value) for key, value in build_up.items()})
    return item


def add_investment_fields(item: Dict[str, Any], rng: np.random.Generator) -> Dict[str, Any]:
    """Cost analysis fields used by summaries; rate/amount are re-derived from them."""
    quantity = item.get("quantity") or 1
    market_price = _money(rng.uniform(5_000, 200_000))
    other_expenses = _money(rng.uniform(0, 50_000))
    interest_pct = _money(rng.uniform(0, 10))
    markup_pct = _money(rng.uniform(5, 35))

    immediate = market_price * quantity + other_expenses
    total_investment = immediate * (1 + interest_pct / 100)
    profit = total_investment * markup_pct / 100

    item.update({
        "daysToSupply": int(rng.integers(7, 90)),
        "interestPercentage": interest_pct,
        "marketPrice": market_price,
        "otherExpenses": other_expenses,
        "immediateInvestment": _money(immediate),
        "totalInvestment": _money(total_investment),
        "markupPercentage": markup_pct,
        "profit": _money(profit),
        "rate": _money((total_investment + profit) / quantity),
    })
    item["amount"] = _money(item["rate"] * quantity)
    return item


def generate_items(
    category: Category,
    rng: np.random.Generator,
    fake: Faker,
    num_items: int,
) -> List[Dict[str, Any]]:
    names = ITEM_NAMES[category]
    items = []
    for _ in range(num_items):
        name = str(rng.choice(names))
        if category in LABOR_CATEGORIES:
            items.append(generate_labor_item(name, rng, fake))
        elif category == Category.GENERAL:
            items.append(generate_general_item(name, rng, fake))
        else:
            items.append(generate_volume_item(name, rng, fake))
    return items


def generate_record(
    kind: DocumentKind,
    category: Category,
    rng: np.random.Generator,
    fake: Faker,
    num_items: Optional[int] = None,
    record_date: Optional[date] = None,
) -> Dict[str, Any]:
    """Generate one stored record document (camelCase keys, like the store holds)."""
    if num_items is None:
        num_items = int(rng.integers(1, 12))
    if record_date is None:
        record_date = date(2025, 1, 1) + timedelta(days=int(rng.integers(0, 365)))

    items = generate_items(category, rng, fake, num_items)
    if kind == DocumentKind.SUMMARY and category not in LABOR_CATEGORIES \
            and category != Category.GENERAL:
        items = [add_investment_fields(item, rng) for item in items]

    record = {
        "clientName": fake.company(),
        "clientAddress": fake.address().replace("\n", ", "),
        "clientEmail": fake.company_email(),
        "date": record_date.isoformat(),
        "items": items,
    }
    if category != Category.UNCATEGORIZED:
        record["category"] = category.value
    return record


def generate_corpus(
    store: JsonRecordStore,
    kind: DocumentKind,
    count: int,
    seed: int = 42,
    categories: Optional[Sequence[Category]] = None,
) -> List[str]:
    """
    Generate `count` records of one kind into a JSON record store.

    Returns the generated record ids.
    """
    rng = np.random.default_rng(seed)
    fake = Faker()
    fake.seed_instance(int(rng.integers(0, 2**31)))
    categories = list(categories or Category)
    prefix = get_profile(kind).kind.value

    record_ids = []
    for idx in range(count):
        category = categories[idx % len(categories)]
        record_id = f"{prefix}-{idx:05d}"
        store.save(kind, record_id, generate_record(kind, category, rng, fake))
        record_ids.append(record_id)
    return record_ids
