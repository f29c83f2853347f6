"""Shared fixtures for billing-docs tests."""

from io import BytesIO

import pytest
from PIL import Image

from billing_docs.assets import AssetStore
from billing_docs.config import RenderConfig
from billing_docs.records import BillingRecord


def make_png(width: int = 60, height: int = 20) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), (20, 40, 160)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def config() -> RenderConfig:
    return RenderConfig()


@pytest.fixture
def empty_assets() -> AssetStore:
    return AssetStore()


@pytest.fixture
def signature_assets(png_bytes) -> AssetStore:
    return AssetStore(assets={"signature.png": png_bytes})


@pytest.fixture
def supply_data() -> dict:
    return {
        "clientName": "Acme Ltd",
        "clientAddress": "Plot 12, Kampala Road",
        "clientEmail": "accounts@acme.example",
        "category": "Supply",
        "date": "2025-03-14",
        "items": [
            {"name": "Steel Sheets", "description": "2mm mild steel", "quantity": 6,
             "rate": 100, "amount": 600},
            {"name": "Cement", "quantity": 4, "rate": 100.0, "amount": 400.0},
        ],
    }


@pytest.fixture
def supply_record(supply_data) -> BillingRecord:
    return BillingRecord.from_mapping("inv-1", supply_data)


@pytest.fixture
def general_record() -> BillingRecord:
    return BillingRecord.from_mapping("inv-2", {
        "clientName": "Buildit",
        "category": "General",
        "date": "2025-04-01",
        "items": [
            {"description": "Site works", "quantity": 1, "rate": 100, "amount": 100,
             "subTotal1": 100, "consumables": 0, "labour": 0,
             "subTotal2": 100, "vat": 18, "grandTotal": 118},
        ],
    })


@pytest.fixture
def labor_record() -> BillingRecord:
    return BillingRecord.from_mapping("inv-3", {
        "clientName": "Nile Mills",
        "category": "Maintenance",
        "items": [
            {"description": "Pump overhaul", "numberOfWorkers": 2, "numberOfDays": 3,
             "hoursInDay": 8, "rate": 10, "amount": 480},
        ],
    })


def many_items(count: int) -> list:
    return [
        {"description": f"Item {i}", "quantity": 1, "rate": 10, "amount": 10}
        for i in range(count)
    ]
