import numpy as np
import pytest
from faker import Faker

from billing_docs.assembler import DocumentAssembler
from billing_docs.assets import AssetStore
from billing_docs.column_schemas import INVESTMENT_FIELDS, Category
from billing_docs.config import RenderConfig
from billing_docs.profiles import get_profile
from billing_docs.record_store import JsonRecordStore
from billing_docs.records import BillingRecord, DocumentKind
from billing_docs.sample_records import generate_corpus, generate_record


def make_record(kind, category, seed=7):
    fake = Faker()
    fake.seed_instance(seed)
    return generate_record(kind, category, np.random.default_rng(seed), fake)


def test_generation_is_reproducible():
    first = make_record(DocumentKind.INVOICE, Category.SUPPLY)
    second = make_record(DocumentKind.INVOICE, Category.SUPPLY)
    assert first == second


def test_uncategorized_records_have_no_category_key():
    record = make_record(DocumentKind.INVOICE, Category.UNCATEGORIZED)
    assert "category" not in record
    assert record["items"]


def test_labor_items_multiply_out():
    record = make_record(DocumentKind.INVOICE, Category.FABRICATION)
    for item in record["items"]:
        expected = item["numberOfWorkers"] * item["numberOfDays"] * item["hoursInDay"] * item["rate"]
        assert item["amount"] == pytest.approx(expected, abs=0.01)


def test_general_items_carry_consistent_build_up():
    record = make_record(DocumentKind.INVOICE, Category.GENERAL)
    for item in record["items"]:
        assert item["subTotal1"] == pytest.approx(item["amount"])
        assert item["subTotal2"] == pytest.approx(
            item["subTotal1"] + item["consumables"] + item["labour"])
        assert item["grandTotal"] == pytest.approx(item["subTotal2"] + item["vat"])


def test_summaries_carry_investment_fields_for_volume_categories():
    record = make_record(DocumentKind.SUMMARY, Category.SUPPLY)
    for item in record["items"]:
        assert all(name in item for name in INVESTMENT_FIELDS)

    labor = make_record(DocumentKind.SUMMARY, Category.DESIGNING)
    assert not any(name in item for item in labor["items"] for name in INVESTMENT_FIELDS)


@pytest.mark.parametrize("kind", list(DocumentKind))
@pytest.mark.parametrize("category", list(Category))
def test_every_generated_record_renders(kind, category):
    data = make_record(kind, category)
    record = BillingRecord.from_mapping("sample", data)
    assembler = DocumentAssembler(RenderConfig(), get_profile(kind), AssetStore())
    document = assembler.render(record)
    assert document.page_count >= 1


def test_generate_corpus_writes_one_file_per_record(tmp_path):
    store = JsonRecordStore(tmp_path)
    record_ids = generate_corpus(store, DocumentKind.SUMMARY, 5, seed=3)

    assert record_ids == [f"summary-{i:05d}" for i in range(5)]
    assert sorted(p.stem for p in (tmp_path / "summary").glob("*.json")) == record_ids
    assert store.fetch("summary", record_ids[0]).category == Category.SUPPLY.value


def test_generate_corpus_is_reproducible(tmp_path):
    generate_corpus(JsonRecordStore(tmp_path / "a"), DocumentKind.INVOICE, 3, seed=11)
    generate_corpus(JsonRecordStore(tmp_path / "b"), DocumentKind.INVOICE, 3, seed=11)
    for name in ("invoice-00000", "invoice-00001", "invoice-00002"):
        a = (tmp_path / "a" / "invoices" / f"{name}.json").read_text()
        b = (tmp_path / "b" / "invoices" / f"{name}.json").read_text()
        assert a == b
