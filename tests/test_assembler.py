import pytest

from billing_docs.assembler import DocumentAssembler, fit_image
from billing_docs.assets import AssetStore
from billing_docs.config import OrganizationInfo, RenderConfig
from billing_docs.errors import MalformedRecordError, MissingAssetError
from billing_docs.primitives import ImageCommand, TextCommand
from billing_docs.profiles import SUMMARY_PROFILE
from billing_docs.records import BillingRecord

from conftest import make_png, many_items


def render(record, config=None, profile=None, assets=None):
    kwargs = {"assets": assets or AssetStore()}
    if profile is not None:
        kwargs["profile"] = profile
    return DocumentAssembler(config or RenderConfig(), **kwargs).render(record)


def test_invoice_blocks_in_order(supply_record):
    texts = render(supply_record).texts()

    order = [
        "INNOVATION CONSORTIUM",
        "We Innovate",
        "Location: Bweyogerere, Butto",
        "Email: innovationconsortium@gmail.com",
        "Tel: +256 753 434679",
        "INVOICE",
        "Invoice ID: inv-1",
        "Client Name: Acme Ltd",
        "Category: Supply",
        "Number",
        "Grand Total: UGX 1180.00",
        "Authorized Signature",
        "Thank you for doing business with INNOVATION CONSORTIUM.",
    ]
    positions = [texts.index(text) for text in order]
    assert positions == sorted(positions)


def test_invoice_table_and_totals(supply_record):
    texts = render(supply_record).texts()
    for text in ("Rate (UGX)", "Amount (UGX)", "2mm mild steel", "Cement",
                 "600.00", "400.00", "Total Amount", "1000.00", "VAT(18%)", "180.00",
                 "Grand Total", "1180.00"):
        assert text in texts
    assert "Amount in Words: one thousand one hundred and eighty Uganda Shillings Only" in texts


def test_missing_fields_use_invoice_placeholders():
    texts = render(BillingRecord.from_mapping("bare", {})).texts()
    assert "Client Name: N/A" in texts
    assert "Client Email: N/A" in texts
    assert "Category: Uncategorized" in texts
    assert "Date: N/A" in texts


def test_missing_fields_use_summary_placeholders():
    texts = render(BillingRecord.from_mapping("bare", {}), profile=SUMMARY_PROFILE).texts()
    assert "COST SUMMARY" in texts
    assert "Client Information:" in texts
    assert "Summary ID: bare" in texts
    assert "Name: Unknown" in texts
    assert "Category: Unknown" in texts
    assert "Thank you for using our services." in texts


def test_unknown_category_shows_tag_and_generic_table():
    record = BillingRecord.from_mapping("odd", {"category": "Widgets", "items": [{"amount": 5}]})
    texts = render(record).texts()
    assert "Category: Widgets" in texts
    assert "Quantity" in texts
    assert "Grand Total: UGX 5.90" in texts


def test_empty_items_render_zero_totals():
    record = BillingRecord.from_mapping("empty", {"clientName": "Nobody", "items": []})
    document = render(record)
    texts = document.texts()
    assert document.page_count == 1
    assert "Grand Total: UGX 0.00" in texts
    assert "Amount in Words: zero Uganda Shillings Only" in texts


def test_general_category_uses_cost_build_up(general_record):
    texts = render(general_record).texts()
    for label in ("Consumables", "Labour", "Sub-Total 2", "VAT"):
        assert label in texts
    assert "Total Amount" not in texts
    assert "Grand Total: UGX 118.00" in texts
    assert "Amount in Words: one hundred and eighteen Uganda Shillings Only" in texts


def test_labor_category_table(labor_record):
    texts = render(labor_record).texts()
    for text in ("Workers", "Days", "Hours/Day", "480.00", "566.40"):
        assert text in texts


def test_custom_vat_and_currency(supply_record):
    config = RenderConfig(vat_rate=0.2, currency_code="KES", currency_unit="Kenya Shillings")
    texts = render(supply_record, config=config).texts()
    assert "VAT(20%)" in texts
    assert "Rate (KES)" in texts
    assert "Grand Total: KES 1200.00" in texts
    assert "Amount in Words: one thousand two hundred Kenya Shillings Only" in texts


def test_organization_is_configurable(supply_record):
    config = RenderConfig(organization=OrganizationInfo(name="ACME WORKS"))
    texts = render(supply_record, config=config).texts()
    assert "ACME WORKS" in texts
    assert "Thank you for doing business with ACME WORKS." in texts


def test_rendering_is_deterministic(supply_record):
    assert render(supply_record) == render(supply_record)


def test_assembler_can_be_reused(supply_record, general_record):
    assembler = DocumentAssembler(RenderConfig(), assets=AssetStore())
    first = assembler.render(supply_record)
    assembler.render(general_record)
    assert assembler.render(supply_record) == first


def test_source_record_is_not_mutated(supply_data):
    record = BillingRecord.from_mapping("inv-1", supply_data)
    before = record.items[0].fields.copy()
    render(record)
    assert record.items[0].fields == before
    assert "subTotal2" not in supply_data["items"][0]


def test_signature_image_drawn_when_available(supply_record, signature_assets):
    document = render(supply_record, assets=signature_assets)
    images = [c for _, c in document.commands() if isinstance(c, ImageCommand)]
    assert [image.asset for image in images] == ["signature.png"]
    assert images[0].width <= 150 and images[0].height <= 50


def test_missing_signature_is_skipped(supply_record):
    document = render(supply_record)
    assert not any(isinstance(c, ImageCommand) for _, c in document.commands())
    assert "Authorized Signature" in document.texts()


def test_configured_logo_is_drawn_first(supply_record, png_bytes):
    config = RenderConfig(logo_asset="logo.png")
    assets = AssetStore(assets={"logo.png": png_bytes})
    commands = render(supply_record, config=config, assets=assets).pages[0].commands
    assert isinstance(commands[0], ImageCommand)
    assert commands[0].asset == "logo.png"


def test_missing_logo_aborts_render(supply_record):
    config = RenderConfig(logo_asset="logo.png")
    with pytest.raises(MissingAssetError):
        render(supply_record, config=config)


def test_unreadable_image_is_malformed():
    with pytest.raises(MalformedRecordError):
        fit_image(b"not an image", (100, 100))


def test_fit_image_keeps_aspect_ratio():
    width, height = fit_image(make_png(300, 100), (150, 50))
    assert (width, height) == pytest.approx((150, 50))
    width, height = fit_image(make_png(100, 100), (150, 50))
    assert (width, height) == pytest.approx((50, 50))


def test_negative_grand_total_aborts_render():
    record = BillingRecord.from_mapping("neg", {"category": "Supply", "grandTotal": -5})
    with pytest.raises(MalformedRecordError):
        render(record)


def test_malformed_item_value_aborts_render():
    record = BillingRecord.from_mapping("bad", {"items": [{"amount": "lots"}]})
    with pytest.raises(MalformedRecordError):
        render(record)


def test_long_invoice_repeats_table_header():
    record = BillingRecord.from_mapping("long", {"category": "Supply", "items": many_items(60)})
    document = render(record)

    assert document.page_count >= 3
    for page in document.pages[1:-1]:
        assert "Amount (UGX)" in document.texts(page.index)
    last_page = document.texts(document.page_count - 1)
    assert "Thank you for doing business with INNOVATION CONSORTIUM." in last_page
    assert "Grand Total: UGX 708.00" in document.texts()
    for text_command in (c for _, c in document.commands() if isinstance(c, TextCommand)):
        assert text_command.y >= 50


def test_long_invoice_without_header_repeat():
    record = BillingRecord.from_mapping("long", {"category": "Supply", "items": many_items(60)})
    document = render(record, config=RenderConfig(repeat_header_rows=False))
    assert document.texts().count("Amount (UGX)") == 1


def test_summary_adds_cost_analysis_table():
    items = [{"description": "Steel", "quantity": 2, "rate": 50, "amount": 100,
              "marketPrice": 40, "otherExpenses": 5, "immediateInvestment": 85,
              "totalInvestment": 90, "markupPercentage": 10, "profit": 9}]
    record = BillingRecord.from_mapping("sum-1", {"category": "Supply", "items": items})

    texts = render(record, profile=SUMMARY_PROFILE).texts()
    assert "Cost Analysis" in texts
    assert "Market Price" in texts
    assert "Immediate Inv." in texts
    assert "9.00" in texts
    assert texts.index("Cost Analysis") > texts.index("Grand Total")

    invoice_texts = render(record).texts()
    assert "Cost Analysis" not in invoice_texts


def test_summary_without_investment_data_has_no_cost_analysis(supply_record):
    texts = render(supply_record, profile=SUMMARY_PROFILE).texts()
    assert "Cost Analysis" not in texts


def first_page_of(document, text):
    return next(idx for idx, c in document.commands()
                if isinstance(c, TextCommand) and c.text == text)


@pytest.mark.parametrize("count", range(1, 41))
def test_cost_analysis_heading_stays_with_its_table(count):
    items = [{"description": f"Part {i}", "quantity": 1, "rate": 10, "amount": 10,
              "marketPrice": 8, "profit": 2} for i in range(count)]
    record = BillingRecord.from_mapping("sum", {"category": "Supply", "items": items})
    document = render(record, profile=SUMMARY_PROFILE)
    assert first_page_of(document, "Cost Analysis") == first_page_of(document, "Market Price")
