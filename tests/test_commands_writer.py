import json

from billing_docs.assembler import DocumentAssembler
from billing_docs.assets import AssetStore
from billing_docs.commands_writer import command_lines, write_commands, write_document_metadata
from billing_docs.config import RenderConfig


def render(record):
    return DocumentAssembler(RenderConfig(), assets=AssetStore()).render(record)


def test_command_lines_tag_every_primitive(supply_record):
    document = render(supply_record)
    lines = list(command_lines(document))
    assert len(lines) == sum(len(page.commands) for page in document.pages)
    assert {line["kind"] for line in lines} >= {"rect", "text", "line"}
    assert all(line["record_id"] == "inv-1" for line in lines)


def test_write_commands(tmp_path, supply_record):
    document = render(supply_record)
    path = tmp_path / "cmds" / "invoice_inv-1.jsonl"
    count = write_commands(document, path)

    lines = path.read_text().splitlines()
    assert len(lines) == count
    texts = [json.loads(line)["text"] for line in lines if '"kind": "text"' in line]
    assert "Grand Total: UGX 1180.00" in texts


def test_document_metadata_appends(tmp_path, supply_record):
    document = render(supply_record)
    write_document_metadata(document, tmp_path / "a.pdf", tmp_path)
    write_document_metadata(document, tmp_path / "b.pdf", tmp_path)

    rows = [json.loads(line) for line in (tmp_path / "documents.jsonl").read_text().splitlines()]
    assert [row["pdf_path"] for row in rows] == [str(tmp_path / "a.pdf"), str(tmp_path / "b.pdf")]
    assert rows[0]["page_size"] == [792, 612]
