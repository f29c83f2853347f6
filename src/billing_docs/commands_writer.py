"""Write rendered drawing primitives to JSONL files."""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

from .primitives import RenderedDocument, command_to_dict


def command_lines(document: RenderedDocument) -> Iterator[Dict[str, Any]]:
    """One JSON-ready dict per drawing primitive, tagged with its page."""
    for page_index, command in document.commands():
        line = {
            "doc_kind": document.kind,
            "record_id": document.record_id,
            "page_index": page_index,
        }
        line.update(command_to_dict(command))
        yield line


def write_commands(document: RenderedDocument, path: Path) -> int:
    """
    Write the document's primitives to a JSONL file (overwriting it).

    Returns:
        Number of lines written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "w") as f:
        for line in command_lines(document):
            f.write(json.dumps(line, sort_keys=True) + "\n")
            count += 1
    return count


def write_document_metadata(document: RenderedDocument, pdf_path: Path, out_dir: Path) -> None:
    """Append document-level metadata to documents.jsonl."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    metadata = {
        "doc_kind": document.kind,
        "record_id": document.record_id,
        "page_count": document.page_count,
        "page_size": list(document.page_size),
        "pdf_path": str(pdf_path),
    }

    docs_path = out_dir / "documents.jsonl"
    with open(docs_path, "a") as f:
        f.write(json.dumps(metadata) + "\n")
