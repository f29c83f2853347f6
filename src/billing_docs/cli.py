"""Command-line interface for rendering billing documents."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .assembler import DocumentAssembler
from .assets import AssetStore
from .column_schemas import Category
from .commands_writer import write_commands, write_document_metadata
from .config import RenderConfig, load_config
from .delivery import DirectorySink
from .profiles import get_profile
from .record_store import JsonRecordStore
from .records import DocumentKind
from .sample_records import generate_corpus
from .service import DocumentService


def render_records(
    config: RenderConfig,
    kind: DocumentKind,
    record_ids: List[str],
    dump_commands: bool = False,
) -> int:
    """
    Render records from the configured record store into out_dir.

    Returns the number of records that failed.
    """
    store = JsonRecordStore(config.records_dir)
    assets = AssetStore(config.assets_dir)
    service = DocumentService(store, config, assets)
    sink = DirectorySink(config.out_dir)

    failures = 0
    for record_id in record_ids:
        result = service.deliver(kind, record_id, sink)
        if not result.ok:
            print(f"  {record_id}: {result.status} {result.error.get('error')}")
            failures += 1
            continue

        pdf_path = config.out_dir / result.filename
        print(f"  {record_id}: {pdf_path} ({len(result.body)} bytes)")

        if dump_commands:
            document = result.document
            write_commands(document, config.out_dir / "commands" / f"{Path(result.filename).stem}.jsonl")
            write_document_metadata(document, pdf_path, config.out_dir)

    return failures


def list_record_ids(config: RenderConfig, kind: DocumentKind) -> List[str]:
    """All record ids stored for a kind, sorted."""
    collection_dir = Path(config.records_dir) / get_profile(kind).collection
    if not collection_dir.is_dir():
        return []
    return sorted(p.stem for p in collection_dir.glob("*.json"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render invoices and cost summaries to PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--records-dir",
        type=Path,
        help="Directory holding invoices/ and summary/ record JSON (overrides config)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render stored records to PDF")
    render.add_argument(
        "--kind",
        choices=[k.value for k in DocumentKind],
        default=DocumentKind.INVOICE.value,
        help="Document kind to render",
    )
    render.add_argument(
        "record_ids",
        nargs="*",
        help="Record ids to render (default: every record of that kind)",
    )
    render.add_argument(
        "--out-dir",
        type=Path,
        help="Output directory for PDFs (overrides config)",
    )
    render.add_argument(
        "--assets-dir",
        type=Path,
        help="Directory holding logo/signature images (overrides config)",
    )
    render.add_argument(
        "--dump-commands",
        action="store_true",
        help="Also write the drawing primitives of each document as JSONL",
    )

    sample = subparsers.add_parser("sample", help="Generate synthetic records")
    sample.add_argument(
        "--kind",
        choices=[k.value for k in DocumentKind],
        default=DocumentKind.INVOICE.value,
    )
    sample.add_argument(
        "--count",
        type=int,
        default=len(Category),
        help="Number of records to generate",
    )
    sample.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load config
    if args.config:
        config = load_config(args.config)
    else:
        config = RenderConfig()

    # Override with CLI args
    if args.records_dir:
        config.records_dir = args.records_dir

    kind = DocumentKind(args.kind)

    if args.command == "sample":
        store = JsonRecordStore(config.records_dir)
        record_ids = generate_corpus(store, kind, args.count, seed=args.seed)
        print(f"Generated {len(record_ids)} {kind.value} records in {config.records_dir}")
        return 0

    if args.out_dir:
        config.out_dir = args.out_dir
    if args.assets_dir:
        config.assets_dir = args.assets_dir

    record_ids = args.record_ids or list_record_ids(config, kind)
    if not record_ids:
        print(f"No {kind.value} records found in {config.records_dir}")
        return 1

    print(f"Rendering {len(record_ids)} {kind.value} document(s)...")
    print(f"Output directory: {config.out_dir}")
    failures = render_records(config, kind, record_ids, dump_commands=args.dump_commands)

    print(f"\nDone: {len(record_ids) - failures} rendered, {failures} failed")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
