"""Invoice and summary profiles: thin configuration over one assembler."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from .records import DocumentKind


@dataclass(frozen=True)
class DocumentProfile:
    """Block content and field set for one kind of document."""
    kind: DocumentKind
    title: str
    collection: str  # Record store collection holding this kind
    orientation: str = "landscape"
    text_default: str = "N/A"  # Placeholder for missing strings
    category_default: str = "Uncategorized"
    metadata_heading: Optional[str] = None
    # (label, BillingRecord attribute), in display order
    metadata_fields: Tuple[Tuple[str, str], ...] = ()
    closing_text: str = ""
    include_cost_analysis: bool = False

    @property
    def label(self) -> str:
        return self.kind.value.capitalize()

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"

    def filename(self, record_id: str) -> str:
        return f"{self.kind.value}_{record_id}.pdf"


INVOICE_PROFILE = DocumentProfile(
    kind=DocumentKind.INVOICE,
    title="INVOICE",
    collection="invoices",
    text_default="N/A",
    category_default="Uncategorized",
    metadata_fields=(
        ("Invoice ID", "id"),
        ("Client Name", "client_name"),
        ("Client Address", "client_address"),
        ("Client Email", "client_email"),
        ("Category", "category"),
        ("Date", "date"),
    ),
    closing_text="Thank you for doing business with {organization}.",
)

SUMMARY_PROFILE = DocumentProfile(
    kind=DocumentKind.SUMMARY,
    title="COST SUMMARY",
    collection="summary",
    text_default="Unknown",
    category_default="Unknown",
    metadata_heading="Client Information:",
    metadata_fields=(
        ("Summary ID", "id"),
        ("Name", "client_name"),
        ("Address", "client_address"),
        ("Email", "client_email"),
        ("Category", "category"),
        ("Date", "date"),
    ),
    closing_text="Thank you for using our services.",
    include_cost_analysis=True,
)

PROFILES: Dict[DocumentKind, DocumentProfile] = {
    DocumentKind.INVOICE: INVOICE_PROFILE,
    DocumentKind.SUMMARY: SUMMARY_PROFILE,
}


def get_profile(kind: Union[DocumentKind, str]) -> DocumentProfile:
    """Get the profile for a document kind ("invoice" or "summary")."""
    return PROFILES[DocumentKind(kind)]
