"""Request facade: render a stored record by kind and id."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .assembler import DocumentAssembler
from .assets import AssetStore
from .config import RenderConfig
from .delivery import DeliverySink
from .errors import RecordNotFoundError
from .pdf_renderer import PDFRenderer
from .primitives import RenderedDocument
from .profiles import get_profile
from .record_store import RecordStore
from .records import DocumentKind

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_NOT_FOUND = 404
HTTP_INTERNAL_ERROR = 500


@dataclass
class DownloadResult:
    """Outcome of a download request: PDF bytes or a structured error."""
    status: int
    body: bytes = b""
    filename: Optional[str] = None
    error: Dict[str, Any] = field(default_factory=dict)
    document: Optional[RenderedDocument] = None  # Layout the body was encoded from

    @property
    def ok(self) -> bool:
        return self.status == HTTP_OK


class DocumentService:
    """Fetches a record, renders it and encodes it as PDF."""

    def __init__(
        self,
        store: RecordStore,
        config: Optional[RenderConfig] = None,
        assets: Optional[AssetStore] = None,
    ):
        self.store = store
        self.config = config or RenderConfig()
        self.assets = assets or AssetStore(self.config.assets_dir)
        self.renderer = PDFRenderer(self.assets)

    def render_document(self, kind: Union[DocumentKind, str], record_id: str) -> RenderedDocument:
        """Fetch and lay out a record; raises on not-found or malformed input."""
        profile = get_profile(kind)
        record = self.store.fetch(profile.kind, record_id)
        assembler = DocumentAssembler(self.config, profile, self.assets)
        return assembler.render(record)

    def download(self, kind: Union[DocumentKind, str], record_id: str) -> DownloadResult:
        """
        Render a record to PDF bytes.

        Returns:
            DownloadResult with status 200 and the PDF, 404 when the record
            does not exist, or 500 when rendering fails.
        """
        profile = get_profile(kind)
        try:
            document = self.render_document(profile.kind, record_id)
            body = self.renderer.render_bytes(document)
        except RecordNotFoundError:
            logger.info("%s %r not found", profile.label, record_id)
            return DownloadResult(
                status=HTTP_NOT_FOUND,
                error={"error": profile.not_found_message},
            )
        except Exception:
            logger.exception("Error generating %s %r", profile.kind.value, record_id)
            return DownloadResult(
                status=HTTP_INTERNAL_ERROR,
                error={"error": "Internal Server Error"},
            )

        return DownloadResult(
            status=HTTP_OK,
            body=body,
            filename=profile.filename(record_id),
            document=document,
        )

    def deliver(
        self,
        kind: Union[DocumentKind, str],
        record_id: str,
        sink: DeliverySink,
    ) -> DownloadResult:
        """Download and hand the bytes to a sink; errors are returned, not sent."""
        result = self.download(kind, record_id)
        if result.ok:
            sink.deliver(result.body, result.filename)
        return result
