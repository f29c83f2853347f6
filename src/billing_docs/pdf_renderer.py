"""PDF encoding of rendered documents using ReportLab."""

from io import BytesIO
from pathlib import Path
from typing import Optional

from reportlab.lib.colors import HexColor, black, white
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .assets import AssetStore
from .primitives import (
    ImageCommand, LineCommand, RectCommand, RenderedDocument, TextCommand,
)


class PDFRenderer:
    """Draws RenderedDocument primitives onto a ReportLab canvas."""

    def __init__(self, assets: Optional[AssetStore] = None, line_width: float = 0.75):
        self.assets = assets or AssetStore()
        self.line_width = line_width

    def render_bytes(self, document: RenderedDocument) -> bytes:
        """Encode the document as PDF bytes."""
        buffer = BytesIO()
        # invariant=1 drops timestamps and random ids so output is reproducible
        c = canvas.Canvas(buffer, pagesize=document.page_size, invariant=1)
        c.setTitle(f"{document.kind} {document.record_id}")

        for page in document.pages:
            for command in page.commands:
                self._draw(c, command)
            c.showPage()

        c.save()
        return buffer.getvalue()

    def render_file(self, document: RenderedDocument, pdf_path: Path) -> Path:
        """Encode the document and write it to pdf_path."""
        pdf_path = Path(pdf_path)
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        pdf_path.write_bytes(self.render_bytes(document))
        return pdf_path

    def _draw(self, c: canvas.Canvas, command):
        if isinstance(command, RectCommand):
            self._draw_rect(c, command)
        elif isinstance(command, TextCommand):
            self._draw_text(c, command)
        elif isinstance(command, LineCommand):
            c.setStrokeColor(black)
            c.setLineWidth(command.line_width)
            c.line(command.x1, command.y1, command.x2, command.y2)
        elif isinstance(command, ImageCommand):
            self._draw_image(c, command)
        else:
            raise TypeError(f"unsupported draw command {type(command).__name__}")

    def _draw_rect(self, c: canvas.Canvas, rect: RectCommand):
        c.setStrokeColor(black)
        c.setLineWidth(self.line_width)
        if rect.fill_color:
            c.setFillColor(HexColor(rect.fill_color))
        else:
            c.setFillColor(white)
        c.rect(rect.x, rect.y, rect.width, rect.height,
               fill=bool(rect.fill_color), stroke=rect.stroke)

    def _draw_text(self, c: canvas.Canvas, text: TextCommand):
        if not text.text:
            return
        c.setFillColor(black)
        c.setFont(text.font_name, text.font_size)

        # Handle alignment
        if text.alignment == "right":
            c.drawRightString(text.x + text.width, text.y, text.text)
        elif text.alignment == "center":
            c.drawCentredString(text.x + text.width / 2, text.y, text.text)
        else:  # left
            c.drawString(text.x, text.y, text.text)

    def _draw_image(self, c: canvas.Canvas, image: ImageCommand):
        # Missing optional assets were skipped at layout time, so this must resolve
        data = self.assets.require(image.asset)
        c.drawImage(
            ImageReader(BytesIO(data)),
            image.x, image.y,
            width=image.width,
            height=image.height,
            mask="auto",
        )
