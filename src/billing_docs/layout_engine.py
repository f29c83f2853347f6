"""Layout engine for placing document blocks and bordered tables on pages."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from reportlab.lib.pagesizes import LETTER, landscape
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from .column_schemas import ColumnSchema
from .errors import ColumnCountMismatchError
from .primitives import (
    DrawCommand, ImageCommand, LineCommand, RectCommand, RenderedDocument,
    RenderedPage, TextCommand,
)
from .styles import DEFAULT_STYLE, DocumentStyle, get_bold_font


# Page dimensions
PORTRAIT_SIZE = LETTER  # 612 x 792 points
LANDSCAPE_SIZE = landscape(LETTER)  # 792 x 612 points
DEFAULT_MARGIN = 50


@dataclass
class PageLayout:
    """Defines the layout parameters for a page."""
    page_width: float = PORTRAIT_SIZE[0]
    page_height: float = PORTRAIT_SIZE[1]
    margin_left: float = DEFAULT_MARGIN
    margin_right: float = DEFAULT_MARGIN
    margin_top: float = DEFAULT_MARGIN
    margin_bottom: float = DEFAULT_MARGIN
    orientation: str = "portrait"  # "portrait" or "landscape"

    @classmethod
    def portrait(cls, margin: float = DEFAULT_MARGIN) -> "PageLayout":
        """Create a portrait layout."""
        return cls(
            page_width=PORTRAIT_SIZE[0],
            page_height=PORTRAIT_SIZE[1],
            margin_left=margin,
            margin_right=margin,
            margin_top=margin,
            margin_bottom=margin,
            orientation="portrait"
        )

    @classmethod
    def landscape(cls, margin: float = DEFAULT_MARGIN) -> "PageLayout":
        """Create a landscape layout."""
        return cls(
            page_width=LANDSCAPE_SIZE[0],
            page_height=LANDSCAPE_SIZE[1],
            margin_left=margin,
            margin_right=margin,
            margin_top=margin,
            margin_bottom=margin,
            orientation="landscape"
        )

    @property
    def page_size(self) -> Tuple[float, float]:
        return (self.page_width, self.page_height)

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def content_start_x(self) -> float:
        return self.margin_left

    @property
    def content_start_y(self) -> float:
        """Top of content area (PDF coordinates start at bottom)."""
        return self.page_height - self.margin_top


@dataclass
class LayoutCursor:
    """Mutable position state for one document render."""
    page_index: int
    y: float  # Next free y (content is placed below it)
    top: float
    bottom: float
    left: float
    width: float

    @property
    def room(self) -> float:
        return self.y - self.bottom

    @property
    def at_page_top(self) -> bool:
        return self.y >= self.top


@dataclass
class CellPlacement:
    """Describes where a table cell was placed."""
    section: str  # "header", "body" or "total"
    row_index: int  # Index within its section
    col_index: int
    page_index: int
    x: float
    y_top: float
    y_bottom: float
    width: float
    text: str

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        """Bounding box as (x0, y0, x1, y1)."""
        return (self.x, self.y_bottom, self.x + self.width, self.y_top)


def truncate_text(text: str, max_width: float, font_name: str, font_size: float) -> str:
    """Truncate text to fit within max_width, adding '...' if needed."""
    if not text:
        return text

    if stringWidth(text, font_name, font_size) <= max_width:
        return text

    ellipsis = "..."
    available_width = max_width - stringWidth(ellipsis, font_name, font_size)

    if available_width <= 0:
        return ellipsis[:1]  # Just return "." if no room

    # Start from full text and reduce
    for i in range(len(text), 0, -1):
        truncated = text[:i]
        if stringWidth(truncated, font_name, font_size) <= available_width:
            return truncated + ellipsis

    return ellipsis


class LayoutEngine:
    """
    Computes block and cell positions and collects drawing commands per page.

    One engine is created for each document render and discarded afterwards,
    so its cursor is never shared between renders.
    """

    def __init__(
        self,
        layout: Optional[PageLayout] = None,
        style: DocumentStyle = DEFAULT_STYLE,
        row_height: float = 25.0,
        header_row_height: float = 25.0,
        cell_margin: float = 5.0,
        repeat_header_rows: bool = True,
    ):
        self.layout = layout or PageLayout()
        self.style = style
        self.row_height = row_height
        self.header_row_height = header_row_height
        self.cell_margin = cell_margin
        self.repeat_header_rows = repeat_header_rows
        self.reset()

    def reset(self):
        """Reset layout state for a new document."""
        self.cursor = LayoutCursor(
            page_index=0,
            y=self.layout.content_start_y,
            top=self.layout.content_start_y,
            bottom=self.layout.margin_bottom,
            left=self.layout.content_start_x,
            width=self.layout.content_width,
        )
        self._pages: List[List[DrawCommand]] = [[]]

    @property
    def current_page(self) -> int:
        return self.cursor.page_index

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------

    def can_fit_on_current_page(self, height: float) -> bool:
        """Check if content of given height fits on current page."""
        return (self.cursor.y - height) >= self.cursor.bottom

    def start_new_page(self) -> int:
        """Move to a new page and return the new page index."""
        self.cursor.page_index += 1
        self.cursor.y = self.cursor.top
        self._pages.append([])
        return self.cursor.page_index

    def ensure_room(self, height: float) -> bool:
        """Break the page if `height` does not fit. Returns True on a break."""
        if self.can_fit_on_current_page(height) or self.cursor.at_page_top:
            return False
        self.start_new_page()
        return True

    def move_down(self, amount: float):
        """Reserve vertical space; never carries over to the next page."""
        self.cursor.y = max(self.cursor.y - amount, self.cursor.bottom)

    def emit(self, command: DrawCommand):
        self._pages[self.cursor.page_index].append(command)

    # ------------------------------------------------------------------
    # Free-flowing blocks
    # ------------------------------------------------------------------

    def _x_for(self, width: float, alignment: str) -> float:
        if alignment == "center":
            return self.cursor.left + (self.cursor.width - width) / 2
        if alignment == "right":
            return self.cursor.left + self.cursor.width - width
        return self.cursor.left

    def text_line(
        self,
        text: str,
        font_name: str,
        font_size: float,
        alignment: str = "left",
    ):
        """Place one line of text across the content width."""
        line_height = font_size * self.style.line_spacing
        self.ensure_room(line_height)
        self.cursor.y -= line_height
        baseline = self.cursor.y + (line_height - font_size) / 2 + font_size * 0.2
        self.emit(TextCommand(
            x=self.cursor.left,
            y=baseline,
            width=self.cursor.width,
            text=text,
            font_name=font_name,
            font_size=font_size,
            alignment=alignment,
        ))

    def paragraph(
        self,
        text: str,
        font_name: str,
        font_size: float,
        alignment: str = "left",
    ):
        """Word-wrap text to the content width, one text line per wrapped line."""
        lines = simpleSplit(text, font_name, font_size, self.cursor.width) or [""]
        for line in lines:
            self.text_line(line, font_name, font_size, alignment)

    def image(self, asset: str, width: float, height: float, alignment: str = "center"):
        """Place an image block and advance past it."""
        self.ensure_room(height)
        self.cursor.y -= height
        self.emit(ImageCommand(
            asset=asset,
            x=self._x_for(width, alignment),
            y=self.cursor.y,
            width=width,
            height=height,
        ))

    def rule(self, width: float, alignment: str = "left", line_width: float = 0.5):
        """Draw a horizontal line at the cursor (e.g. a signature line)."""
        self.ensure_room(line_width)
        x = self._x_for(width, alignment)
        self.emit(LineCommand(x, self.cursor.y, x + width, self.cursor.y, line_width))

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def compute_column_widths(
        self,
        schema: ColumnSchema,
        total_width: Optional[float] = None
    ) -> List[float]:
        """
        Compute absolute column widths from schema ratios.

        Ratios are normalised, and the last column takes whatever is left so
        the widths always add up to exactly `total_width`.
        """
        if total_width is None:
            total_width = self.cursor.width

        ratio_sum = sum(schema.width_ratios)
        if ratio_sum <= 0:
            raise ValueError(f"schema {schema.name!r} has no positive column widths")

        widths = [ratio / ratio_sum * total_width for ratio in schema.width_ratios[:-1]]
        widths.append(total_width - sum(widths))
        return widths

    @staticmethod
    def validate_rows(
        schema: ColumnSchema,
        header_row: Sequence[str],
        body_rows: Sequence[Sequence[str]],
        total_rows: Sequence[Sequence[str]],
    ):
        """Check every row against the schema before anything is drawn."""
        expected = schema.column_count
        if len(header_row) != expected:
            raise ColumnCountMismatchError(expected, len(header_row), 0, "header")
        for section, rows in (("body", body_rows), ("total", total_rows)):
            for idx, row in enumerate(rows):
                if len(row) != expected:
                    raise ColumnCountMismatchError(expected, len(row), idx, section)

    def layout_table(
        self,
        schema: ColumnSchema,
        header_row: Sequence[str],
        body_rows: Sequence[Sequence[str]],
        total_rows: Sequence[Sequence[str]] = (),
    ) -> List[CellPlacement]:
        """
        Lay out header, body and total rows as a bordered grid.

        Rows are drawn in input order. When a row would cross the bottom
        margin a new page is started and, if enabled, the header row is
        drawn again before continuing.

        Returns:
            CellPlacement for every cell drawn (including repeated headers).
        """
        self.validate_rows(schema, header_row, body_rows, total_rows)

        widths = self.compute_column_widths(schema)
        alignments = [spec.alignment for spec in schema.column_specs]
        regular = self.style.font_family
        bold = get_bold_font(self.style.font_family)
        placements: List[CellPlacement] = []

        # Keep the header together with at least one following row
        first_height = self.row_height if (body_rows or total_rows) else 0
        self.ensure_room(self.header_row_height + first_height)

        def draw_header():
            placements.extend(self._draw_row(
                "header", 0, header_row, widths, self.header_row_height,
                bold, ["center"] * len(widths), self.style.header_bg_color,
            ))

        draw_header()

        sections = (
            ("body", body_rows, regular, alignments, None, False),
            ("total", total_rows, bold, alignments, self.style.total_bg_color, True),
        )
        for section, rows, font_name, aligns, fill, merge_blanks in sections:
            for row_index, row in enumerate(rows):
                if not self.can_fit_on_current_page(self.row_height):
                    self.start_new_page()
                    if self.repeat_header_rows:
                        draw_header()
                placements.extend(self._draw_row(
                    section, row_index, row, widths, self.row_height,
                    font_name, aligns, fill, merge_blanks,
                ))

        return placements

    def _draw_row(
        self,
        section: str,
        row_index: int,
        row: Sequence[str],
        widths: Sequence[float],
        height: float,
        font_name: str,
        alignments: Sequence[str],
        fill_color: Optional[str] = None,
        merge_blanks: bool = False,
    ) -> List[CellPlacement]:
        """Emit border + text for each cell of one row and advance the cursor."""
        font_size = self.style.table_font_size
        y_top = self.cursor.y
        y_bottom = y_top - height
        baseline = y_bottom + (height - font_size * 0.72) / 2

        placements = []
        x = self.cursor.left
        for col_idx, (text, width) in enumerate(zip(row, widths)):
            placements.append(CellPlacement(
                section=section,
                row_index=row_index,
                col_index=col_idx,
                page_index=self.cursor.page_index,
                x=x,
                y_top=y_top,
                y_bottom=y_bottom,
                width=width,
                text=text,
            ))
            x += width

        # Total rows: blank cells fold into the label cell to their left so
        # the label can use the space; the value column stays on its own.
        boxes = []  # (x, width, text, alignment)
        for cell, alignment in zip(placements, alignments):
            if merge_blanks and boxes and not cell.text and cell.col_index < len(row) - 1:
                bx, bw, btext, balign = boxes[-1]
                boxes[-1] = (bx, bw + cell.width, btext, balign)
            else:
                boxes.append((cell.x, cell.width, cell.text, alignment))

        for bx, bw, btext, balign in boxes:
            self.emit(RectCommand(bx, y_bottom, bw, height, fill_color=fill_color))
            inner_width = bw - 2 * self.cell_margin
            self.emit(TextCommand(
                x=bx + self.cell_margin,
                y=baseline,
                width=inner_width,
                text=truncate_text(btext, inner_width, font_name, font_size),
                font_name=font_name,
                font_size=font_size,
                alignment=balign,
            ))

        self.cursor.y = y_bottom
        return placements

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def finish(self, kind: str, record_id: str) -> RenderedDocument:
        """Freeze the collected commands into a RenderedDocument."""
        pages = tuple(
            RenderedPage(index=idx, commands=tuple(commands))
            for idx, commands in enumerate(self._pages)
        )
        return RenderedDocument(
            kind=kind,
            record_id=record_id,
            page_size=self.layout.page_size,
            pages=pages,
        )
