"""Document assembler: runs the block sequence for one record."""

from enum import Enum
from io import BytesIO
import logging
from typing import Optional, Tuple

from reportlab.lib.utils import ImageReader

from .assets import AssetStore
from .column_schemas import INVESTMENT_SCHEMA, has_investment_data, resolve_profile
from .config import RenderConfig
from .errors import MalformedRecordError
from .layout_engine import LayoutEngine, PageLayout
from .number_words import amount_in_words
from .primitives import RenderedDocument
from .profiles import DocumentProfile, INVOICE_PROFILE
from .records import BillingRecord
from .styles import DEFAULT_STYLE, DocumentStyle, get_bold_font, get_italic_font
from .totals import TotalRow, aggregate

LOGO_MAX_SIZE = (90.0, 60.0)
SIGNATURE_MAX_SIZE = (150.0, 50.0)
SIGNATURE_LINE_WIDTH = 180.0
BLOCK_GAP = 12.0

logger = logging.getLogger(__name__)


class AssemblyState(Enum):
    """Blocks in the order they are rendered."""
    START = "start"
    HEADER_BLOCK = "header_block"
    METADATA_BLOCK = "metadata_block"
    TABLE = "table"
    TOTALS_IN_WORDS = "totals_in_words"
    CLOSING_BLOCK = "closing_block"
    DONE = "done"


def fit_image(data: bytes, max_size: Tuple[float, float]) -> Tuple[float, float]:
    """Scale an image's pixel size to fit max_size, keeping its aspect ratio."""
    try:
        px_width, px_height = ImageReader(BytesIO(data)).getSize()
    except Exception as exc:
        raise MalformedRecordError(f"unreadable image asset: {exc}") from exc
    if px_width <= 0 or px_height <= 0:
        raise MalformedRecordError("image asset has no size")
    scale = min(max_size[0] / px_width, max_size[1] / px_height)
    return px_width * scale, px_height * scale


class DocumentAssembler:
    """
    Builds a RenderedDocument from a BillingRecord.

    The assembler itself holds only configuration; every call to render()
    gets a fresh LayoutEngine, so concurrent renders share no state.
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        profile: DocumentProfile = INVOICE_PROFILE,
        assets: Optional[AssetStore] = None,
        style: DocumentStyle = DEFAULT_STYLE,
    ):
        self.config = config or RenderConfig()
        self.profile = profile
        self.assets = assets or AssetStore(self.config.assets_dir)
        self.style = style

    def _new_engine(self) -> LayoutEngine:
        margin = self.config.page_margin
        if self.profile.orientation == "landscape":
            layout = PageLayout.landscape(margin)
        else:
            layout = PageLayout.portrait(margin)
        return LayoutEngine(
            layout=layout,
            style=self.style,
            row_height=self.config.row_height,
            header_row_height=self.config.header_row_height,
            cell_margin=self.config.cell_margin,
            repeat_header_rows=self.config.repeat_header_rows,
        )

    def render(self, record: BillingRecord) -> RenderedDocument:
        """Run every block in order; any failure aborts the whole render."""
        engine = self._new_engine()
        state = AssemblyState.START
        try:
            state = AssemblyState.HEADER_BLOCK
            self._header_block(engine)

            state = AssemblyState.METADATA_BLOCK
            self._metadata_block(engine, record)

            state = AssemblyState.TABLE
            totals = self._table_block(engine, record)

            state = AssemblyState.TOTALS_IN_WORDS
            self._words_block(engine, totals[-1])

            state = AssemblyState.CLOSING_BLOCK
            self._closing_block(engine)
        except Exception:
            logger.error(
                "Rendering %s %r aborted in %s",
                self.profile.kind.value, record.id, state.value,
            )
            raise

        document = engine.finish(self.profile.kind.value, record.id)
        logger.debug(
            "Rendered %s %r: %d page(s)", self.profile.kind.value, record.id, document.page_count
        )
        return document

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _header_block(self, engine: LayoutEngine):
        """Organization identity, optional logo and the document title."""
        style = self.style
        org = self.config.organization

        if self.config.logo_asset:
            data = self.assets.require(self.config.logo_asset)
            width, height = fit_image(data, LOGO_MAX_SIZE)
            engine.image(self.config.logo_asset, width, height, alignment="center")
            engine.move_down(4)

        bold = get_bold_font(style.font_family)
        engine.text_line(org.name, bold, style.title_font_size, "center")
        engine.text_line(org.tagline, get_italic_font(style.font_family),
                         style.tagline_font_size, "center")
        engine.text_line(f"Location: {org.location}", style.font_family,
                         style.contact_font_size, "center")
        engine.text_line(f"Email: {org.email}", style.font_family,
                         style.contact_font_size, "center")
        engine.text_line(f"Tel: {org.phone}", style.font_family,
                         style.contact_font_size, "center")
        engine.move_down(BLOCK_GAP)
        engine.text_line(self.profile.title, bold, style.heading_font_size, "center")
        engine.move_down(BLOCK_GAP)

    def _metadata_block(self, engine: LayoutEngine, record: BillingRecord):
        style = self.style
        profile = self.profile

        if profile.metadata_heading:
            engine.text_line(profile.metadata_heading, get_bold_font(style.font_family),
                             style.heading_font_size)

        for label, attribute in profile.metadata_fields:
            default = profile.category_default if attribute == "category" else profile.text_default
            value = record.display(attribute, default)
            engine.paragraph(f"{label}: {value}", style.font_family, style.metadata_font_size)
        engine.move_down(BLOCK_GAP)

    def _table_block(self, engine: LayoutEngine, record: BillingRecord) -> Tuple[TotalRow, ...]:
        """Line item table with derived totals; returns the total rows."""
        category_profile = resolve_profile(record.category)
        schema = category_profile.schema
        currency = self.config.currency_code

        totals = aggregate(
            record.category,
            record.items,
            vat_rate=self.config.vat_decimal,
            total_amount=record.total_amount,
            grand_total=record.grand_total,
        )
        engine.layout_table(
            schema,
            schema.header_row(currency),
            schema.body_rows(record.items, self.profile.text_default),
            [row.cells(schema.column_count) for row in totals],
        )

        if self.profile.include_cost_analysis and has_investment_data(record.items):
            engine.move_down(BLOCK_GAP)
            # Heading stays with the table header and its first row
            engine.ensure_room(
                self.style.heading_font_size * self.style.line_spacing
                + engine.header_row_height + engine.row_height
            )
            engine.text_line("Cost Analysis", get_bold_font(self.style.font_family),
                             self.style.heading_font_size)
            engine.layout_table(
                INVESTMENT_SCHEMA,
                INVESTMENT_SCHEMA.header_row(currency),
                INVESTMENT_SCHEMA.body_rows(record.items, self.profile.text_default),
            )

        engine.move_down(BLOCK_GAP)
        return totals

    def _words_block(self, engine: LayoutEngine, grand_total: TotalRow):
        if grand_total.value < 0:
            raise MalformedRecordError(
                f"grand total {grand_total.formatted_value} is negative"
            )
        style = self.style
        words = amount_in_words(grand_total.value, self.config.currency_unit)
        engine.paragraph(
            f"{grand_total.label}: {self.config.currency_code} {grand_total.formatted_value}",
            get_bold_font(style.font_family), style.words_font_size, "right",
        )
        engine.paragraph(f"Amount in Words: {words}", get_italic_font(style.font_family),
                         style.words_font_size)
        engine.move_down(BLOCK_GAP * 2)

    def _closing_block(self, engine: LayoutEngine):
        style = self.style
        signature = self.assets.optional(self.config.signature_asset)
        if signature is not None:
            width, height = fit_image(signature, SIGNATURE_MAX_SIZE)
            engine.image(self.config.signature_asset, width, height, alignment="left")
        else:
            engine.move_down(SIGNATURE_MAX_SIZE[1] / 2)

        engine.rule(SIGNATURE_LINE_WIDTH, alignment="left")
        engine.text_line("Authorized Signature", style.font_family, style.closing_font_size)
        engine.move_down(BLOCK_GAP * 2)

        closing = self.profile.closing_text.format(organization=self.config.organization.name)
        engine.paragraph(closing, get_italic_font(style.font_family),
                         style.closing_font_size, "center")
