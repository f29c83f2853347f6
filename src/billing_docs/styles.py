"""Font and color profile shared by every document block."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentStyle:
    """Visual style profile for rendered documents."""
    font_family: str = "Helvetica"  # Base font name (Helvetica, Times-Roman, Courier)
    title_font_size: int = 25
    tagline_font_size: int = 15
    contact_font_size: int = 10
    heading_font_size: int = 14
    metadata_font_size: int = 12
    table_font_size: int = 10
    words_font_size: int = 11
    closing_font_size: int = 10
    header_bg_color: str = "#E8E8E8"
    total_bg_color: str = "#F5F5F5"
    line_spacing: float = 1.25  # Line height as a multiple of font size


DEFAULT_STYLE = DocumentStyle()


def get_bold_font(font_family: str) -> str:
    """Get the bold variant of a font family."""
    if font_family == "Times-Roman":
        return "Times-Bold"
    elif font_family == "Courier":
        return "Courier-Bold"
    else:
        return f"{font_family}-Bold"


def get_italic_font(font_family: str) -> str:
    """Get the italic variant of a font family."""
    if font_family == "Times-Roman":
        return "Times-Italic"
    elif font_family == "Courier":
        return "Courier-Oblique"
    else:
        return f"{font_family}-Oblique"
