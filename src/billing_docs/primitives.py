"""Drawing primitives that make up a rendered document.

Coordinates follow ReportLab: origin at the bottom-left of the page, y upward.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class RectCommand:
    """Bordered rectangle; (x, y) is the bottom-left corner."""
    x: float
    y: float
    width: float
    height: float
    fill_color: Optional[str] = None  # Hex color, e.g. "#E8E8E8"
    stroke: bool = True
    kind: str = "rect"


@dataclass(frozen=True)
class TextCommand:
    """Single line of text aligned within [x, x + width] on baseline y."""
    x: float
    y: float
    width: float
    text: str
    font_name: str
    font_size: float
    alignment: str = "left"
    kind: str = "text"


@dataclass(frozen=True)
class LineCommand:
    x1: float
    y1: float
    x2: float
    y2: float
    line_width: float = 0.5
    kind: str = "line"


@dataclass(frozen=True)
class ImageCommand:
    """Image placed by logical asset name; (x, y) is the bottom-left corner."""
    asset: str
    x: float
    y: float
    width: float
    height: float
    kind: str = "image"


DrawCommand = Union[RectCommand, TextCommand, LineCommand, ImageCommand]


@dataclass(frozen=True)
class RenderedPage:
    index: int
    commands: Tuple[DrawCommand, ...]


@dataclass(frozen=True)
class RenderedDocument:
    """Completed document: ordered pages of drawing primitives."""
    kind: str
    record_id: str
    page_size: Tuple[float, float]
    pages: Tuple[RenderedPage, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def commands(self):
        """Iterate (page_index, command) over the whole document."""
        for page in self.pages:
            for command in page.commands:
                yield page.index, command

    def texts(self, page_index: Optional[int] = None):
        """All text strings, optionally restricted to one page."""
        return [
            command.text
            for idx, command in self.commands()
            if isinstance(command, TextCommand) and (page_index is None or idx == page_index)
        ]


def command_to_dict(command: DrawCommand) -> dict:
    return asdict(command)
