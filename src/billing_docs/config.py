"""Configuration dataclasses and YAML loading for document rendering."""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class OrganizationInfo:
    """Identity printed in the header block of every document."""
    name: str = "INNOVATION CONSORTIUM"
    tagline: str = "We Innovate"
    location: str = "Bweyogerere, Butto"
    email: str = "innovationconsortium@gmail.com"
    phone: str = "+256 753 434679"


@dataclass
class RenderConfig:
    """Main configuration for the document renderer."""

    # Pricing policy
    vat_rate: float = 0.18
    currency_code: str = "UGX"  # Shown in money column headers
    currency_unit: str = "Uganda Shillings"  # Used in the amount-in-words line

    organization: OrganizationInfo = field(default_factory=OrganizationInfo)

    # Static assets, by logical name; a configured logo is required
    logo_asset: Optional[str] = None
    signature_asset: Optional[str] = "signature.png"
    assets_dir: Optional[Path] = None

    records_dir: Path = field(default_factory=lambda: Path("records"))
    out_dir: Path = field(default_factory=lambda: Path("out"))

    # Table geometry (points)
    repeat_header_rows: bool = True
    row_height: float = 25.0
    header_row_height: float = 25.0
    cell_margin: float = 5.0
    page_margin: float = 50.0

    @property
    def vat_decimal(self) -> Decimal:
        return Decimal(str(self.vat_rate))

    @classmethod
    def from_yaml(cls, path: Path) -> "RenderConfig":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if "organization" in data:
            data["organization"] = OrganizationInfo(**(data["organization"] or {}))

        # Convert directories to Path
        for key in ("assets_dir", "records_dir", "out_dir"):
            if data.get(key) is not None:
                data[key] = Path(data[key])

        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        data = asdict(self)
        for key in ("assets_dir", "records_dir", "out_dir"):
            if data[key] is not None:
                data[key] = str(data[key])
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Path] = None) -> RenderConfig:
    """Load config from path or return default config."""
    if path is None:
        return RenderConfig()
    return RenderConfig.from_yaml(path)
