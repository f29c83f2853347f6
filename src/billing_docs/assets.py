"""Static image assets (logo, signature) resolved by logical name."""

import logging
from pathlib import Path
from typing import Dict, Optional

from .errors import MissingAssetError

logger = logging.getLogger(__name__)


class AssetStore:
    """Resolves logical asset names to bytes from a directory and/or memory."""

    def __init__(self, root: Optional[Path] = None, assets: Optional[Dict[str, bytes]] = None):
        self.root = Path(root) if root is not None else None
        self._assets: Dict[str, bytes] = dict(assets or {})

    def get(self, name: str) -> Optional[bytes]:
        """Return the asset bytes, or None when it cannot be found."""
        if name in self._assets:
            return self._assets[name]
        if self.root is None:
            return None
        path = self.root / name
        # Only plain names inside the asset directory
        if path.name != name or not path.is_file():
            return None
        data = path.read_bytes()
        self._assets[name] = data
        return data

    def require(self, name: str) -> bytes:
        data = self.get(name)
        if data is None:
            raise MissingAssetError(name)
        return data

    def optional(self, name: Optional[str]) -> Optional[bytes]:
        """Like get(), but logs and skips missing optional assets."""
        if not name:
            return None
        data = self.get(name)
        if data is None:
            logger.debug("Optional asset %r not found; skipping", name)
        return data
