"""Record lookup: fetch a billing record by kind and id."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .errors import MalformedRecordError, RecordNotFoundError
from .profiles import get_profile
from .records import BillingRecord, DocumentKind

logger = logging.getLogger(__name__)


class RecordStore:
    """Interface for record lookup."""

    def fetch(self, kind: Union[DocumentKind, str], record_id: str) -> BillingRecord:
        """Return the record, or raise RecordNotFoundError."""
        raise NotImplementedError


class InMemoryRecordStore(RecordStore):
    """Records held as plain mappings, keyed by collection then id."""

    def __init__(self, collections: Optional[Dict[str, Dict[str, Mapping[str, Any]]]] = None):
        self.collections: Dict[str, Dict[str, Mapping[str, Any]]] = {
            name: dict(docs) for name, docs in (collections or {}).items()
        }

    def add(self, kind: Union[DocumentKind, str], record_id: str, data: Mapping[str, Any]):
        collection = get_profile(kind).collection
        self.collections.setdefault(collection, {})[str(record_id)] = data

    def fetch(self, kind: Union[DocumentKind, str], record_id: str) -> BillingRecord:
        profile = get_profile(kind)
        data = self.collections.get(profile.collection, {}).get(str(record_id))
        if data is None:
            raise RecordNotFoundError(profile.kind.value, record_id)
        return BillingRecord.from_mapping(record_id, data)


def is_safe_record_id(record_id: str) -> bool:
    """Ids map to file names; reject anything that could leave the collection dir."""
    if not record_id or record_id.startswith("."):
        return False
    if "/" in record_id or "\\" in record_id:
        return False
    return Path(record_id).name == record_id


class JsonRecordStore(RecordStore):
    """
    Records stored as JSON files: <root>/<collection>/<id>.json.

    Collections are "invoices" and "summary".
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, kind: Union[DocumentKind, str], record_id: str) -> Path:
        return self.root / get_profile(kind).collection / f"{record_id}.json"

    def fetch(self, kind: Union[DocumentKind, str], record_id: str) -> BillingRecord:
        profile = get_profile(kind)
        record_id = str(record_id)
        if not is_safe_record_id(record_id):
            raise RecordNotFoundError(profile.kind.value, record_id)

        path = self.path_for(kind, record_id)
        if not path.is_file():
            raise RecordNotFoundError(profile.kind.value, record_id)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise MalformedRecordError(f"{path}: invalid JSON ({exc})") from exc

        logger.debug("Loaded %s %r from %s", profile.kind.value, record_id, path)
        return BillingRecord.from_mapping(record_id, data)

    def save(self, kind: Union[DocumentKind, str], record_id: str, data: Mapping[str, Any]) -> Path:
        """Write a record document (used by the sample generator)."""
        if not is_safe_record_id(str(record_id)):
            raise ValueError(f"invalid record id {record_id!r}")
        path = self.path_for(kind, record_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return path
