from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Union

from .identifiers import normalize_dog_id
from .models import DogRecord

LOGGER = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Default snapshot location (relative to project root)
DEFAULT_STORE_PATH = Path(".cache") / "dogs.json"


class RecordStore(Protocol):
    """
    The one operation the pedigree engine needs from its environment.

    Implementations return None for unknown ids. No caching or transactions
    are expected.
    """

    def find_by_id(self, dog_id: Any) -> Optional[DogRecord]:
        ...


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------

class InMemoryDogStore:
    """Dog records keyed by canonical id."""

    def __init__(self, records: Iterable[Union[DogRecord, Dict[str, Any]]] = ()) -> None:
        self._records: Dict[str, DogRecord] = {}
        for rec in records:
            self.add(rec)

    def add(self, record: Union[DogRecord, Dict[str, Any]]) -> DogRecord:
        if isinstance(record, dict):
            record = DogRecord.from_dict(record)
        key = record.canonical_id
        if not key:
            raise ValueError(f"Dog record without id: {record.name!r}")
        self._records[key] = record
        return record

    def find_by_id(self, dog_id: Any) -> Optional[DogRecord]:
        key = normalize_dog_id(dog_id)
        if not key:
            return None
        return self._records.get(key)

    def records(self) -> List[DogRecord]:
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, dog_id: Any) -> bool:
        return normalize_dog_id(dog_id) in self._records

    def __iter__(self) -> Iterator[DogRecord]:
        return iter(self._records.values())


# ---------------------------------------------------------------------------
# JSON snapshot persistence
# ---------------------------------------------------------------------------

def _rows_from_payload(payload: Any, path: Path) -> List[Dict[str, Any]]:
    """
    Extract dog rows from a snapshot payload.

    Supports:
      - legacy files where the JSON root is a list[dict]
      - versioned files: {"schema_version": 1, ..., "dogs": [...]}
    """
    if isinstance(payload, list):
        return payload

    if not isinstance(payload, dict):
        raise ValueError(f"Malformed dog snapshot {path}: expected object or list")

    schema_version = payload.get("schema_version")
    if schema_version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported dog snapshot schema_version: {schema_version}")

    dogs = payload.get("dogs")
    if not isinstance(dogs, list):
        raise ValueError("Malformed dog snapshot payload: 'dogs' must be a list")
    return dogs


def load_dog_records(path: Path) -> List[DogRecord]:
    """
    Load dog records from a JSON snapshot.

    Raises:
      - FileNotFoundError if the file does not exist
      - ValueError if the payload is malformed or has an unsupported schema
      - json.JSONDecodeError for invalid JSON

    Rows that are not objects or have no id are skipped with a warning.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dog snapshot not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)

    records: List[DogRecord] = []
    for i, row in enumerate(_rows_from_payload(payload, path)):
        if not isinstance(row, dict):
            LOGGER.warning("Skipping dog row %d in %s: expected object, got %s", i, path, type(row).__name__)
            continue
        if not normalize_dog_id(row.get("id")):
            LOGGER.warning("Skipping dog row %d in %s: missing id", i, path)
            continue
        records.append(DogRecord.from_dict(row))

    LOGGER.debug("Loaded %d dog records from %s", len(records), path)
    return records


def save_dog_records(records: Iterable[DogRecord], path: Path) -> None:
    """
    Persist dog records as a versioned JSON snapshot.

    Writes to a temporary file and atomically replaces the target.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    dogs = [r.to_dict() for r in records]
    payload: Dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "dog_count": len(dogs),
        "dogs": dogs,
    }

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, default=str)

    tmp_path.replace(path)
    LOGGER.debug("Saved %d dog records to %s", len(dogs), path)


class JsonDogStore(InMemoryDogStore):
    """In-memory store backed by a JSON snapshot on disk."""

    def __init__(self, path: Path = DEFAULT_STORE_PATH) -> None:
        self.path = Path(path)
        super().__init__(load_dog_records(self.path))

    def save(self) -> None:
        save_dog_records(self.records(), self.path)
