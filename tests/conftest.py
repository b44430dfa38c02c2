from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import pytest

from kennel_pedigree.dog_store import InMemoryDogStore, save_dog_records
from kennel_pedigree.models import DogRecord

SIMBA_ID = "6f1c2b1e-8a4d-4c1e-9b7a-2f3e4d5c6b7a"
NALA_ID = "0d9e8f7a-6b5c-4d3e-8f2a-1b0c9d8e7f6a"


def _dog(id: Any, name: str, gender: str, sire: Any = None, dam: Any = None) -> dict:
    return {"id": id, "name": name, "gender": gender, "sireId": sire, "damId": dam}


KENNEL_ROWS = [
    # Full siblings Rex x Luna share both parents; Puppy is their offspring
    _dog(1, "Bruno", "male"),
    _dog(2, "Bella", "female"),
    _dog(3, "Rex", "male", 1, 2),
    _dog(4, "Luna", "female", 1, 2),
    _dog(5, "Puppy", "male", 3, 4),
    # Parent/offspring style: Gaia is Thor's grand-dam
    _dog(10, "Ajax", "male"),
    _dog(11, "Hera", "female"),
    _dog(12, "Gaia", "female", 10, 11),
    _dog(13, "Odin", "male", None, 12),
    _dog(14, "Thor", "male", 13, None),
    # Unrelated pair Buddy x Lady
    _dog(20, "Max", "male"),
    _dog(21, "Molly", "female"),
    _dog(22, "Buddy", "male", 20, 21),
    _dog(30, "Rocky", "male"),
    _dog(31, "Daisy", "female"),
    _dog(32, "Lady", "female", 30, 31),
    # Ares x Athena share one grandsire
    _dog(40, "Zeus", "male"),
    _dog(41, "Apollo", "male", 40),
    _dog(42, "Hermes", "male", 40),
    _dog(43, "Ares", "male", 41),
    _dog(44, "Athena", "female", 42),
    # Corrupt row listing itself as its sire
    _dog(50, "Echo", "male", 50),
    # Dangling parent reference
    _dog(70, "Stray", "female", 999),
    # UUID ids, referenced in a different textual form
    _dog(SIMBA_ID, "Simba", "male"),
    _dog(NALA_ID, "Nala", "female", "{" + SIMBA_ID.upper() + "}"),
]


class RecordingStore:
    """Wraps a store and remembers every id looked up."""

    def __init__(self, inner: InMemoryDogStore) -> None:
        self.inner = inner
        self.lookups: List[Any] = []

    def find_by_id(self, dog_id: Any) -> Optional[DogRecord]:
        self.lookups.append(dog_id)
        return self.inner.find_by_id(dog_id)


@pytest.fixture
def kennel() -> InMemoryDogStore:
    return InMemoryDogStore(KENNEL_ROWS)


@pytest.fixture
def recording_kennel(kennel: InMemoryDogStore) -> RecordingStore:
    return RecordingStore(kennel)


@pytest.fixture
def kennel_file(tmp_path: Path, kennel: InMemoryDogStore) -> Path:
    path = tmp_path / "dogs.json"
    save_dog_records(kennel.records(), path)
    return path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "KENNEL_PEDIGREE_CONFIG",
        "KENNEL_PEDIGREE_STORE",
        "KENNEL_PEDIGREE_API_URL",
        "KENNEL_PEDIGREE_API_TIMEOUT",
        "KENNEL_PEDIGREE_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
