from __future__ import annotations

from typing import Any, Optional


class PedigreeError(Exception):
    """Base class for errors surfaced to callers of the pedigree engine."""


class DogNotFoundError(PedigreeError):
    """
    A requested dog id has no record in the store.

    Raised only for ids the caller asked for directly. A missing sire/dam
    reached during traversal just ends that branch.
    """

    def __init__(self, message: str, dog_id: Optional[Any] = None) -> None:
        super().__init__(message)
        self.dog_id = dog_id


class InvalidPairingError(PedigreeError):
    """Sire/dam genders do not form a valid breeding pair."""
