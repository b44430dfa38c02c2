from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .identifiers import normalize_dog_id


def _first_present(d: Dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among column aliases."""
    for key in keys:
        v = d.get(key)
        if v is not None:
            return v
    return None


def _normalize_gender(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    s = str(raw).strip().lower()
    return s or None


# ---------------------------------------------------------------------------
# Store records
# ---------------------------------------------------------------------------

@dataclass
class DogRecord:
    """
    One dog row as returned by a record store.

    The engine only reads these. Display attributes (registration number,
    breed, birth date, colour, titles, image) are carried through unchanged
    to tree and analysis output.
    """
    id: Any                              # int (legacy) or UUID-like string
    name: str
    gender: Optional[str] = None         # "male" / "female"
    sire_id: Any = None
    dam_id: Any = None
    registration_number: Optional[str] = None
    breed: Optional[str] = None
    date_of_birth: Any = None
    color: Optional[str] = None
    titles: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def canonical_id(self) -> str:
        return normalize_dog_id(self.id)

    @property
    def is_male(self) -> bool:
        return self.gender == "male"

    @property
    def is_female(self) -> bool:
        return self.gender == "female"

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "DogRecord":
        """
        Build a record from a store row.

        Historical rows were written under several column aliases
        (camelCase from the API, snake_case from the database), so both
        spellings are accepted.
        """
        titles = d.get("titles")
        if titles is None:
            titles = []
        elif isinstance(titles, str):
            titles = [t.strip() for t in titles.split(",") if t.strip()]
        else:
            titles = list(titles)

        return DogRecord(
            id=d.get("id"),
            name=d.get("name") or "",
            gender=_normalize_gender(_first_present(d, "gender", "sex")),
            sire_id=_first_present(d, "sireId", "sire_id"),
            dam_id=_first_present(d, "damId", "dam_id"),
            registration_number=_first_present(d, "registrationNumber", "registration_number"),
            breed=d.get("breed"),
            date_of_birth=_first_present(d, "dateOfBirth", "date_of_birth"),
            color=d.get("color"),
            titles=titles,
            image_url=_first_present(d, "mainImageUrl", "imageUrl", "image_url", "main_image_url"),
            raw=dict(d),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "gender": self.gender,
            "sireId": self.sire_id,
            "damId": self.dam_id,
            "registrationNumber": self.registration_number,
            "breed": self.breed,
            "dateOfBirth": self.date_of_birth,
            "color": self.color,
            "titles": list(self.titles),
            "imageUrl": self.image_url,
        }


# ---------------------------------------------------------------------------
# Pedigree representation
# ---------------------------------------------------------------------------

@dataclass
class PedigreeNode:
    """One dog in a display pedigree. Parents are nested nodes or None."""
    id: str
    name: str
    generation: int                      # 0 = subject dog, 1 = parents, ...
    registration_number: Optional[str] = None
    breed: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Any = None
    color: Optional[str] = None
    titles: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    coefficient: float = 0.0
    sire: Optional["PedigreeNode"] = None
    dam: Optional["PedigreeNode"] = None

    @staticmethod
    def from_record(record: DogRecord, generation: int) -> "PedigreeNode":
        return PedigreeNode(
            id=record.canonical_id,
            name=record.name,
            generation=generation,
            registration_number=record.registration_number,
            breed=record.breed,
            gender=record.gender,
            date_of_birth=record.date_of_birth,
            color=record.color,
            titles=list(record.titles),
            image_url=record.image_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "generation": self.generation,
            "registrationNumber": self.registration_number,
            "breed": self.breed,
            "gender": self.gender,
            "dateOfBirth": self.date_of_birth,
            "color": self.color,
            "titles": list(self.titles),
            "imageUrl": self.image_url,
            "coefficient": self.coefficient,
            "sire": self.sire.to_dict() if self.sire else None,
            "dam": self.dam.to_dict() if self.dam else None,
        }


@dataclass
class AncestorEntry:
    """
    An ancestor reached from an analysis root, with every route to it.

    Each path is a breadcrumb such as "Root > Sire > Grandsire". An ancestor
    reached by N distinct routes carries N paths.
    """
    record: DogRecord
    paths: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Pairwise analysis
# ---------------------------------------------------------------------------

@dataclass
class CommonAncestor:
    dog: DogRecord
    occurrences: int
    pathways: List[str]
    contribution: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dog": self.dog.to_dict(),
            "occurrences": self.occurrences,
            "pathways": list(self.pathways),
            "contribution": self.contribution,
        }


@dataclass
class LinebreedingResult:
    """
    Outcome of a sire/dam relatedness analysis.

    `dog` is the candidate sire, kept as the nominal subject of the result.
    `common_ancestors` is ordered by descending contribution.
    """
    dog: DogRecord
    dam: DogRecord
    generations: int
    inbreeding_coefficient: float
    common_ancestors: List[CommonAncestor]
    genetic_diversity: float
    recommendations: List[str]

    @property
    def top_ancestor(self) -> Optional[CommonAncestor]:
        return self.common_ancestors[0] if self.common_ancestors else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dog": self.dog.to_dict(),
            "dam": self.dam.to_dict(),
            "generations": self.generations,
            "inbreedingCoefficient": self.inbreeding_coefficient,
            "commonAncestors": [c.to_dict() for c in self.common_ancestors],
            "geneticDiversity": self.genetic_diversity,
            "recommendations": list(self.recommendations),
        }
