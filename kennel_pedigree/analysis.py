from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .advisory import advise
from .ancestor_paths import AncestorMap, collect_ancestors
from .coefficient import score_common_ancestors
from .common_ancestors import find_common_ancestors
from .dog_store import RecordStore
from .errors import DogNotFoundError, InvalidPairingError
from .models import DogRecord, LinebreedingResult, PedigreeNode
from .pedigree_tree import build_pedigree_tree

LOGGER = logging.getLogger(__name__)

DEFAULT_PEDIGREE_GENERATIONS = 3
DEFAULT_ANALYSIS_GENERATIONS = 6


# ---------------------------------------------------------------------------
# Single-dog pedigree
# ---------------------------------------------------------------------------

def dog_pedigree(
    store: RecordStore,
    dog_id: Any,
    generations: int = DEFAULT_PEDIGREE_GENERATIONS,
) -> PedigreeNode:
    """
    Display pedigree for one dog, `generations` parent hops deep.

    Raises DogNotFoundError if the dog itself is unknown.
    """
    tree = build_pedigree_tree(store, dog_id, generations)
    if tree is None:
        raise DogNotFoundError(f"Dog with ID {dog_id} not found", dog_id=dog_id)
    return tree


# ---------------------------------------------------------------------------
# Pairwise linebreeding analysis
# ---------------------------------------------------------------------------

class AnalysisState(Enum):
    INIT = "init"
    VALIDATED = "validated"
    COLLECTED = "collected"
    SCORED = "scored"
    DONE = "done"
    REJECTED = "rejected"


class PairwiseAnalysis:
    """
    One sire/dam analysis run.

        INIT -> VALIDATED -> COLLECTED -> SCORED -> DONE
        INIT -> REJECTED   (missing dog or gender mismatch)

    Instances hold only per-run state. Create a new one per request.
    """

    def __init__(
        self,
        store: RecordStore,
        sire_id: Any,
        dam_id: Any,
        generations: int = DEFAULT_ANALYSIS_GENERATIONS,
    ) -> None:
        self.store = store
        self.sire_id = sire_id
        self.dam_id = dam_id
        self.generations = generations
        self.state = AnalysisState.INIT

        self.sire: Optional[DogRecord] = None
        self.dam: Optional[DogRecord] = None
        self.sire_ancestors: AncestorMap = {}
        self.dam_ancestors: AncestorMap = {}
        self.result: Optional[LinebreedingResult] = None

    def _reject(self, exc: Exception) -> Exception:
        self.state = AnalysisState.REJECTED
        LOGGER.info("Pairing %r x %r rejected: %s", self.sire_id, self.dam_id, exc)
        return exc

    def _require(self, expected: AnalysisState, step: str) -> None:
        if self.state is not expected:
            raise RuntimeError(
                f"Cannot {step} analysis in state {self.state.value}; expected {expected.value}"
            )

    def validate(self) -> None:
        """Fetch both dogs and check genders before any traversal."""
        self._require(AnalysisState.INIT, "validate")
        sire = self.store.find_by_id(self.sire_id)
        dam = self.store.find_by_id(self.dam_id)

        if sire is None or dam is None:
            missing = self.sire_id if sire is None else self.dam_id
            raise self._reject(DogNotFoundError("One or both dogs not found", dog_id=missing))

        if not sire.is_male or not dam.is_female:
            raise self._reject(
                InvalidPairingError("Invalid breeding pair: sire must be male and dam must be female")
            )

        self.sire, self.dam = sire, dam
        self.state = AnalysisState.VALIDATED

    def collect(self) -> None:
        self._require(AnalysisState.VALIDATED, "collect")
        # The two sides are independent; each fills only its own map.
        self.sire_ancestors = collect_ancestors(self.store, self.sire_id, self.generations)
        self.dam_ancestors = collect_ancestors(self.store, self.dam_id, self.generations)
        self.state = AnalysisState.COLLECTED

    def score(self) -> None:
        self._require(AnalysisState.COLLECTED, "score")
        common = find_common_ancestors(self.sire_ancestors, self.dam_ancestors)
        coefficient, diversity = score_common_ancestors(common)
        recommendations = advise(coefficient, common, self.generations)

        self.result = LinebreedingResult(
            dog=self.sire,
            dam=self.dam,
            generations=self.generations,
            inbreeding_coefficient=coefficient,
            common_ancestors=common,
            genetic_diversity=diversity,
            recommendations=recommendations,
        )
        self.state = AnalysisState.SCORED

    def run(self) -> LinebreedingResult:
        if self.state is not AnalysisState.INIT:
            raise RuntimeError(f"Analysis already ran (state={self.state.value})")

        self.validate()
        self.collect()
        self.score()

        self.state = AnalysisState.DONE
        LOGGER.info(
            "Linebreeding %s x %s over %d generations: coefficient=%.4f, common ancestors=%d",
            self.result.dog.name,
            self.result.dam.name,
            self.generations,
            self.result.inbreeding_coefficient,
            len(self.result.common_ancestors),
        )
        return self.result


def linebreeding_analysis(
    store: RecordStore,
    sire_id: Any,
    dam_id: Any,
    generations: int = DEFAULT_ANALYSIS_GENERATIONS,
) -> LinebreedingResult:
    """
    Estimate relatedness of a candidate sire/dam pair.

    Raises:
      - DogNotFoundError if either dog is unknown
      - InvalidPairingError if the sire is not male or the dam not female
    """
    return PairwiseAnalysis(store, sire_id, dam_id, generations).run()
