from __future__ import annotations

from typing import List, Tuple

from .ancestor_paths import pathway_length
from .models import CommonAncestor


def pathway_contribution(pathway: str) -> float:
    """
    Genetic share attributed to an ancestor through one route.

        contribution = 0.5 ** (pathway_length - 1)

    A parent ("Sire > Grandsire", 2 dogs) contributes 0.5, a grandparent
    0.25, and the subject itself 1.0.
    """
    return 0.5 ** (pathway_length(pathway) - 1)


def score_common_ancestors(common_ancestors: List[CommonAncestor]) -> Tuple[float, float]:
    """
    Aggregate common-ancestor contributions.

    Returns (coefficient, diversity):
      coefficient = sum of contributions (not clamped above)
      diversity   = max(0, 1 - coefficient)

    Sorts common_ancestors IN PLACE by descending contribution; ties keep
    their detection order.
    """
    coefficient = 0.0
    for ca in common_ancestors:
        coefficient += ca.contribution

    common_ancestors.sort(key=lambda ca: ca.contribution, reverse=True)

    diversity = max(0.0, 1.0 - coefficient)
    return coefficient, diversity
