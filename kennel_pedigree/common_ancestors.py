from __future__ import annotations

from typing import List

from .ancestor_paths import AncestorMap
from .coefficient import pathway_contribution
from .models import CommonAncestor


def find_common_ancestors(
    sire_ancestors: AncestorMap,
    dam_ancestors: AncestorMap,
) -> List[CommonAncestor]:
    """
    Intersect the sire-side and dam-side ancestries by canonical id.

    For every dog present on both sides, in sire-side discovery order:
      - occurrences  = sire paths + dam paths
      - pathways     = sire paths followed by dam paths
      - contribution = computed from pathways[0] only

    Only the first pathway is scored, not a per-path sum or average. The
    advisory thresholds are calibrated on this figure.

    An empty list means no shared ancestry within the collected bound.
    """
    common: List[CommonAncestor] = []

    for key, sire_entry in sire_ancestors.items():
        dam_entry = dam_ancestors.get(key)
        if dam_entry is None:
            continue

        pathways = [*sire_entry.paths, *dam_entry.paths]
        common.append(
            CommonAncestor(
                dog=sire_entry.record,
                occurrences=len(sire_entry.paths) + len(dam_entry.paths),
                pathways=pathways,
                contribution=pathway_contribution(pathways[0]),
            )
        )

    return common
