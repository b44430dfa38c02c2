from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, Tuple

from .dog_store import RecordStore
from .identifiers import is_missing_id
from .models import AncestorEntry

LOGGER = logging.getLogger(__name__)

PATH_SEPARATOR = " > "

AncestorMap = Dict[str, AncestorEntry]


def _merge_into(result: AncestorMap, other: AncestorMap) -> None:
    # Concatenate path lists; never overwrite an entry already collected.
    for key, entry in other.items():
        if key in result:
            result[key].paths.extend(entry.paths)
        else:
            result[key] = entry


def collect_ancestors(
    store: RecordStore,
    root_id: Any,
    max_generations: int,
) -> AncestorMap:
    """
    Walk sire/dam links from root_id and record every route to every ancestor.

    Returns {canonical_id: AncestorEntry(record, paths)}. The root itself is
    included at generation 0 with its own name as the only path.

    IMPORTANT: paths are NOT deduplicated by ancestor.

      An ancestor that can be reached through N distinct routes within the
      generation bound carries exactly N path strings, e.g. a grandsire that
      is sire of both parents appears as

          "Root > Sire > Grandsire"
          "Root > Dam > Grandsire"

    Bounds:
      - generation 0 = root, recursion stops once generation > max_generations
      - a missing sire/dam id or an id the store does not know ends the branch
      - the generation bound is also the cycle guard: a record that lists
        itself (or a descendant) as a parent still terminates at the bound
    """

    def walk(dog_id: Any, generation: int, prefix: str) -> AncestorMap:
        result: AncestorMap = {}

        if generation > max_generations or is_missing_id(dog_id):
            return result

        record = store.find_by_id(dog_id)
        if record is None:
            LOGGER.debug("Ancestor %r not found; branch ends at generation %d", dog_id, generation)
            return result

        current_path = f"{prefix}{PATH_SEPARATOR}{record.name}" if prefix else record.name

        key = record.canonical_id
        result[key] = AncestorEntry(record=record, paths=[current_path])

        if not is_missing_id(record.sire_id):
            _merge_into(result, walk(record.sire_id, generation + 1, current_path))
        if not is_missing_id(record.dam_id):
            _merge_into(result, walk(record.dam_id, generation + 1, current_path))

        return result

    ancestors = walk(root_id, 0, "")
    LOGGER.debug(
        "Collected %d ancestors (%d paths) for %r within %d generations",
        len(ancestors),
        sum(len(e.paths) for e in ancestors.values()),
        root_id,
        max_generations,
    )
    return ancestors


def pathway_length(pathway: str) -> int:
    """Number of dogs on a route, the ancestor itself included."""
    return len(pathway.split(PATH_SEPARATOR))


def appearance_summary(ancestors: AncestorMap) -> Tuple[Dict[int, int], Dict[int, int]]:
    """
    APPEARANCE-based summary of a collected ancestry (does NOT deduplicate).

    Returns:
      appearances_per_gen[g] = number of paths ending at generation g
      unique_per_gen[g]      = distinct dogs appearing at generation g

    A dog reached at two different depths counts once in each generation.
    The gap between the two numbers is the pedigree's implex.
    """
    appearances: Dict[int, int] = defaultdict(int)
    unique: Dict[int, set] = defaultdict(set)

    for key, entry in ancestors.items():
        for path in entry.paths:
            gen = pathway_length(path) - 1
            appearances[gen] += 1
            unique[gen].add(key)

    gens = sorted(appearances)
    return (
        {g: appearances[g] for g in gens},
        {g: len(unique[g]) for g in gens},
    )
