from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Optional

from .dog_store import RecordStore
from .identifiers import is_missing_id
from .models import PedigreeNode

LOGGER = logging.getLogger(__name__)


def build_pedigree_tree(
    store: RecordStore,
    root_id: Any,
    max_generations: int,
    current_generation: int = 0,
) -> Optional[PedigreeNode]:
    """
    Build a display pedigree rooted at root_id.

    This is a strict tree: a dog that appears in both the sire's and the
    dam's line is materialized twice, once per position. Use
    ancestor_paths.collect_ancestors() when repeated ancestors matter.

    Returns None when root_id is missing, the store has no record for it,
    or current_generation is past max_generations. The root is always built
    when it exists, so max_generations=0 yields a node without parents.
    """
    if is_missing_id(root_id) or current_generation > max_generations:
        return None

    record = store.find_by_id(root_id)
    if record is None:
        LOGGER.debug("Pedigree node %r not found at generation %d", root_id, current_generation)
        return None

    node = PedigreeNode.from_record(record, generation=current_generation)

    # Expand sire & dam unless we reached the last generation
    if current_generation < max_generations:
        node.sire = build_pedigree_tree(store, record.sire_id, max_generations, current_generation + 1)
        node.dam = build_pedigree_tree(store, record.dam_id, max_generations, current_generation + 1)

    return node


def generation_counts(tree: Optional[PedigreeNode]) -> Dict[int, int]:
    """Number of pedigree nodes per generation, breadth-first."""
    if tree is None:
        return {}

    counts: Counter = Counter()
    queue = [tree]
    while queue:
        node = queue.pop(0)
        counts[node.generation] += 1
        if node.sire:
            queue.append(node.sire)
        if node.dam:
            queue.append(node.dam)

    return dict(sorted(counts.items()))
