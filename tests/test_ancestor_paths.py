from __future__ import annotations

from kennel_pedigree.ancestor_paths import (
    appearance_summary,
    collect_ancestors,
    pathway_length,
)


def test_dog_without_parents_yields_only_itself(kennel) -> None:
    out = collect_ancestors(kennel, 1, 6)

    assert list(out) == ["1"]
    assert out["1"].paths == ["Bruno"]
    assert out["1"].record.name == "Bruno"


def test_ancestor_reached_twice_keeps_both_paths(kennel) -> None:
    # Puppy's parents are full siblings => Bruno and Bella appear twice at gen=2
    out = collect_ancestors(kennel, 5, 2)

    assert out["1"].paths == ["Puppy > Rex > Bruno", "Puppy > Luna > Bruno"]
    assert out["2"].paths == ["Puppy > Rex > Bella", "Puppy > Luna > Bella"]
    assert out["5"].paths == ["Puppy"]


def test_generation_bound_is_inclusive(kennel) -> None:
    assert set(collect_ancestors(kennel, 5, 0)) == {"5"}
    assert set(collect_ancestors(kennel, 5, 1)) == {"5", "3", "4"}
    assert set(collect_ancestors(kennel, 5, 2)) == {"5", "3", "4", "1", "2"}


def test_unknown_root_and_dangling_parent(kennel) -> None:
    assert collect_ancestors(kennel, 999, 6) == {}
    assert collect_ancestors(kennel, None, 6) == {}

    out = collect_ancestors(kennel, 70, 6)
    assert list(out) == ["70"]


def test_self_parent_cycle_stops_at_generation_bound(kennel) -> None:
    out = collect_ancestors(kennel, 50, 3)

    assert list(out) == ["50"]
    assert out["50"].paths == [
        "Echo",
        "Echo > Echo",
        "Echo > Echo > Echo",
        "Echo > Echo > Echo > Echo",
    ]


def test_mixed_id_representations_resolve(kennel) -> None:
    from conftest import NALA_ID, SIMBA_ID

    out = collect_ancestors(kennel, NALA_ID.upper(), 1)

    assert set(out) == {NALA_ID, SIMBA_ID}
    assert out[SIMBA_ID].paths == ["Nala > Simba"]


def test_collection_is_repeatable(kennel) -> None:
    first = collect_ancestors(kennel, 5, 3)
    second = collect_ancestors(kennel, 5, 3)

    assert first == second


def test_pathway_length_counts_dogs() -> None:
    assert pathway_length("Rex") == 1
    assert pathway_length("Puppy > Rex > Bruno") == 3


def test_appearance_summary_shows_implex(kennel) -> None:
    appearances, unique = appearance_summary(collect_ancestors(kennel, 5, 2))

    assert appearances == {0: 1, 1: 2, 2: 4}
    assert unique == {0: 1, 1: 2, 2: 2}
