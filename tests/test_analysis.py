from __future__ import annotations

import pytest

from kennel_pedigree.advisory import ACCEPTABLE_MESSAGE, HIGH_RISK_MESSAGE, MODERATE_RISK_MESSAGE
from kennel_pedigree.analysis import AnalysisState, PairwiseAnalysis, linebreeding_analysis
from kennel_pedigree.dog_store import InMemoryDogStore
from kennel_pedigree.errors import DogNotFoundError, InvalidPairingError, PedigreeError


def test_full_sibling_mating(kennel) -> None:
    result = linebreeding_analysis(kennel, 3, 4)

    assert result.dog.name == "Rex"
    assert result.dam.name == "Luna"
    assert result.generations == 6
    assert result.inbreeding_coefficient == 1.0
    assert result.genetic_diversity == 0.0
    assert [ca.dog.name for ca in result.common_ancestors] == ["Bruno", "Bella"]
    assert result.recommendations == [
        HIGH_RISK_MESSAGE,
        "Found 2 common ancestors in the pedigree.",
        "Bruno has a high genetic contribution (50.0%). Consider potential impact on offspring.",
    ]


def test_grand_dam_mated_back(kennel) -> None:
    result = linebreeding_analysis(kennel, 14, 12)

    assert [(ca.dog.name, ca.contribution) for ca in result.common_ancestors] == [
        ("Gaia", 0.25),
        ("Ajax", 0.125),
        ("Hera", 0.125),
    ]
    assert result.inbreeding_coefficient == 0.5
    assert result.genetic_diversity == 0.5
    assert result.recommendations[0] == HIGH_RISK_MESSAGE
    assert result.recommendations[2].startswith("Gaia has a high genetic contribution (25.0%)")


def test_shared_grandsire_is_moderate(kennel) -> None:
    result = linebreeding_analysis(kennel, 43, 44)

    assert result.inbreeding_coefficient == 0.25
    assert result.top_ancestor.dog.name == "Zeus"
    assert result.top_ancestor.pathways == ["Ares > Apollo > Zeus", "Athena > Hermes > Zeus"]
    assert result.recommendations[0] == MODERATE_RISK_MESSAGE


def test_shared_grandsire_outside_bound(kennel) -> None:
    result = linebreeding_analysis(kennel, 43, 44, generations=1)

    assert result.common_ancestors == []
    assert result.inbreeding_coefficient == 0.0
    assert result.genetic_diversity == 1.0
    assert result.recommendations == [
        ACCEPTABLE_MESSAGE,
        "No common ancestors found within 1 generations.",
    ]


def test_unrelated_pair(kennel) -> None:
    result = linebreeding_analysis(kennel, 22, 32)

    assert result.common_ancestors == []
    assert result.top_ancestor is None
    assert result.recommendations[1] == "No common ancestors found within 6 generations."


def test_missing_dog_is_rejected(kennel) -> None:
    with pytest.raises(DogNotFoundError, match="One or both dogs not found"):
        linebreeding_analysis(kennel, 3, 999)

    with pytest.raises(PedigreeError):
        linebreeding_analysis(kennel, None, 4)


def test_wrong_genders_rejected_before_traversal(recording_kennel) -> None:
    analysis = PairwiseAnalysis(recording_kennel, 4, 3)

    with pytest.raises(
        InvalidPairingError,
        match="Invalid breeding pair: sire must be male and dam must be female",
    ):
        analysis.run()

    assert analysis.state is AnalysisState.REJECTED
    assert recording_kennel.lookups == [4, 3]


def test_two_females_rejected(kennel) -> None:
    with pytest.raises(InvalidPairingError):
        linebreeding_analysis(kennel, 4, 32)


def test_gender_is_case_insensitive() -> None:
    store = InMemoryDogStore([
        {"id": 1, "name": "Bo", "gender": "MALE"},
        {"id": 2, "name": "Kia", "sex": " Female "},
    ])

    result = linebreeding_analysis(store, "1", "2")
    assert result.common_ancestors == []


def test_analysis_state_progression(kennel) -> None:
    analysis = PairwiseAnalysis(kennel, 3, 4, generations=2)
    assert analysis.state is AnalysisState.INIT

    analysis.validate()
    assert analysis.state is AnalysisState.VALIDATED

    analysis.collect()
    assert analysis.state is AnalysisState.COLLECTED
    assert set(analysis.sire_ancestors) == {"3", "1", "2"}

    analysis.score()
    assert analysis.state is AnalysisState.SCORED
    assert analysis.result.inbreeding_coefficient == 1.0


def test_analysis_runs_once(kennel) -> None:
    analysis = PairwiseAnalysis(kennel, 3, 4)
    analysis.run()
    assert analysis.state is AnalysisState.DONE

    with pytest.raises(RuntimeError):
        analysis.run()


def test_result_to_dict(kennel) -> None:
    d = linebreeding_analysis(kennel, 3, 4).to_dict()

    assert d["dog"]["name"] == "Rex"
    assert d["dam"]["name"] == "Luna"
    assert d["inbreedingCoefficient"] == 1.0
    assert d["geneticDiversity"] == 0.0
    assert d["commonAncestors"][0]["dog"]["name"] == "Bruno"
    assert d["commonAncestors"][0]["pathways"] == ["Rex > Bruno", "Luna > Bruno"]
    assert len(d["recommendations"]) == 3


def test_steps_out_of_order_raise(kennel) -> None:
    analysis = PairwiseAnalysis(kennel, 3, 4)

    with pytest.raises(RuntimeError, match="Cannot score"):
        analysis.score()
    with pytest.raises(RuntimeError, match="Cannot collect"):
        analysis.collect()
    assert analysis.state is AnalysisState.INIT

    analysis.validate()
    with pytest.raises(RuntimeError, match="Cannot score"):
        analysis.score()
