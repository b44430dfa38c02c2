from __future__ import annotations

from typing import List, Optional

from .models import CommonAncestor

HIGH_RISK_THRESHOLD = 0.25
MODERATE_RISK_THRESHOLD = 0.125
TOP_CONTRIBUTOR_THRESHOLD = 0.2

HIGH_RISK_MESSAGE = "High inbreeding coefficient detected. Consider a different breeding pair."
MODERATE_RISK_MESSAGE = "Moderate inbreeding coefficient. Proceed with caution and monitor for health issues."
ACCEPTABLE_MESSAGE = "Acceptable inbreeding coefficient. This breeding pair appears genetically diverse."


def risk_level(coefficient: float) -> str:
    """Classify a coefficient as "high", "moderate" or "acceptable"."""
    if coefficient > HIGH_RISK_THRESHOLD:
        return "high"
    if coefficient > MODERATE_RISK_THRESHOLD:
        return "moderate"
    return "acceptable"


def advise(
    coefficient: float,
    common_ancestors: List[CommonAncestor],
    generations: Optional[int] = None,
) -> List[str]:
    """
    Human-readable recommendations for a scored pairing.

    Order is fixed:
      1. risk-level statement
      2. common-ancestor count, or the "none found" statement
      3. (optional) warning naming the top contributor

    common_ancestors must already be sorted by descending contribution.
    """
    recommendations: List[str] = []

    level = risk_level(coefficient)
    if level == "high":
        recommendations.append(HIGH_RISK_MESSAGE)
    elif level == "moderate":
        recommendations.append(MODERATE_RISK_MESSAGE)
    else:
        recommendations.append(ACCEPTABLE_MESSAGE)

    if common_ancestors:
        recommendations.append(f"Found {len(common_ancestors)} common ancestors in the pedigree.")

        top = common_ancestors[0]
        if top.contribution > TOP_CONTRIBUTOR_THRESHOLD:
            recommendations.append(
                f"{top.dog.name} has a high genetic contribution ({top.contribution * 100:.1f}%). "
                "Consider potential impact on offspring."
            )
    else:
        within = f"{generations} generations" if generations is not None else "the specified generations"
        recommendations.append(f"No common ancestors found within {within}.")

    return recommendations
