"""Scoring Policy — point awards applied at the moment of each transition.

Invariants:
    - score_transition is PURE: (action, has_source, source_rating) -> int
    - Points always go to the evidence submitter (admit defeat: to the opponent)
    - Bonuses are additive and computed once; a later re-rating never changes past awards

Design Decisions:
    - Point table as module constants: tests and services read the same numbers
"""

from arguably.core.domain_types import EvidenceAction


AGREE_POINTS = 2
VALIDATE_POINTS = 5
SOURCE_BONUS = 2
HIGH_QUALITY_SOURCE_BONUS = 3
HIGH_QUALITY_MIN_RATING = 4
ADMIT_DEFEAT_BONUS = 15

# Group discussions: each "agree" response earns the evidence author one point
GROUP_AGREE_POINTS = 1

_BASE_POINTS: dict[EvidenceAction, int] = {
    EvidenceAction.AGREE: AGREE_POINTS,
    EvidenceAction.VALIDATE: VALIDATE_POINTS,
}


def score_transition(
    action: EvidenceAction,
    has_source: bool,
    source_rating: int | None = None,
) -> int:
    """Points awarded to the submitter for one transition.

    Only agree and validate award points; every other action scores 0.
    """
    base = _BASE_POINTS.get(action)
    if base is None:
        return 0
    points = base
    if has_source:
        points += SOURCE_BONUS
    if source_rating is not None and source_rating >= HIGH_QUALITY_MIN_RATING:
        points += HIGH_QUALITY_SOURCE_BONUS
    return points
