"""AI payload schema tests — the rating and weekly-topics contracts."""

import pytest
from pydantic import ValidationError

from arguably.core.domain_types import ClaimEvaluation, RatingConfidence
from arguably.schemas.ai import RatingPayload, TopicsPayload


def _rating(**overrides) -> dict:
    data = {
        "rating": 4,
        "claimEvaluation": "plausible",
        "confidence": "medium",
        "reasoning": ["Reputable outlet", "Cites primary data"],
    }
    data.update(overrides)
    return data


def test_valid_rating_parses_aliases():
    payload = RatingPayload.model_validate(_rating(suggestedCorrection="Say X"))
    assert payload.rating == 4
    assert payload.claim_evaluation == ClaimEvaluation.PLAUSIBLE
    assert payload.confidence == RatingConfidence.MEDIUM
    assert payload.suggested_correction == "Say X"
    assert payload.warning is None


@pytest.mark.parametrize("rating", [0, 6, "5", 4.5, True])
def test_rating_must_be_int_in_range(rating):
    with pytest.raises(ValidationError):
        RatingPayload.model_validate(_rating(rating=rating))


def test_unknown_claim_evaluation_rejected():
    with pytest.raises(ValidationError):
        RatingPayload.model_validate(_rating(claimEvaluation="true"))


def test_empty_reasoning_rejected():
    with pytest.raises(ValidationError):
        RatingPayload.model_validate(_rating(reasoning=[]))


def test_blank_reasoning_item_rejected():
    with pytest.raises(ValidationError):
        RatingPayload.model_validate(_rating(reasoning=["ok", "   "]))


def test_blank_optional_strings_become_none():
    payload = RatingPayload.model_validate(_rating(warning="  ", quoteExample=""))
    assert payload.warning is None
    assert payload.quote_example is None


def _topic(category, **overrides) -> dict:
    data = {"category": category, "title": f"{category} title"}
    data.update(overrides)
    return data


def test_topics_need_one_per_category():
    payload = TopicsPayload.model_validate({"topics": [
        _topic("Politics"), _topic("Religion"), _topic("Finance", question="Q?"),
    ]})
    assert len(payload.topics) == 3
    assert payload.topics[0].question == "Politics title"
    assert payload.topics[2].question == "Q?"


def test_duplicate_category_rejected():
    with pytest.raises(ValidationError):
        TopicsPayload.model_validate({"topics": [
            _topic("Politics"), _topic("Politics"), _topic("Finance"),
        ]})


def test_missing_category_rejected():
    with pytest.raises(ValidationError):
        TopicsPayload.model_validate({"topics": [_topic("Politics"), _topic("Religion")]})


def test_unknown_category_rejected():
    with pytest.raises(ValidationError):
        TopicsPayload.model_validate({"topics": [
            _topic("Politics"), _topic("Religion"), _topic("Sports"),
        ]})
