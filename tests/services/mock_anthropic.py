"""Mock Anthropic Client — stands in for ResilientAnthropicClient in service tests.

Invariants:
    - MockAnthropicClient sequences responses (one per complete_text call)
    - A queued Exception is raised instead of returned
    - An empty queue answers "" (the client's "no text blocks" result)
    - Every call is recorded for prompt assertions

Design Decisions:
    - Mocks the wrapper, not the SDK: retry/backoff is tested separately
      against fake SDK errors, services only see text or AIProviderError
    - Builders return JSON strings shaped like what the prompts ask for
"""

import json


class MockAnthropicClient:
    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, *items):
        self.responses.extend(items)

    async def complete_text(
        self, *, model, max_tokens, system, user_message, context=None,
    ):
        self.calls.append({
            "model": model,
            "max_tokens": max_tokens,
            "system": system,
            "user_message": user_message,
        })
        if not self.responses:
            return ""
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


# -- Builders ------------------------------------------------------------------


def rating_json(
    rating=4,
    claim_evaluation="plausible",
    confidence="medium",
    reasoning=None,
    fenced=False,
    **extra,
):
    """Rating response as the model would write it (camelCase keys)."""
    body = {
        "rating": rating,
        "claimEvaluation": claim_evaluation,
        "confidence": confidence,
        "reasoning": reasoning or ["Established outlet", "Primary data cited"],
        **extra,
    }
    text = json.dumps(body)
    return f"```json\n{text}\n```" if fenced else text


def topics_json(categories=("Politics", "Religion", "Finance")):
    return json.dumps({
        "topics": [
            {
                "category": c,
                "title": f"{c} headline",
                "question": f"Should {c.lower()} change?",
                "description": f"What happened in {c.lower()} this week",
                "controversy": "People disagree",
            }
            for c in categories
        ],
    })
