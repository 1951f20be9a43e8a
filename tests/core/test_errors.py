"""Error hierarchy tests — codes, HTTP statuses and the response envelope."""

from arguably.core.errors import (
    AIProviderError,
    ConcurrencyError,
    ErrorContext,
    NotParticipantError,
    PermissionDeniedError,
    ResourceNotFoundError,
    TransitionRejectedError,
    raise_for_rule,
)

import pytest


def test_transition_rejected_is_400_and_not_retryable():
    err = TransitionRejectedError("INVALID_STATUS", "nope")
    assert err.http_status == 400
    assert err.code == "INVALID_STATUS"
    assert not err.retryable


def test_concurrency_conflict_is_retryable_409():
    err = ConcurrencyError("lost the race")
    assert err.http_status == 409
    assert err.retryable


def test_not_found_message():
    err = ResourceNotFoundError("Debate", "abc")
    assert err.http_status == 404
    assert "Debate 'abc' not found" == err.message


def test_ai_provider_error_carries_retry_after():
    err = AIProviderError("slow down", "rate_limit", retry_after_ms=1500)
    assert err.http_status == 503
    assert err.api_error_type == "rate_limit"
    body = err.to_response()["error"]
    assert body["code"] == "AI_PROVIDER_ERROR"
    assert body["context"]["retry_after_ms"] == 1500


def test_ai_provider_error_leaves_shared_context_untouched():
    ctx = ErrorContext(evidence_id="e-1")
    first = AIProviderError("slow down", "rate_limit", retry_after_ms=1500, context=ctx)
    later = TransitionRejectedError("NO_SOURCE", "no source", context=ctx)
    assert ctx.retry_after_ms is None
    assert first.context.retry_after_ms == 1500
    assert first.context.evidence_id == "e-1"
    assert later.context.retry_after_ms is None


def test_response_envelope_includes_context_ids():
    err = PermissionDeniedError("no", ErrorContext(debate_id="d1", evidence_id="e1"))
    body = err.to_response()["error"]
    assert body["code"] == "FORBIDDEN"
    assert body["category"] == "authorization"
    assert body["context"]["debate_id"] == "d1"
    assert body["context"]["evidence_id"] == "e1"


def test_raise_for_rule_noop_on_none():
    raise_for_rule(None)


def test_raise_for_rule_maps_not_participant_to_403():
    with pytest.raises(NotParticipantError):
        raise_for_rule({"error_code": "NOT_PARTICIPANT", "message": "m"})


def test_raise_for_rule_maps_other_codes_to_400():
    with pytest.raises(TransitionRejectedError) as exc:
        raise_for_rule({"error_code": "NOT_YOUR_TURN", "message": "wait"})
    assert exc.value.code == "NOT_YOUR_TURN"
