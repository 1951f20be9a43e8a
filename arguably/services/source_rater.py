"""Source Rater — asks the language model how credible a cited source is.

Invariants:
    - rate() never raises for collaborator problems: every failure is a RatingFailure
    - A RatingSuccess always carries a fully validated RatingPayload
    - content_analyzed is True iff the page fetch succeeded

Design Decisions:
    - Tagged result (RatingSuccess | RatingFailure) over exceptions: callers must
      handle both arms, and rating failure is an expected outcome, not an error
    - Parsing is strict: fences stripped, one JSON object, schema-validated;
      no regex salvage of half-valid output
"""

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from arguably.core.errors import AIProviderError, ErrorContext
from arguably.core.rating_prompt import (
    RATING_SYSTEM_PROMPT, build_rating_message, strip_code_fences,
)
from arguably.infrastructure.anthropic_client import ResilientAnthropicClient
from arguably.infrastructure.page_fetcher import PageFetcher
from arguably.schemas.ai import RatingPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingSuccess:
    payload: RatingPayload
    content_analyzed: bool

    @property
    def ok(self) -> bool:
        return True

    def source_fields(self) -> dict:
        """Source verdict columns shared by debate and group evidence."""
        p = self.payload
        return {
            "source_rating": p.rating,
            "source_confidence": p.confidence.value,
            "source_reasoning": list(p.reasoning),
            "source_warning": p.warning,
        }

    def evidence_fields(self) -> dict:
        """Column values for the debate evidence row."""
        p = self.payload
        return {
            **self.source_fields(),
            "claim_evaluation": p.claim_evaluation.value,
            "suggested_correction": p.suggested_correction,
            "quote_example": p.quote_example,
            "content_analyzed": self.content_analyzed,
        }


@dataclass(frozen=True)
class RatingFailure:
    reason: str

    @property
    def ok(self) -> bool:
        return False


RatingResult = RatingSuccess | RatingFailure


def parse_rating_response(text: str, content_analyzed: bool) -> RatingResult:
    """Raw model text -> tagged result. Anything short of a valid payload fails."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        return RatingFailure("empty response")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return RatingFailure(f"response is not valid JSON: {e.msg}")
    if not isinstance(data, dict):
        return RatingFailure("response is not a JSON object")
    try:
        payload = RatingPayload.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(loc) for loc in err["loc"]) or "<root>"
            for err in e.errors()
        )
        return RatingFailure(f"response failed validation: {fields}")
    return RatingSuccess(payload=payload, content_analyzed=content_analyzed)


class SourceRater:
    """Fetch page -> build prompt -> ask model -> parse strictly."""

    def __init__(
        self,
        client: ResilientAnthropicClient,
        fetcher: PageFetcher,
        model: str,
        max_tokens: int = 1000,
    ):
        self.client = client
        self.fetcher = fetcher
        self.model = model
        self.max_tokens = max_tokens

    async def rate(
        self,
        claim: str,
        source_url: str,
        context: str | None = None,
        error_context: ErrorContext | None = None,
    ) -> RatingResult:
        page = await self.fetcher.fetch(source_url)
        try:
            text = await self.client.complete_text(
                model=self.model,
                max_tokens=self.max_tokens,
                system=RATING_SYSTEM_PROMPT,
                user_message=build_rating_message(claim, source_url, page, context),
                context=error_context,
            )
        except AIProviderError as e:
            logger.warning(
                f"Source rating call failed: {e.message}",
                extra={"error_code": e.code},
            )
            return RatingFailure(f"AI provider error ({e.api_error_type})")

        result = parse_rating_response(text, content_analyzed=page.success)
        if isinstance(result, RatingFailure):
            logger.warning(f"Source rating rejected: {result.reason}")
        return result
