"""API Dependencies — acting identity and AI collaborators, all overridable in tests.

Invariants:
    - The acting identity comes only from the X-User-Id header (set by the auth gateway)
    - One Anthropic client per process (lru_cache); collaborators are cheap wrappers

Design Decisions:
    - Collaborators injected with Depends: tests swap them via app.dependency_overrides
"""

from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header

from arguably.config import get_settings
from arguably.infrastructure.anthropic_client import ResilientAnthropicClient
from arguably.infrastructure.page_fetcher import PageFetcher
from arguably.services.debate_evaluator import DebateEvaluator
from arguably.services.source_rater import SourceRater
from arguably.services.topic_generator import TopicGenerator


async def get_actor_id(x_user_id: UUID = Header(...)) -> UUID:
    """Authenticated user id, required."""
    return x_user_id


async def get_optional_actor_id(x_user_id: UUID | None = Header(None)) -> UUID | None:
    return x_user_id


@lru_cache
def get_anthropic_client() -> ResilientAnthropicClient:
    settings = get_settings()
    return ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )


def get_page_fetcher() -> PageFetcher:
    settings = get_settings()
    return PageFetcher(
        timeout_seconds=settings.page_fetch_timeout_seconds,
        max_chars=settings.page_content_max_chars,
        max_bytes=settings.page_fetch_max_bytes,
    )


def get_source_rater(
    client: ResilientAnthropicClient = Depends(get_anthropic_client),
    fetcher: PageFetcher = Depends(get_page_fetcher),
) -> SourceRater:
    settings = get_settings()
    return SourceRater(
        client, fetcher,
        model=settings.rating_model, max_tokens=settings.rating_max_tokens,
    )


def get_debate_evaluator(
    client: ResilientAnthropicClient = Depends(get_anthropic_client),
) -> DebateEvaluator:
    settings = get_settings()
    return DebateEvaluator(
        client,
        model=settings.evaluation_model, max_tokens=settings.evaluation_max_tokens,
    )


def get_topic_generator(
    client: ResilientAnthropicClient = Depends(get_anthropic_client),
) -> TopicGenerator:
    settings = get_settings()
    return TopicGenerator(
        client, model=settings.topics_model, max_tokens=settings.topics_max_tokens,
    )
