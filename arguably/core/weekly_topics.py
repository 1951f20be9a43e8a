"""Weekly Topics — prompt and calendar rules for the controversial-topics feed.

Invariants:
    - PURE: no IO; "today" is always passed in
    - A week starts on Sunday (UTC date)
    - Exactly one topic per TopicCategory is requested
"""

from datetime import date, timedelta

from arguably.core.domain_types import TopicCategory

TOPICS_SYSTEM_PROMPT = """You are a political and social analyst. Return ONLY valid JSON, no other text.

Your response must be a JSON object with this exact structure:
{
  "topics": [
    {"category": "Politics", "title": "string", "question": "string", "description": "string", "controversy": "string"},
    {"category": "Religion", "title": "string", "question": "string", "description": "string", "controversy": "string"},
    {"category": "Finance", "title": "string", "question": "string", "description": "string", "controversy": "string"}
  ]
}

Rules:
- Return exactly 3 topics (one from each category)
- category must be exactly "Politics", "Religion", or "Finance"
- question should be a clear, thought-provoking question that captures the debate
- title is a brief topic statement
- Focus on current week's most debated topics
- Each field should be concise but informative"""

TOPICS_USER_MESSAGE = (
    "What are the top 3 most controversial topics this week? Return JSON only."
)

REQUIRED_CATEGORIES = frozenset(TopicCategory)


def week_start(today: date) -> date:
    """Sunday on or before `today`."""
    # date.weekday(): Monday=0 ... Sunday=6
    return today - timedelta(days=(today.weekday() + 1) % 7)
