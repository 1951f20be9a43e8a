"""Debate Digest — builds the moderator prompt for a debate evaluation.

Invariants:
    - PURE: no IO
    - At most RECENT_REBUTTALS rebuttals quoted, most recent first
    - Each quoted claim truncated to CLAIM_PREVIEW_CHARS
"""

from dataclasses import dataclass, field
from uuid import UUID

RECENT_REBUTTALS = 4
CLAIM_PREVIEW_CHARS = 200

EVALUATION_SYSTEM_PROMPT = (
    "You are a neutral debate moderator. Be concise, fair, "
    "and focus on keeping discussions productive."
)


@dataclass(frozen=True)
class DigestEvidence:
    participant_id: UUID
    claim: str
    status: str


@dataclass(frozen=True)
class DebateDigest:
    """Everything the evaluator needs, already loaded by the shell."""
    topic: str
    participant1_id: UUID
    participant2_id: UUID
    participant1_name: str
    participant2_name: str
    evidence: list[DigestEvidence] = field(default_factory=list)   # oldest first

    def rebuttal_count(self, participant_id: UUID) -> int:
        return sum(1 for e in self.evidence if e.participant_id == participant_id)


def build_evaluation_prompt(digest: DebateDigest) -> str:
    recent = list(reversed(digest.evidence))[:RECENT_REBUTTALS]
    lines = [
        f'You are an impartial debate moderator analyzing a discussion on: "{digest.topic}"',
        "",
        f"{digest.participant1_name} has made "
        f"{digest.rebuttal_count(digest.participant1_id)} rebuttals.",
        f"{digest.participant2_name} has made "
        f"{digest.rebuttal_count(digest.participant2_id)} rebuttals.",
        "",
        "Recent rebuttals (most recent first):",
    ]
    for i, item in enumerate(recent, start=1):
        claim = item.claim[:CLAIM_PREVIEW_CHARS]
        if len(item.claim) > CLAIM_PREVIEW_CHARS:
            claim += "..."
        lines.append(f"{i}. [{item.status}] {claim}")
    if not recent:
        lines.append("(none yet)")
    lines += [
        "",
        "Provide a brief analysis (max 3 sentences) that:",
        "1. Identifies the core points each side is making",
        "2. Notes if either party is straying from the topic",
        "3. Suggests what specific aspect they should focus on next to resolve the debate",
        "",
        "Keep it concise, neutral, and actionable.",
    ]
    return "\n".join(lines)
