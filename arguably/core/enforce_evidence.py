"""Evidence State Machine — validates and plans every evidence transition.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return error dict on violation, None on success (validate_*)
    - The acting identity is always an explicit argument, never ambient state
    - Actor identity AND current status are re-checked before any transition
    - Legal transitions are exactly those in TRANSITION_RULES (plus submit -> pending)

Design Decisions:
    - Snapshots (frozen dataclasses) instead of ORM rows: the core never sees the DB
    - Validation separated from planning: services reject first, then apply the plan
      inside one transaction
"""

from dataclasses import dataclass
from uuid import UUID

from arguably.core.domain_types import (
    ActorSide,
    DebateStatus,
    EvidenceAction,
    EvidenceStatus,
    NotificationKind,
)
from arguably.core.scoring import score_transition


# --- Snapshots ----------------------------------------------------------------

@dataclass(frozen=True)
class DebateSnapshot:
    """What the state machine needs to know about a debate."""
    id: UUID
    participant1_id: UUID
    participant2_id: UUID
    status: DebateStatus = DebateStatus.ACTIVE
    deleted: bool = False

    def is_participant(self, actor_id: UUID) -> bool:
        return actor_id in (self.participant1_id, self.participant2_id)

    def opponent_of(self, actor_id: UUID) -> UUID:
        if actor_id == self.participant1_id:
            return self.participant2_id
        return self.participant1_id

    def slot_of(self, participant_id: UUID) -> int:
        """1 or 2 — which score column belongs to this participant."""
        return 1 if participant_id == self.participant1_id else 2


@dataclass(frozen=True)
class EvidenceSnapshot:
    """What the state machine needs to know about one evidence item."""
    id: UUID
    participant_id: UUID
    status: EvidenceStatus
    source_url: str | None = None
    source_rating: int | None = None

    @property
    def has_source(self) -> bool:
        return bool(self.source_url)


@dataclass(frozen=True)
class TransitionRule:
    from_status: EvidenceStatus
    actor: ActorSide
    to_status: EvidenceStatus
    notification: NotificationKind


@dataclass(frozen=True)
class TransitionPlan:
    """Outcome of a validated transition — applied atomically by the shell."""
    action: EvidenceAction
    from_status: EvidenceStatus
    to_status: EvidenceStatus
    points: int
    beneficiary_id: UUID
    beneficiary_slot: int
    notify_id: UUID
    notification: NotificationKind


TRANSITION_RULES: dict[EvidenceAction, TransitionRule] = {
    EvidenceAction.AGREE: TransitionRule(
        EvidenceStatus.PENDING, ActorSide.OPPONENT,
        EvidenceStatus.AGREED, NotificationKind.EVIDENCE_AGREED,
    ),
    EvidenceAction.CHALLENGE: TransitionRule(
        EvidenceStatus.PENDING, ActorSide.OPPONENT,
        EvidenceStatus.CHALLENGED, NotificationKind.EVIDENCE_CHALLENGED,
    ),
    EvidenceAction.REQUEST_SOURCE: TransitionRule(
        EvidenceStatus.PENDING, ActorSide.OPPONENT,
        EvidenceStatus.EVIDENCE_REQUESTED, NotificationKind.SOURCE_REQUESTED,
    ),
    EvidenceAction.VALIDATE: TransitionRule(
        EvidenceStatus.CHALLENGED, ActorSide.SUBMITTER,
        EvidenceStatus.VALIDATED, NotificationKind.EVIDENCE_VALIDATED,
    ),
    EvidenceAction.COUNTER_CHALLENGE: TransitionRule(
        EvidenceStatus.CHALLENGED, ActorSide.OPPONENT,
        EvidenceStatus.CHALLENGED, NotificationKind.COUNTER_CHALLENGE,
    ),
    EvidenceAction.SUPPLY_SOURCE: TransitionRule(
        EvidenceStatus.EVIDENCE_REQUESTED, ActorSide.SUBMITTER,
        EvidenceStatus.PENDING, NotificationKind.SOURCE_SUPPLIED,
    ),
}

# Latest-item statuses that hand the turn to either participant
_OPEN_TURN_STATUSES = frozenset({EvidenceStatus.AGREED, EvidenceStatus.VALIDATED})


# --- Individual checks ----------------------------------------------------------

def check_participant(debate: DebateSnapshot, actor_id: UUID) -> dict | None:
    """Only the two debate participants may act on it."""
    if not debate.is_participant(actor_id):
        return _error(
            "NOT_PARTICIPANT",
            "Only debate participants can perform this action.",
        )
    return None


def check_debate_open(debate: DebateSnapshot) -> dict | None:
    """Completed or removed debates accept no further evidence actions."""
    if debate.deleted:
        return _error("DEBATE_CLOSED", "This debate has been removed.")
    if debate.status != DebateStatus.ACTIVE:
        return _error("DEBATE_CLOSED", "This debate is already completed.")
    return None


def check_evidence_in_debate(
    debate: DebateSnapshot, evidence: EvidenceSnapshot,
) -> dict | None:
    """Evidence must be authored by one of the debate's participants."""
    if not debate.is_participant(evidence.participant_id):
        return _error(
            "EVIDENCE_MISMATCH",
            "Evidence does not belong to this debate's participants.",
        )
    return None


def check_actor_side(
    evidence: EvidenceSnapshot, actor_id: UUID, side: ActorSide,
) -> dict | None:
    """Opponent-only actions reject the submitter and vice versa."""
    is_submitter = evidence.participant_id == actor_id
    if side == ActorSide.OPPONENT and is_submitter:
        return _error(
            "OWN_EVIDENCE",
            "You cannot respond to your own evidence.",
        )
    if side == ActorSide.SUBMITTER and not is_submitter:
        return _error(
            "NOT_SUBMITTER",
            "Only the participant who submitted this evidence can do that.",
        )
    return None


def check_status(
    evidence: EvidenceSnapshot, expected: EvidenceStatus, action: EvidenceAction,
) -> dict | None:
    """Current status must match the rule's source state."""
    if evidence.status != expected:
        return _error(
            "INVALID_STATUS",
            f"Cannot {action.value.replace('_', ' ')} evidence that is "
            f"'{evidence.status.value}' (requires '{expected.value}').",
        )
    return None


def check_turn(latest: EvidenceSnapshot | None, actor_id: UUID) -> dict | None:
    """Turn-taking: nobody may monopolize the timeline.

    Allowed when there is no evidence yet, the latest item is agreed/validated,
    or it is challenged and authored by the opponent (counter-rebuttal).
    """
    if latest is None or latest.status in _OPEN_TURN_STATUSES:
        return None
    if latest.status == EvidenceStatus.CHALLENGED and latest.participant_id != actor_id:
        return None
    return _error(
        "NOT_YOUR_TURN",
        f"Wait until the latest evidence ('{latest.status.value}') is resolved.",
    )


def can_submit(
    debate: DebateSnapshot, latest: EvidenceSnapshot | None, actor_id: UUID,
) -> bool:
    return validate_submission(debate, latest, actor_id) is None


# --- Composite validators -----------------------------------------------------

def validate_submission(
    debate: DebateSnapshot, latest: EvidenceSnapshot | None, actor_id: UUID,
) -> dict | None:
    """Validate all prerequisites for submitting new evidence."""
    return (
        check_participant(debate, actor_id)
        or check_debate_open(debate)
        or check_turn(latest, actor_id)
    )


def validate_transition(
    debate: DebateSnapshot,
    evidence: EvidenceSnapshot,
    actor_id: UUID,
    action: EvidenceAction,
) -> dict | None:
    """Validate actor identity and current status for one transition."""
    rule = TRANSITION_RULES[action]
    return (
        check_participant(debate, actor_id)
        or check_debate_open(debate)
        or check_evidence_in_debate(debate, evidence)
        or check_actor_side(evidence, actor_id, rule.actor)
        or check_status(evidence, rule.from_status, action)
    )


def plan_transition(
    debate: DebateSnapshot,
    evidence: EvidenceSnapshot,
    actor_id: UUID,
    action: EvidenceAction,
) -> TransitionPlan:
    """Compute the target state, points and notification. Call after validate_transition."""
    rule = TRANSITION_RULES[action]
    return TransitionPlan(
        action=action,
        from_status=rule.from_status,
        to_status=rule.to_status,
        points=score_transition(action, evidence.has_source, evidence.source_rating),
        beneficiary_id=evidence.participant_id,
        beneficiary_slot=debate.slot_of(evidence.participant_id),
        notify_id=debate.opponent_of(actor_id),
        notification=rule.notification,
    )


def allowed_actions(
    debate: DebateSnapshot, evidence: EvidenceSnapshot, actor_id: UUID,
) -> list[EvidenceAction]:
    """Actions the actor may take on this evidence right now (for UI hints)."""
    return [
        action for action in TRANSITION_RULES
        if validate_transition(debate, evidence, actor_id, action) is None
    ]


# --- Helper -------------------------------------------------------------------

def _error(code: str, message: str) -> dict:
    """Construct a standard error dict."""
    return {
        "status": "error",
        "error_code": code,
        "message": message,
    }
