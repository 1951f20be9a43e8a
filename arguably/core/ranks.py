"""Rank Ladder — maps accumulated debate points to a named rank.

Invariants:
    - RANKS ordered by min_points ascending, first rank starts at 0
    - rank_for_points returns the highest rank the points qualify for
    - progress is 0–100; 100 at the top rank
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rank:
    name: str
    min_points: int
    icon: str


@dataclass(frozen=True)
class RankProgress:
    current: Rank
    next: Rank | None
    progress: float


RANKS: tuple[Rank, ...] = (
    Rank("Novice Debater", 0, "🌱"),
    Rank("Apprentice", 25, "📖"),
    Rank("Skilled Debater", 75, "⚖️"),
    Rank("Expert", 150, "🎓"),
    Rank("Master Debater", 300, "👑"),
    Rank("Legendary", 500, "🏆"),
)


def rank_for_points(points: int) -> Rank:
    for rank in reversed(RANKS):
        if points >= rank.min_points:
            return rank
    return RANKS[0]


def progress_to_next_rank(points: int) -> RankProgress:
    """Current rank, next rank (None at the top) and percent of the way there."""
    current = rank_for_points(points)
    index = RANKS.index(current)
    if index == len(RANKS) - 1:
        return RankProgress(current, None, 100.0)

    nxt = RANKS[index + 1]
    into_current = max(0, points - current.min_points)
    needed = nxt.min_points - current.min_points
    return RankProgress(current, nxt, min(100.0, into_current / needed * 100))
