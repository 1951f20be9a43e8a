"""Rank ladder tests — thresholds and progress toward the next rank."""

from arguably.core.ranks import RANKS, progress_to_next_rank, rank_for_points


def test_zero_points_is_first_rank():
    assert rank_for_points(0) is RANKS[0]


def test_negative_points_fall_back_to_first_rank():
    assert rank_for_points(-10) is RANKS[0]


def test_threshold_is_inclusive():
    assert rank_for_points(25).name == "Apprentice"
    assert rank_for_points(24).name == "Novice Debater"


def test_top_rank():
    assert rank_for_points(10_000).name == "Legendary"


def test_ranks_sorted_ascending():
    mins = [r.min_points for r in RANKS]
    assert mins == sorted(mins)
    assert mins[0] == 0


def test_progress_halfway():
    progress = progress_to_next_rank(50)   # Apprentice 25 -> Skilled 75
    assert progress.current.name == "Apprentice"
    assert progress.next.name == "Skilled Debater"
    assert progress.progress == 50.0


def test_progress_at_top_rank_is_complete():
    progress = progress_to_next_rank(500)
    assert progress.next is None
    assert progress.progress == 100.0
