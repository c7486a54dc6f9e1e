"""ICPC scoring rules (pure functions over a team's per-problem state)."""
from __future__ import annotations

from .types import WRONG_ATTEMPT_PENALTY, Team


def problem_penalty(
    team: Team, index: int, *, penalty_minutes: int = WRONG_ATTEMPT_PENALTY
) -> int:
    """Penalty of one problem: 0 if unsolved, else wrong * penalty + accept time."""
    status = team.problems[index]
    if not status.solved:
        return 0
    return penalty_minutes * status.wrong_submissions + status.first_accept_time


def solve_times(team: Team) -> list[int]:
    """First-accept times of solved problems, most recent first.

    Used only for tie-breaking; recomputed on every call because reveals
    during scroll change it.
    """
    times = [status.first_accept_time for status in team.problems if status.solved]
    times.sort(reverse=True)
    return times


def team_totals(
    team: Team, *, penalty_minutes: int = WRONG_ATTEMPT_PENALTY
) -> tuple[int, int]:
    """Recompute (solved_count, penalty_time) from the per-problem state."""
    solved = 0
    penalty = 0
    for index, status in enumerate(team.problems):
        if status.solved:
            solved += 1
            penalty += problem_penalty(team, index, penalty_minutes=penalty_minutes)
    return solved, penalty
