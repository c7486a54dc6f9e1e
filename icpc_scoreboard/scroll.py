"""Freeze/scroll controller.

Scroll replays the results hidden by a freeze, one problem at a time:
- pick the worst-ranked team that still has a frozen problem
- reveal its frozen problem with the smallest letter
- re-rank the whole board and report a swap if the team moved up
- repeat until nothing is frozen

A swap always names the team the revealed team sat directly below before
the reveal, even when it jumped past several teams at once.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .ranking import ScoreboardRow

if TYPE_CHECKING:
    from .contest import ContestState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankSwap:
    team: str
    passed: str
    # Totals of ``team`` once the whole scroll has finished
    solved_count: int
    penalty_time: int


@dataclass(frozen=True)
class ScrollResult:
    before: tuple[ScoreboardRow, ...]
    swaps: tuple[RankSwap, ...]
    after: tuple[ScoreboardRow, ...]


def next_reveal(state: ContestState) -> tuple[str, int] | None:
    """(team, problem index) to reveal next, or None when nothing is frozen."""
    for name in reversed(state.order):
        pending = state.frozen_problems.get(name)
        if pending:
            return name, min(pending)
    return None


def reveal(state: ContestState, team_name: str, index: int) -> str | None:
    """Disclose one hidden problem and re-rank.

    Returns the team that ``team_name`` sat directly below before the reveal
    if it moved up, else None.

    The earliest hidden acceptance, if any, goes through the ordinary solved
    transition. Hidden rejections are dropped unless the config counts them.
    """
    team = state.teams[team_name]
    status = team.problems[index]
    state.frozen_problems[team_name].discard(index)

    if state.config.count_frozen_rejections:
        status.wrong_submissions += status.hidden_rejections
    if status.hidden_accept_time is not None:
        state.apply_acceptance(team, index, status.hidden_accept_time)

    old_pos = state.order.index(team_name)
    previous = state.order[old_pos - 1] if old_pos > 0 else None
    new_order = state.recompute_ranking()
    new_pos = new_order.index(team_name)
    logger.debug(
        f"Revealed {team_name}/{state.problems[index]}: "
        f"{'accepted' if status.solved else 'not accepted'}, rank {old_pos + 1} -> {new_pos + 1}"
    )

    status.clear_frozen()
    if previous is None or new_pos >= old_pos:
        return None
    return previous


def run_scroll(state: ContestState) -> ScrollResult:
    """Run the reveal loop on a frozen contest.

    Every iteration removes one entry from ``state.frozen_problems``, so the
    loop is bounded by the number of frozen problems. Leaving the frozen
    state is up to the caller.
    """
    before = state.flush()
    passes: list[tuple[str, str]] = []
    while True:
        target = next_reveal(state)
        if target is None:
            break
        passed = reveal(state, *target)
        if passed is not None:
            passes.append((target[0], passed))
    # Swap totals are read after the loop, so they are the final ones.
    swaps = [
        RankSwap(
            team=name,
            passed=passed,
            solved_count=state.teams[name].solved_count,
            penalty_time=state.teams[name].penalty_time,
        )
        for name, passed in passes
    ]
    after = state.snapshot()
    return ScrollResult(before=before, swaps=tuple(swaps), after=after)
