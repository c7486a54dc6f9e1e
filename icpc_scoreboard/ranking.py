"""ICPC ranking engine (comparator + scoreboard snapshot rows).

Single source of truth for team order across flush, scroll and queries:
- Comparator: more solved > less penalty > earlier most-recent solves > name.
- The full team set is re-sorted on every recomputation; nothing is patched
  incrementally, so any permutation of the input yields the same order.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Collection, Iterable, Mapping, Sequence

from .scoring import solve_times
from .types import Team


@dataclass(frozen=True)
class ProblemCell:
    solved: bool
    wrong_submissions: int
    # Hidden attempts made during the freeze; only meaningful when pending.
    frozen_submissions: int
    pending: bool


@dataclass(frozen=True)
class ScoreboardRow:
    team: str
    rank: int
    solved_count: int
    penalty_time: int
    cells: tuple[ProblemCell, ...]


def _compare_solve_times(a: Sequence[int], b: Sequence[int]) -> int:
    # Strict prefix (or identical) sequences make no decision at this level.
    for ta, tb in zip(a, b):
        if ta != tb:
            return -1 if ta < tb else 1
    return 0


def compare_teams(a: Team, b: Team) -> int:
    """Negative when ``a`` ranks above ``b``, positive when below, 0 only for a == b."""
    if a.solved_count != b.solved_count:
        return -1 if a.solved_count > b.solved_count else 1
    if a.penalty_time != b.penalty_time:
        return -1 if a.penalty_time < b.penalty_time else 1
    by_times = _compare_solve_times(solve_times(a), solve_times(b))
    if by_times:
        return by_times
    if a.name != b.name:
        return -1 if a.name < b.name else 1
    return 0


ranking_key = cmp_to_key(compare_teams)


def compute_ranking(teams: Iterable[Team]) -> list[str]:
    """Return team names ordered best first."""
    return [team.name for team in sorted(teams, key=ranking_key)]


def _to_cell(team: Team, index: int, pending: bool) -> ProblemCell:
    status = team.problems[index]
    return ProblemCell(
        solved=status.solved,
        wrong_submissions=status.wrong_submissions,
        frozen_submissions=status.frozen_submissions,
        pending=pending and not status.solved,
    )


def build_rows(
    order: Sequence[str],
    teams: Mapping[str, Team],
    frozen: Mapping[str, Collection[int]],
) -> tuple[ScoreboardRow, ...]:
    """Snapshot rows for ``order``; ``frozen`` maps team -> unrevealed problem indices."""
    rows: list[ScoreboardRow] = []
    for pos, name in enumerate(order, start=1):
        team = teams[name]
        pending = frozen.get(name, ())
        rows.append(
            ScoreboardRow(
                team=name,
                rank=pos,
                solved_count=team.solved_count,
                penalty_time=team.penalty_time,
                cells=tuple(
                    _to_cell(team, index, index in pending)
                    for index in range(len(team.problems))
                ),
            )
        )
    return tuple(rows)
