"""Core contest state transitions (pure, no I/O).

This module implements the business logic of an ICPC-style scoreboard.
Nothing here reads input, prints, or touches the filesystem; the text
protocol in ``commands`` turns results into output lines.

Architecture:
- One ContestState object per contest, passed explicitly to every caller
- Teams keep dense per-problem lists (index 0 is problem 'A')
- The submission log is append-only and kept in ingestion order
- ``order`` holds the most recent ranking; only flush/scroll re-sort it
- Domain misuse never raises: operations return a ContestError instead

Lifecycle:
- add_team: only before start
- start: fixes the problem set and zeroes every team's per-problem state
- record_submission: updates live state, or the hidden counters while frozen
- freeze / scroll: one freeze must be fully drained by scroll (see ``scroll``)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Set

from .config import ScoreboardConfig
from .ranking import ScoreboardRow, build_rows, compute_ranking
from .scoring import problem_penalty
from .scroll import ScrollResult, run_scroll
from .types import Outcome, ProblemStatus, Submission, Team, problem_index, problem_names

logger = logging.getLogger(__name__)


ErrorKind = Literal[
    "duplicate_team",
    "already_started",
    "not_started",
    "already_frozen",
    "not_frozen",
    "team_not_found",
    "unknown_problem",
    "invalid_problem_count",
]


@dataclass
class ContestError:
    """Represents a rejected operation (non-fatal, reported by the caller)."""

    kind: ErrorKind
    message: str | None = None


@dataclass(frozen=True)
class RankingQuery:
    """Result of ranking_of(); ``frozen`` means hidden results may change it."""

    team: str
    rank: int
    frozen: bool


class ContestState:
    """Mutable state of a single contest."""

    def __init__(self, config: ScoreboardConfig | None = None) -> None:
        self.config = config or ScoreboardConfig()
        self.started = False
        self.frozen = False
        self.duration = 0
        self.problems: tuple[str, ...] = ()
        self.teams: Dict[str, Team] = {}
        self.submissions: List[Submission] = []
        # Most recent ranking (registration order until the first flush)
        self.order: List[str] = []
        # team -> indices of problems frozen and not yet revealed
        self.frozen_problems: Dict[str, Set[int]] = {}

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_team(self, name: str) -> ContestError | None:
        if self.started:
            return ContestError("already_started", "competition has started")
        if name in self.teams:
            return ContestError("duplicate_team", f"duplicated team name: {name}")
        self.teams[name] = Team(name=name)
        self.order.append(name)
        logger.debug(f"Registered team {name} ({len(self.teams)} total)")
        return None

    def start(self, duration: int, problem_count: int) -> ContestError | None:
        """Fix the problem set and open the contest.

        Args:
            duration: contest length in minutes (informational)
            problem_count: number of problems, named 'A' onwards

        Returns:
            None on success, ContestError(already_started|invalid_problem_count)
        """
        if self.started:
            return ContestError("already_started", "competition has started")
        if not 1 <= problem_count <= self.config.max_problems:
            return ContestError(
                "invalid_problem_count",
                f"problem count must be 1-{self.config.max_problems}, got {problem_count}",
            )
        self.duration = duration
        self.problems = problem_names(problem_count)
        for team in self.teams.values():
            team.problems = [ProblemStatus() for _ in self.problems]
            team.solved_count = 0
            team.penalty_time = 0
        self.started = True
        # ``order`` stays in registration order until the first flush/scroll.
        logger.info(
            f"Contest started: {len(self.teams)} teams, "
            f"problems {self.problems[0]}-{self.problems[-1]}, duration {duration}"
        )
        return None

    def resolve_problem(self, name: str) -> int | None:
        """Dense index of problem ``name``, or None if it is not in the contest."""
        if len(name) != 1 or name not in self.problems:
            return None
        return problem_index(name)

    def record_submission(
        self, problem: str, team_name: str, outcome: Outcome, time: int
    ) -> ContestError | None:
        """Append a submission to the log and update the team's state.

        While frozen, a submission to a problem the team has not solved only
        feeds the hidden counters; the visible state is left untouched until
        the problem is revealed. Submissions to solved problems are inert.
        The ranking order is not recomputed here.
        """
        if not self.started:
            return ContestError("not_started", "competition has not started")
        team = self.teams.get(team_name)
        if team is None:
            return ContestError("team_not_found", f"cannot find the team: {team_name}")
        index = self.resolve_problem(problem)
        if index is None:
            return ContestError("unknown_problem", f"unknown problem: {problem}")

        self.submissions.append(
            Submission(team=team_name, problem=problem, outcome=outcome, time=time)
        )
        status = team.problems[index]
        status.total_submissions += 1

        if self.frozen and not status.solved:
            status.frozen_submissions += 1
            self.frozen_problems.setdefault(team_name, set()).add(index)
            if outcome is Outcome.ACCEPTED:
                if status.hidden_accept_time is None or time < status.hidden_accept_time:
                    status.hidden_accept_time = time
            elif status.hidden_accept_time is None:
                status.hidden_rejections += 1
            logger.debug(
                f"Hidden submission {team_name}/{problem} {outcome.value} at {time} "
                f"({status.frozen_submissions} frozen)"
            )
            return None

        if status.solved:
            return None
        if outcome is Outcome.ACCEPTED:
            self.apply_acceptance(team, index, time)
        else:
            status.wrong_submissions += 1
        return None

    def apply_acceptance(self, team: Team, index: int, time: int) -> None:
        """Solved transition: mark solved and fold the penalty into the totals."""
        status = team.problems[index]
        status.solved = True
        status.first_accept_time = time
        team.solved_count += 1
        team.penalty_time += problem_penalty(
            team, index, penalty_minutes=self.config.penalty_minutes
        )
        logger.debug(
            f"{team.name} solved {self.problems[index]} at {time}: "
            f"{team.solved_count} solved, penalty {team.penalty_time}"
        )

    def freeze(self) -> ContestError | None:
        if self.frozen:
            return ContestError("already_frozen", "scoreboard has been frozen")
        self.frozen = True
        logger.info(f"Scoreboard frozen after {len(self.submissions)} submissions")
        return None

    def scroll(self) -> ScrollResult | ContestError:
        """Reveal every frozen problem and reopen the scoreboard."""
        if not self.frozen:
            return ContestError("not_frozen", "scoreboard has not been frozen")
        result = run_scroll(self)
        self.frozen = False
        self.frozen_problems.clear()
        for team in self.teams.values():
            for status in team.problems:
                status.clear_frozen()
        logger.info(f"Scroll finished with {len(result.swaps)} rank swaps")
        return result

    # ------------------------------------------------------------------
    # Ranking
    # ------------------------------------------------------------------

    def recompute_ranking(self) -> List[str]:
        self.order = compute_ranking(self.teams.values())
        return self.order

    def snapshot(self) -> tuple[ScoreboardRow, ...]:
        """Rows for the current order, without re-sorting."""
        return build_rows(self.order, self.teams, self.frozen_problems)

    def flush(self) -> tuple[ScoreboardRow, ...]:
        self.recompute_ranking()
        return self.snapshot()

    def pending_reveals(self) -> int:
        """Total number of frozen-and-unrevealed problems across all teams."""
        return sum(len(indices) for indices in self.frozen_problems.values())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def ranking_of(self, team_name: str) -> RankingQuery | ContestError:
        if team_name not in self.teams:
            return ContestError("team_not_found", f"cannot find the team: {team_name}")
        rank = self.order.index(team_name) + 1
        return RankingQuery(team=team_name, rank=rank, frozen=self.frozen)

    def last_submission(
        self,
        team_name: str,
        problem: Optional[str] = None,
        outcome: Optional[Outcome] = None,
    ) -> Submission | ContestError | None:
        """Newest logged submission of ``team_name`` matching both filters.

        A ``None`` filter matches anything. Returns None (not an error) when
        nothing matches.
        """
        if team_name not in self.teams:
            return ContestError("team_not_found", f"cannot find the team: {team_name}")
        for submission in reversed(self.submissions):
            if submission.team != team_name:
                continue
            if problem is not None and submission.problem != problem:
                continue
            if outcome is not None and submission.outcome is not outcome:
                continue
            return submission
        return None
