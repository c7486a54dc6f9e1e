"""Type definitions for teams, problems, submissions and commands."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TypedDict


# Penalty minutes charged per rejected attempt before acceptance.
WRONG_ATTEMPT_PENALTY = 20


class Outcome(str, Enum):
    """Judge verdict for one submission; values are the wire tokens."""

    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong_Answer"
    RUNTIME_ERROR = "Runtime_Error"
    TIME_LIMIT_EXCEEDED = "Time_Limit_Exceed"

    @classmethod
    def from_token(cls, token: str | None) -> "Outcome":
        """Map a status token onto an outcome; unknown tokens are wrong answers."""
        for outcome in cls:
            if outcome.value == token:
                return outcome
        return cls.WRONG_ANSWER


def problem_names(count: int) -> tuple[str, ...]:
    """First ``count`` capital letters: ('A', 'B', ...)."""
    return tuple(chr(ord("A") + i) for i in range(count))


def problem_index(name: str) -> int:
    return ord(name) - ord("A")


@dataclass(frozen=True)
class Submission:
    team: str
    problem: str
    outcome: Outcome
    time: int


@dataclass
class ProblemStatus:
    """
    Per-problem state of one team.

    ``wrong_submissions`` only counts attempts made strictly before the first
    accepted one. The ``frozen_*`` / ``hidden_*`` fields accumulate while the
    scoreboard is frozen and are consumed when the problem is revealed.
    """

    total_submissions: int = 0
    wrong_submissions: int = 0
    solved: bool = False
    first_accept_time: int = 0
    frozen_submissions: int = 0
    # Earliest accepted time seen during the freeze, None when none.
    hidden_accept_time: Optional[int] = None
    # Rejections during the freeze that precede the earliest hidden acceptance.
    hidden_rejections: int = 0

    def clear_frozen(self) -> None:
        self.frozen_submissions = 0
        self.hidden_accept_time = None
        self.hidden_rejections = 0


@dataclass
class Team:
    """
    A registered team.

    ``problems`` is indexed by problem index and stays empty until the contest
    starts. ``solved_count`` and ``penalty_time`` are cached totals kept in step
    with ``problems`` by the contest state.
    """

    name: str
    problems: List[ProblemStatus] = field(default_factory=list)
    solved_count: int = 0
    penalty_time: int = 0

    def status(self, index: int) -> ProblemStatus:
        return self.problems[index]


class CommandPayload(TypedDict, total=False):
    """
    TypedDict for command payloads produced by the line parser and consumed
    by apply_command().

    Fields vary by command type.
    """
    # Common
    type: str

    # ADDTEAM / QUERY_RANKING / QUERY_SUBMISSION / SUBMIT
    team: Optional[str]

    # START (raw tokens; ValidatedCmd coerces numbers)
    duration: Optional[str]
    problemCount: Optional[str]

    # SUBMIT
    problem: Optional[str]
    status: Optional[str]
    time: Optional[str]

    # QUERY_SUBMISSION ("ALL" means no filter)
    problemFilter: Optional[str]
    statusFilter: Optional[str]

