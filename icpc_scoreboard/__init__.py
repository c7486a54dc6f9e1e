from .config import ScoreboardConfig, load_config
from .contest import ContestError, ContestState, RankingQuery
from .commands import CommandOutcome, apply_command, format_row, parse_line, run_session
from .ranking import ProblemCell, ScoreboardRow, compare_teams, compute_ranking
from .scoring import problem_penalty, solve_times, team_totals
from .scroll import RankSwap, ScrollResult
from .types import CommandPayload, Outcome, ProblemStatus, Submission, Team
from .validation import InputSanitizer, ValidatedCmd

__all__ = [
    "CommandOutcome",
    "CommandPayload",
    "ContestError",
    "ContestState",
    "InputSanitizer",
    "Outcome",
    "ProblemCell",
    "ProblemStatus",
    "RankSwap",
    "RankingQuery",
    "ScoreboardConfig",
    "ScoreboardRow",
    "ScrollResult",
    "Submission",
    "Team",
    "ValidatedCmd",
    "apply_command",
    "compare_teams",
    "compute_ranking",
    "format_row",
    "load_config",
    "parse_line",
    "problem_penalty",
    "run_session",
    "solve_times",
    "team_totals",
]
