"""Line-oriented text protocol around ContestState.

One command per line, whitespace-separated tokens:

    ADDTEAM <name>
    START DURATION <d> PROBLEM <p>
    SUBMIT <P> BY <team> WITH <status> AT <t>
    FLUSH | FREEZE | SCROLL | END
    QUERY_RANKING <team>
    QUERY_SUBMISSION <team> WHERE PROBLEM=<P|ALL> AND STATUS=<S|ALL>

parse_line() turns a line into a CommandPayload, apply_command() runs a
validated command and returns the output lines. Malformed or rejected
commands are logged and never stop the session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

from .contest import ContestError, ContestState
from .ranking import ProblemCell, ScoreboardRow
from .scroll import RankSwap
from .types import CommandPayload, Submission
from .validation import InputSanitizer, ValidatedCmd

logger = logging.getLogger(__name__)


# (command type, error kind) -> fixed output line
ERROR_LINES = {
    ("ADDTEAM", "already_started"): "[Error]Add failed: competition has started.",
    ("ADDTEAM", "duplicate_team"): "[Error]Add failed: duplicated team name.",
    ("START", "already_started"): "[Error]Start failed: competition has started.",
    ("START", "invalid_problem_count"): "[Error]Start failed: invalid problem count.",
    ("FREEZE", "already_frozen"): "[Error]Freeze failed: scoreboard has been frozen.",
    ("SCROLL", "not_frozen"): "[Error]Scroll failed: scoreboard has not been frozen.",
    ("QUERY_RANKING", "team_not_found"): "[Error]Query ranking failed: cannot find the team.",
    ("QUERY_SUBMISSION", "team_not_found"): "[Error]Query submission failed: cannot find the team.",
}

FROZEN_WARNING = (
    "[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled."
)
NO_SUBMISSION = "Cannot find any submission."


@dataclass
class CommandOutcome:
    """Result of applying one protocol command."""

    lines: List[str] = field(default_factory=list)
    # True once END has been processed
    stop: bool = False


def _token(tokens: List[str], idx: int) -> str | None:
    return tokens[idx] if idx < len(tokens) else None


def _strip_prefix(value: str | None, prefix: str) -> str | None:
    if value is not None and value.startswith(prefix):
        return value[len(prefix):]
    return value


def parse_line(line: str) -> CommandPayload | None:
    """Split a protocol line into a command payload (None for blank lines).

    Only the token layout is handled here; types and required fields are
    checked by ValidatedCmd.
    """
    tokens = line.split()
    if not tokens:
        return None
    ctype = tokens[0]
    payload: CommandPayload = {"type": ctype}

    if ctype in {"ADDTEAM", "QUERY_RANKING"}:
        payload["team"] = _token(tokens, 1)
    elif ctype == "START":
        # START DURATION <d> PROBLEM <p>
        payload["duration"] = _token(tokens, 2)
        payload["problemCount"] = _token(tokens, 4)
    elif ctype == "SUBMIT":
        # SUBMIT <P> BY <team> WITH <status> AT <t>
        payload["problem"] = _token(tokens, 1)
        payload["team"] = _token(tokens, 3)
        payload["status"] = _token(tokens, 5)
        payload["time"] = _token(tokens, 7)
    elif ctype == "QUERY_SUBMISSION":
        # QUERY_SUBMISSION <team> WHERE PROBLEM=<P> AND STATUS=<S>
        payload["team"] = _token(tokens, 1)
        payload["problemFilter"] = _strip_prefix(_token(tokens, 3), "PROBLEM=")
        payload["statusFilter"] = _strip_prefix(_token(tokens, 5), "STATUS=")
    return payload


def format_cell(cell: ProblemCell) -> str:
    """One problem column of a scoreboard row.

    - solved: ``+`` or ``+n`` (n rejected attempts before acceptance)
    - frozen: ``0/f`` or ``-w/f`` (f hidden attempts)
    - otherwise: ``.`` or ``-w``
    """
    wrong = cell.wrong_submissions
    if cell.solved:
        return "+" if wrong == 0 else f"+{wrong}"
    if cell.pending:
        return f"0/{cell.frozen_submissions}" if wrong == 0 else f"-{wrong}/{cell.frozen_submissions}"
    return "." if wrong == 0 else f"-{wrong}"


def format_row(row: ScoreboardRow) -> str:
    parts = [row.team, str(row.rank), str(row.solved_count), str(row.penalty_time)]
    parts.extend(format_cell(cell) for cell in row.cells)
    return " ".join(parts)


def format_swap(swap: RankSwap) -> str:
    return f"{swap.team} {swap.passed} {swap.solved_count} {swap.penalty_time}"


def format_submission(submission: Submission) -> str:
    return (
        f"{submission.team} {submission.problem} "
        f"{submission.outcome.value} {submission.time}"
    )


def _error_line(ctype: str, error: ContestError) -> List[str]:
    line = ERROR_LINES.get((ctype, error.kind))
    if line is None:
        # No protocol line for this failure (e.g. SUBMIT to an unknown team)
        logger.warning(f"{ctype} rejected: {error.kind} ({error.message})")
        return []
    logger.debug(f"{ctype} rejected: {error.kind}")
    return [line]


def apply_command(state: ContestState, cmd: ValidatedCmd) -> CommandOutcome:
    """Apply a validated protocol command to ``state``.

    Returns:
        CommandOutcome with the output lines (possibly none) and the stop flag

    Command types:
        - ADDTEAM / START: registration and contest start
        - SUBMIT: record a submission, silent
        - FLUSH: re-rank and print the board
        - FREEZE / SCROLL: hide late results, then reveal them
        - QUERY_RANKING / QUERY_SUBMISSION: read-only queries
        - END: acknowledge and stop the session
    """
    ctype = cmd.type
    outcome = CommandOutcome()

    if ctype == "ADDTEAM":
        error = state.add_team(cmd.team)
        outcome.lines = _error_line(ctype, error) if error else ["[Info]Add successfully."]

    elif ctype == "START":
        error = state.start(cmd.duration, cmd.problemCount)
        outcome.lines = _error_line(ctype, error) if error else ["[Info]Competition starts."]

    elif ctype == "SUBMIT":
        error = state.record_submission(cmd.problem, cmd.team, cmd.outcome(), cmd.time)
        if error:
            _error_line(ctype, error)

    elif ctype == "FLUSH":
        outcome.lines = ["[Info]Flush scoreboard."]
        outcome.lines.extend(format_row(row) for row in state.flush())

    elif ctype == "FREEZE":
        error = state.freeze()
        outcome.lines = _error_line(ctype, error) if error else ["[Info]Freeze scoreboard."]

    elif ctype == "SCROLL":
        result = state.scroll()
        if isinstance(result, ContestError):
            outcome.lines = _error_line(ctype, result)
        else:
            outcome.lines = ["[Info]Scroll scoreboard."]
            outcome.lines.extend(format_row(row) for row in result.before)
            outcome.lines.extend(format_swap(swap) for swap in result.swaps)
            outcome.lines.extend(format_row(row) for row in result.after)

    elif ctype == "QUERY_RANKING":
        result = state.ranking_of(cmd.team)
        if isinstance(result, ContestError):
            outcome.lines = _error_line(ctype, result)
        else:
            outcome.lines = ["[Info]Complete query ranking."]
            if result.frozen:
                outcome.lines.append(FROZEN_WARNING)
            outcome.lines.append(f"{result.team} NOW AT RANKING {result.rank}")

    elif ctype == "QUERY_SUBMISSION":
        result = state.last_submission(cmd.team, cmd.problem_filter(), cmd.outcome_filter())
        if isinstance(result, ContestError):
            outcome.lines = _error_line(ctype, result)
        else:
            outcome.lines = ["[Info]Complete query submission."]
            outcome.lines.append(NO_SUBMISSION if result is None else format_submission(result))

    elif ctype == "END":
        outcome.lines = ["[Info]Competition ends."]
        outcome.stop = True

    return outcome


def run_session(state: ContestState, lines: Iterable[str]) -> Iterator[str]:
    """Feed protocol lines to ``state`` and yield the output lines.

    Stops after END; input after it is not read.
    """
    for lineno, raw in enumerate(lines, start=1):
        payload = parse_line(raw)
        if payload is None:
            continue
        try:
            cmd = InputSanitizer.validate_and_sanitize_cmd(payload)
        except ValueError:
            logger.warning(f"Skipping malformed line {lineno}: {raw.strip()!r}")
            continue
        outcome = apply_command(state, cmd)
        yield from outcome.lines
        if outcome.stop:
            logger.info(f"Session ended at line {lineno}")
            return
