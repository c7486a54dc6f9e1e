"""
Input validation schemas using Pydantic v2
Validates every command parsed from the text protocol
"""

import logging
import re
from typing import Optional, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .types import Outcome

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {
    "ADDTEAM",
    "START",
    "SUBMIT",
    "FLUSH",
    "FREEZE",
    "SCROLL",
    "QUERY_RANKING",
    "QUERY_SUBMISSION",
    "END",
}

# Filter value meaning "match anything" in QUERY_SUBMISSION
MATCH_ALL = "ALL"

_PROBLEM_RE = re.compile(r"^[A-Z]$")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")

# ==================== VALIDATOR FUNCTIONS ====================


class ValidatedCmd(BaseModel):
    """Command model with per-type required fields"""

    type: str = Field(..., min_length=1, max_length=50, description="Command type")

    team: Optional[str] = Field(None, min_length=1, description="Team name")

    # START fields
    duration: Optional[int] = Field(
        None, ge=0, le=100000, description="Contest duration in minutes"
    )
    problemCount: Optional[int] = Field(
        None, ge=1, description="Number of problems (upper bound comes from the config)"
    )

    # SUBMIT fields
    problem: Optional[str] = Field(None, description="Problem letter")
    status: Optional[str] = Field(None, max_length=50, description="Status token")
    time: Optional[int] = Field(
        None, ge=0, description="Minutes since contest start"
    )

    # QUERY_SUBMISSION filters
    problemFilter: Optional[str] = Field(None, description="Problem letter or ALL")
    statusFilter: Optional[str] = Field(
        None, max_length=50, description="Status token or ALL"
    )

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate command type is one of allowed types"""
        if v not in ALLOWED_TYPES:
            raise ValueError(f"type must be one of {sorted(ALLOWED_TYPES)}, got {v}")
        return v

    @field_validator("team")
    @classmethod
    def validate_team_name(cls, v: Optional[str]) -> Optional[str]:
        """Team names are single protocol tokens"""
        if v is None:
            return v
        v = InputSanitizer.sanitize_team_name(v)
        if len(v) == 0:
            raise ValueError("team name cannot be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError("team name cannot contain whitespace")
        return v

    @field_validator("problem")
    @classmethod
    def validate_problem(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not _PROBLEM_RE.match(v):
            raise ValueError(f"problem must be a single capital letter, got {v!r}")
        return v

    @field_validator("problemFilter")
    @classmethod
    def validate_problem_filter(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if v != MATCH_ALL and not _PROBLEM_RE.match(v):
            raise ValueError(f"problem filter must be ALL or a capital letter, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_command_fields(self) -> Self:
        """Validate required fields based on command type"""
        cmd_type = self.type

        if cmd_type in {"ADDTEAM", "QUERY_RANKING"}:
            if self.team is None:
                raise ValueError(f"{cmd_type} requires team")

        elif cmd_type == "START":
            if self.duration is None:
                raise ValueError("START requires duration")
            if self.problemCount is None:
                raise ValueError("START requires problemCount")

        elif cmd_type == "SUBMIT":
            for name in ("problem", "team", "status", "time"):
                if getattr(self, name) is None:
                    raise ValueError(f"SUBMIT requires {name}")

        elif cmd_type == "QUERY_SUBMISSION":
            if self.team is None:
                raise ValueError("QUERY_SUBMISSION requires team")
            if self.problemFilter is None or self.statusFilter is None:
                raise ValueError("QUERY_SUBMISSION requires problem and status filters")

        return self

    def outcome(self) -> Outcome:
        """Outcome of a SUBMIT; unknown status tokens count as wrong answers"""
        return parse_status(self.status)

    def outcome_filter(self) -> Optional[Outcome]:
        if self.statusFilter == MATCH_ALL:
            return None
        return parse_status(self.statusFilter)

    def problem_filter(self) -> Optional[str]:
        if self.problemFilter == MATCH_ALL:
            return None
        return self.problemFilter

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


def parse_status(token: Optional[str]) -> Outcome:
    """Lenient status mapping used at the protocol boundary"""
    outcome = Outcome.from_token(token)
    if outcome.value != token:
        logger.debug(f"Unrecognized status token {token!r}, treating as {outcome.value}")
    return outcome


class InputSanitizer:
    """Cleans protocol tokens before they reach ContestState"""

    @staticmethod
    def sanitize_team_name(name: str) -> str:
        # No length cap: any registered name must round-trip through queries
        return _CONTROL_RE.sub("", str(name)).strip()

    @staticmethod
    def validate_and_sanitize_cmd(cmd_dict: dict) -> ValidatedCmd:
        """
        Validate and sanitize command dictionary

        Returns:
            ValidatedCmd: Validated command object

        Raises:
            ValueError: If validation fails
        """
        try:
            return ValidatedCmd(**cmd_dict)
        except ValidationError as e:
            logger.warning(f"Command validation failed: {e}")
            raise ValueError(f"Invalid command: {e}") from e


# ==================== EXPORT ====================

__all__ = [
    "ValidatedCmd",
    "InputSanitizer",
    "MATCH_ALL",
    "parse_status",
]
