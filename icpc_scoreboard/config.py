"""
Scoreboard configuration using Pydantic v2
Defaults reproduce the standard ICPC rules
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .types import WRONG_ATTEMPT_PENALTY

logger = logging.getLogger(__name__)


class ScoreboardConfig(BaseModel):
    """Rules and limits for one contest"""

    penalty_minutes: int = Field(
        WRONG_ATTEMPT_PENALTY,
        ge=0,
        le=1000,
        description="Penalty minutes per rejected attempt before acceptance",
    )
    max_problems: int = Field(
        26, ge=1, le=26, description="Upper bound for START ... PROBLEM <p>"
    )
    # When enabled, rejections hidden by the freeze count toward the penalty
    # of a problem revealed as accepted.
    count_frozen_rejections: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


def load_config(path: str | Path) -> ScoreboardConfig:
    """
    Load configuration from a JSON file

    Raises:
        pydantic.ValidationError: If the file content is invalid
        OSError: If the file cannot be read
    """
    raw = Path(path).read_text(encoding="utf-8")
    config = ScoreboardConfig.model_validate_json(raw)
    logger.debug(f"Loaded scoreboard config from {path}: {config}")
    return config


__all__ = ["ScoreboardConfig", "load_config"]
