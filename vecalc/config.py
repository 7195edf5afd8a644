"""Runtime configuration, read from the environment (and an optional .env file)."""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from vecalc.session import DEFAULT_DEBUG_LEVEL

HISTORY_FILE = os.path.expanduser("~/.vecalc_history")

# Environment variable -> config field
ENV_VARS = {
    "VECALC_PROMPT": "prompt",
    "VECALC_HISTORY_FILE": "history_file",
    "VECALC_DEBUG_LEVEL": "debug_level",
    "VECALC_LOG_LEVEL": "log_level",
}


class CalculatorConfig(BaseModel):
    """Settings for one interactive session."""
    prompt: str = ">> "
    history_file: str = HISTORY_FILE
    debug_level: int = Field(DEFAULT_DEBUG_LEVEL, ge=0, description="Initial debug verbosity")
    log_level: str = "WARNING"

    @field_validator('history_file')
    @classmethod
    def expand_history_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('History file cannot be empty')
        return os.path.expanduser(v.strip())

    @field_validator('log_level')
    @classmethod
    def log_level_must_exist(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level


def load_config(environ: Optional[Mapping[str, str]] = None) -> CalculatorConfig:
    """Build the config from ``environ`` (defaults to os.environ after loading .env)."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    values = {field: environ[var] for var, field in ENV_VARS.items() if var in environ}
    return CalculatorConfig(**values)
