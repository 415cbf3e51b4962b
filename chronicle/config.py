"""
Tracker settings.

Settings come from CHRONICLE_* environment variables, optionally loaded
from a .env file, e.g.:

    CHRONICLE_ENABLED=true
    CHRONICLE_AUTO_PARSE_MESSAGES=false
    CHRONICLE_HISTORY_CAPACITY=100
    CHRONICLE_STARTING_DATE="1st of Thawbreak, 2850 AV"
    CHRONICLE_STARTING_LOCATION="Ironhold - Market Square"
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


ENV_PREFIX = "CHRONICLE_"


class TrackerConfig(BaseModel):
    """Settings for one tracker session."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    auto_parse_messages: bool = True
    debug: bool = False
    history_capacity: int = Field(default=50, ge=1, le=500)
    starting_date: str | None = None
    starting_location: str | None = None


def load_config(env_file: Path | str | None = None, **overrides) -> TrackerConfig:
    """
    Build a TrackerConfig from the environment.

    Args:
        env_file: Explicit .env path; searched for upward from cwd when None
        **overrides: Field values that win over the environment (None is ignored)

    Raises:
        pydantic.ValidationError: if a value does not fit its field
    """
    load_dotenv(env_file)

    values: dict[str, object] = {}
    for name in TrackerConfig.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw.strip():
            values[name] = raw.strip()

    values.update({k: v for k, v in overrides.items() if v is not None})
    config = TrackerConfig.model_validate(values)
    logger.debug(f"Loaded config: {config.model_dump()}")
    return config
