"""Session configuration.

Settings can come from a JSON file whose keys match the fields below, e.g.

    {"success_delay": 0.8, "shuffle_blocks": true, "seed": 7}
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from markup import DEFAULT_TERMINATORS

logger = logging.getLogger(__name__)


class SessionConfig(BaseModel):
    """Tunable behaviour of a drill session."""

    success_delay: float = Field(default=1.2, ge=0.0)  # Seconds before moving on
    invalid_delay: float = Field(default=0.5, ge=0.0)  # Seconds the error shows
    terminators: str = Field(default=DEFAULT_TERMINATORS, min_length=1)
    shuffle_blocks: bool = True
    seed: int | None = None


def load_config(path: Path | None) -> SessionConfig:
    """Load configuration from a JSON file.

    Returns defaults when path is None or the file does not exist.

    Raises:
        pydantic.ValidationError: If the file holds invalid settings.
    """
    if path is None or not path.exists():
        if path is not None:
            logger.warning("Config file %s not found, using defaults", path)
        return SessionConfig()

    with open(path, encoding="utf-8") as f:
        return SessionConfig.model_validate_json(f.read())
