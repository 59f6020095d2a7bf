"""Process-wide defaults read from the environment."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

PROJECT_ROOT = Path(__file__).resolve().parents[1]

OUTPUT_ROOT = Path(os.environ.get("STAT_EXPLAINERS_OUTPUT_ROOT", PROJECT_ROOT / "output"))
DEFAULT_RANDOM_SEED = int(os.environ.get("STAT_EXPLAINERS_SEED", "123"))
LOG_LEVEL = os.environ.get("STAT_EXPLAINERS_LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """Attach a stream handler to the root logger (no-op if one is already configured)."""
    resolved = level if level is not None else LOG_LEVEL
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


__all__ = [
    "PROJECT_ROOT",
    "OUTPUT_ROOT",
    "DEFAULT_RANDOM_SEED",
    "LOG_LEVEL",
    "configure_logging",
]
