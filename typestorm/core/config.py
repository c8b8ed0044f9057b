from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_PHRASES_PATH = Path(__file__).resolve().parent.parent / "data" / "phrases.yaml"

ERROR_WINDOW_MS = 300
TICK_INTERVAL_MS = 500
CHARS_PER_WORD = 5

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Fixed product values for a typing session plus the phrase file location."""

    phrases_path: Path = field(default_factory=lambda: DEFAULT_PHRASES_PATH)
    error_window_ms: int = ERROR_WINDOW_MS
    tick_interval_ms: int = TICK_INTERVAL_MS
    chars_per_word: int = CHARS_PER_WORD
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings, honouring TYPESTORM_PHRASES and TYPESTORM_LOG_LEVEL."""
    env = os.environ if environ is None else environ

    phrases_path = DEFAULT_PHRASES_PATH
    raw_path = env.get("TYPESTORM_PHRASES", "").strip()
    if raw_path:
        phrases_path = Path(raw_path).expanduser()

    log_level = env.get("TYPESTORM_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in _LOG_LEVELS:
        logger.warning("Unknown TYPESTORM_LOG_LEVEL %r, using INFO", log_level)
        log_level = "INFO"

    return Settings(phrases_path=phrases_path, log_level=log_level)
