from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Iterable, Optional, Tuple

import yaml

from typestorm.core.config import DEFAULT_PHRASES_PATH

logger = logging.getLogger(__name__)


class PhraseSource:
    """Fixed pool of reference phrases; one is drawn at random per session."""

    def __init__(
        self,
        phrases: Optional[Iterable[str]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        if phrases is None:
            pool = _load_phrases(DEFAULT_PHRASES_PATH)
        else:
            pool = _validate(list(phrases), source="phrase list")
        self._phrases: Tuple[str, ...] = pool
        self._rng = rng or random.Random()

    @classmethod
    def from_yaml(cls, path: Path, rng: Optional[random.Random] = None) -> "PhraseSource":
        return cls(_load_phrases(Path(path)), rng=rng)

    @property
    def phrases(self) -> Tuple[str, ...]:
        return self._phrases

    def select_phrase(self) -> str:
        """Return a uniformly random phrase from the pool."""
        return self._rng.choice(self._phrases)

    def __len__(self) -> int:
        return len(self._phrases)


def _validate(items: list, source: str) -> Tuple[str, ...]:
    phrases = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError(f"{source}: phrases must be strings, got {type(item).__name__}")
        text = item.strip()
        if text:
            phrases.append(text)
    if not phrases:
        raise ValueError(f"{source}: no phrases found")
    return tuple(phrases)


def _load_phrases(path: Path) -> Tuple[str, ...]:
    if not path.exists():
        raise FileNotFoundError(f"Phrase file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{path.name}: invalid YAML: {e}") from e

    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected YAML with 'phrases'")
    content = raw.get("phrases")
    if content is None:
        raise ValueError(f"{path.name}: missing 'phrases'")
    if isinstance(content, list):
        items = content
    else:
        # allow phrases as a multiline string, one per line
        items = str(content).splitlines()

    phrases = _validate(items, source=path.name)
    logger.info("Loaded %d phrases from %s", len(phrases), path)
    return phrases
