"""Shared fixtures for the typestorm core tests."""

from __future__ import annotations

import random

import pytest

from typestorm.core.phrases import PhraseSource
from typestorm.core.scheduling import ManualScheduler


@pytest.fixture()
def scheduler() -> ManualScheduler:
    # start away from zero so start_time is never falsy
    return ManualScheduler(start_ms=10_000)


@pytest.fixture()
def abc_source() -> PhraseSource:
    return PhraseSource(["abc"], rng=random.Random(0))
