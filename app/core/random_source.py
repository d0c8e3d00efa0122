"""Process-wide random source for plan generation.

One generator is shared by every request. It is seeded exactly once, either
explicitly at startup or lazily from OS entropy on first use, and every
access goes through a lock so concurrent requests never interleave inside
the generator.
"""

from __future__ import annotations

import random
import threading
from collections.abc import MutableSequence, Sequence
from typing import TypeVar

from loguru import logger

T = TypeVar("T")

_lock = threading.Lock()
_rng: random.Random | None = None


def configure(seed: int | None = None) -> None:
    """Seed the shared generator. Called once at process start.

    Calling it again replaces the generator; only startup code and tests
    are expected to do so.
    """
    global _rng
    with _lock:
        _rng = random.Random(seed)
    logger.info("Plan random source configured", seeded=seed is not None)


def _get_rng() -> random.Random:
    global _rng
    if _rng is None:
        _rng = random.Random()
        logger.debug("Plan random source initialized from OS entropy")
    return _rng


def shuffle(items: MutableSequence[T]) -> None:
    """Shuffle items in place."""
    with _lock:
        _get_rng().shuffle(items)


def choice(items: Sequence[T]) -> T:
    """Pick one item uniformly at random."""
    with _lock:
        return _get_rng().choice(items)
