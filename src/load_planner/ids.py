"""Id generation passed explicitly into operations that mint new items or clients."""

from __future__ import annotations

import itertools
import random
import uuid
from typing import Protocol


class IdSource(Protocol):
    def next_id(self, prefix: str) -> str: ...


class SequentialIds:
    """Deterministic ids: bundle-1, bundle-2, ..."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"


class RandomIds:
    """Random hex ids drawn from an injected random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.UUID(int=self._rng.getrandbits(128)).hex[:12]}"


def new_client_id(rng: random.Random) -> str:
    """Client tag in the form #NNNN."""
    return f"#{rng.randint(1000, 9999)}"
