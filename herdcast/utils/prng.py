"""Deterministic pseudo-random sources keyed by numeric seeds.

The engines never hold a stateful generator. Every draw is ``rng(seed)``
where ``seed`` is built from the numeric inputs of the call (day, direction
index, coordinates), so identical inputs always give identical outputs.
"""

import hashlib
import struct
from itertools import cycle
from typing import Iterable, Protocol


class RandomSource(Protocol):
    def __call__(self, seed: float) -> float:
        """Return a value in [0, 1) for the given seed."""
        ...


class HashRandom:
    """Stateless hash of the seed's IEEE-754 bytes mapped to [0, 1)."""

    def __init__(self, salt: int = 0):
        self.salt = salt

    def __call__(self, seed: float) -> float:
        # -0.0 and 0.0 must hash the same
        value = float(seed) + 0.0
        key = struct.pack("<dq", value, self.salt)
        digest = hashlib.blake2b(key, digest_size=8).digest()
        return int.from_bytes(digest, "little") / 2**64

    def __repr__(self) -> str:
        return f"HashRandom(salt={self.salt})"


class SequenceRandom:
    """Replays a fixed sequence, ignoring seeds. Intended for tests."""

    def __init__(self, values: Iterable[float]):
        self.values = [min(max(float(v), 0.0), 0.999999) for v in values]
        if not self.values:
            raise ValueError("SequenceRandom needs at least one value")
        self._it = cycle(self.values)

    def __call__(self, seed: float) -> float:
        return next(self._it)


default_random = HashRandom()
