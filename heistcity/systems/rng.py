"""Domain-separated deterministic RNG using xxhash, plus 2d6 roll providers.

The engine itself never rolls dice.  The host owns a ``DiceRoller`` (or a
scripted provider in tests and replays) and passes it in.

Formula: value = Hash(Seed, Domain, StreamID, Counter)
"""

from __future__ import annotations

import struct
from typing import Callable, Iterable, Iterator

import xxhash

from heistcity.core.enums import Domain
from heistcity.core.results import DiceRollResult

RollProvider = Callable[[], DiceRollResult]


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, stream_id, counter).
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, stream_id: int, counter: int) -> int:
        payload = struct.pack("<qiqi", self._seed, domain.value, stream_id, counter)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, stream_id: int, counter: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, stream_id, counter) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, stream_id: int, counter: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, stream_id, counter)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, stream_id: int, counter: int, probability: float = 0.5) -> bool:
        return self.next_float(domain, stream_id, counter) < probability


class DiceRoller:
    """Callable 2d6 roll provider backed by a ``DeterministicRNG``.

    Each call advances an internal counter, so the n-th roll of a given
    (seed, domain, stream) is always the same.
    """

    __slots__ = ("_rng", "_domain", "_stream_id", "_counter")

    def __init__(self, rng: DeterministicRNG, domain: Domain = Domain.NPC_PHASE, stream_id: int = 0) -> None:
        self._rng = rng
        self._domain = domain
        self._stream_id = stream_id
        self._counter = 0

    @property
    def rolls_made(self) -> int:
        return self._counter

    def __call__(self) -> DiceRollResult:
        base = self._counter * 2
        self._counter += 1
        die1 = self._rng.next_int(self._domain, self._stream_id, base, 1, 6)
        die2 = self._rng.next_int(self._domain, self._stream_id, base + 1, 1, 6)
        return DiceRollResult(die1, die2)


def scripted_rolls(totals: Iterable[int]) -> RollProvider:
    """Provider that replays the given 2d6 totals in order."""
    it: Iterator[int] = iter(list(totals))

    def _next() -> DiceRollResult:
        try:
            total = next(it)
        except StopIteration:
            raise RuntimeError("Scripted roll provider exhausted") from None
        return DiceRollResult.from_total(total)

    return _next
