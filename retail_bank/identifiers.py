"""
Identifier Generation Module

Injectable id providers so that tests can get deterministic identifiers
while normal use gets unique ones.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
import random
import time
import uuid


USER_PREFIX = "USER"
ACCOUNT_PREFIX = "ACCT"
TRANSACTION_PREFIX = "TXN"


class IdGenerator(ABC):
    """Abstract identifier provider"""

    @abstractmethod
    def next_id(self, prefix: str) -> str:
        """Return a new identifier starting with prefix"""
        pass


class UUIDIdGenerator(IdGenerator):
    """Random UUID4 identifiers, e.g. ACCT-1b9d6bcd-..."""

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4()}"


class TimestampIdGenerator(IdGenerator):
    """
    Epoch milliseconds followed by a random 0-999 tie-breaker, e.g.
    TXN1700000000000123. Two ids issued in the same millisecond can collide;
    this generator does not detect that.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def next_id(self, prefix: str) -> str:
        millis = int(time.time() * 1000)
        return f"{prefix}{millis}{self._rng.randint(0, 999)}"


class SequentialIdGenerator(IdGenerator):
    """Per-prefix counters: USER000001, USER000002, ..."""

    def __init__(self, width: int = 6):
        self.width = width
        self._counters: Dict[str, int] = {}

    def next_id(self, prefix: str) -> str:
        value = self._counters.get(prefix, 0) + 1
        self._counters[prefix] = value
        return f"{prefix}{value:0{self.width}d}"


_STRATEGIES = {
    "uuid": UUIDIdGenerator,
    "timestamp": TimestampIdGenerator,
    "sequential": SequentialIdGenerator,
}


def create_id_generator(strategy: str = "uuid") -> IdGenerator:
    """Build an id generator by strategy name"""
    try:
        return _STRATEGIES[strategy.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown id strategy '{strategy}', expected one of {sorted(_STRATEGIES)}"
        ) from None
