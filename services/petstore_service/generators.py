"""Order number generators.

The active strategy is chosen by the ``ORDER_NUMBER_GENERATOR`` setting.
"""

import itertools
import secrets
import threading
import time
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

ORDER_PREFIX = "ORD-"


class OrderNumberGenerator(ABC):
    @abstractmethod
    def generate(self) -> str:
        """Return a new order number."""


class UUIDOrderNumberGenerator(OrderNumberGenerator):
    """``ORD-`` plus the first 10 hex digits of a random UUID."""

    def generate(self) -> str:
        return ORDER_PREFIX + uuid.uuid4().hex[:10].upper()


class SequentialOrderNumberGenerator(OrderNumberGenerator):
    """``ORD-<epoch seconds>-<NNNNN>`` with a process-wide counter."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def generate(self) -> str:
        with self._lock:
            seq = next(self._counter)
        return f"{ORDER_PREFIX}{int(self._clock())}-{seq % 100000:05d}"


class TimeBasedOrderNumberGenerator(OrderNumberGenerator):
    """``ORD-`` plus the last 6 digits of the clock in millis and 4 random digits."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    def generate(self) -> str:
        millis = int(self._clock() * 1000)
        suffix = secrets.randbelow(10000)
        return f"{ORDER_PREFIX}{millis % 1_000_000:06d}{suffix:04d}"


GENERATORS: dict[str, type[OrderNumberGenerator]] = {
    "uuid": UUIDOrderNumberGenerator,
    "sequential": SequentialOrderNumberGenerator,
    "timebased": TimeBasedOrderNumberGenerator,
}

_generator: Optional[OrderNumberGenerator] = None


def build_generator(name: Optional[str]) -> OrderNumberGenerator:
    """Build the named generator; unknown names fall back to ``uuid``."""
    key = (name or "uuid").strip().lower()
    generator_cls = GENERATORS.get(key)
    if generator_cls is None:
        logger.warning("Unknown order number generator %r, using uuid", name)
        generator_cls = UUIDOrderNumberGenerator
    return generator_cls()


def get_order_number_generator() -> OrderNumberGenerator:
    global _generator
    if _generator is None:
        _generator = build_generator(get_settings().ORDER_NUMBER_GENERATOR)
    return _generator
