"""
Order code generation.

Codes look like "#DDNNN": two-digit day of month followed by a zero-padded
sequence that restarts at 001 with the first order of each day. Sequences
past 999 keep growing ("#151000"). Counters are kept per restaurant and
live in process memory only, so codes are display values, not identifiers.
"""

import threading
from datetime import date, datetime
from typing import Callable

from shared.config.logging import get_logger
from shared.utils.periods import get_zone

logger = get_logger(__name__)


def format_order_code(day: int, sequence: int) -> str:
    return f"#{day:02d}{sequence:03d}"


class OrderCodeGenerator:
    """
    Thread-safe per-restaurant daily counter.

    Usage:
        generator = OrderCodeGenerator()
        generator.generate_code(restaurant_id)  # "#15001"
    """

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        timezone_name: str | None = None,
    ):
        self._zone = get_zone(timezone_name)
        self._clock = clock or (lambda: datetime.now(self._zone))
        self._lock = threading.Lock()
        # restaurant_id -> (day of last code, last sequence)
        self._counters: dict[str, tuple[date, int]] = {}

    def _today(self) -> date:
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(self._zone)
        return now.date()

    def generate_code(self, restaurant_id: str) -> str:
        """
        Next code for the restaurant.

        The clock is read under the lock so two callers racing across
        midnight cannot reset the counter out of order.
        """
        with self._lock:
            today = self._today()
            last_day, sequence = self._counters.get(restaurant_id, (today, 0))
            if last_day != today:
                sequence = 0
            sequence += 1
            self._counters[restaurant_id] = (today, sequence)

        return format_order_code(today.day, sequence)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()


_generator: OrderCodeGenerator | None = None
_generator_lock = threading.Lock()


def get_code_generator() -> OrderCodeGenerator:
    """Process-wide generator shared by all requests."""
    global _generator
    if _generator is None:
        with _generator_lock:
            if _generator is None:
                _generator = OrderCodeGenerator()
                logger.info("Order code generator initialized")
    return _generator
