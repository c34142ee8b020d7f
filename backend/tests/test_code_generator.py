"""
Tests for the daily order code generator.
"""

import re
import threading
from datetime import datetime, timedelta, timezone

import pytest

from rest_api.services.domain.code_generator import OrderCodeGenerator, format_order_code


CODE_PATTERN = re.compile(r"^#(\d{2})(\d{3,})$")


class MutableClock:
    """Clock the test can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestFormatOrderCode:

    def test_pads_day_and_sequence(self):
        assert format_order_code(5, 1) == "#05001"
        assert format_order_code(31, 42) == "#31042"

    def test_sequence_past_999_widens(self):
        assert format_order_code(15, 1000) == "#151000"


class TestOrderCodeGenerator:

    def test_first_code_of_day_is_001(self):
        clock = MutableClock(datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock)

        assert generator.generate_code("r1") == "#15001"
        assert generator.generate_code("r1") == "#15002"
        assert generator.generate_code("r1") == "#15003"

    def test_counters_are_per_restaurant(self):
        clock = MutableClock(datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock)

        assert generator.generate_code("r1") == "#15001"
        assert generator.generate_code("r2") == "#15001"
        assert generator.generate_code("r1") == "#15002"
        assert generator.generate_code("r2") == "#15002"

    def test_sequence_restarts_on_new_day(self):
        clock = MutableClock(datetime(2024, 3, 15, 23, 59, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock)
        generator.generate_code("r1")
        generator.generate_code("r1")

        clock.now = clock.now + timedelta(minutes=2)

        assert generator.generate_code("r1") == "#16001"

    def test_restarts_when_day_of_month_repeats(self):
        """Same day number in the next month is still a new day."""
        clock = MutableClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock)
        generator.generate_code("r1")

        clock.now = datetime(2024, 4, 15, 10, 0, tzinfo=timezone.utc)

        assert generator.generate_code("r1") == "#15001"

    def test_day_evaluated_in_configured_zone(self):
        # 02:00 UTC on the 16th is still the 15th in Buenos Aires (UTC-3)
        clock = MutableClock(datetime(2024, 3, 16, 2, 0, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock, timezone_name="America/Argentina/Buenos_Aires")

        assert generator.generate_code("r1") == "#15001"

    def test_reset_clears_counters(self):
        clock = MutableClock(datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock)
        generator.generate_code("r1")

        generator.reset()

        assert generator.generate_code("r1") == "#15001"

    def test_concurrent_callers_get_distinct_consecutive_codes(self):
        clock = MutableClock(datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock)
        codes: list[str] = []
        codes_lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            for _ in range(50):
                code = generator.generate_code("r1")
                with codes_lock:
                    codes.append(code)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(codes) == 400
        assert len(set(codes)) == 400
        sequences = sorted(int(CODE_PATTERN.match(c).group(2)) for c in codes)
        assert sequences == list(range(1, 401))

    @pytest.mark.parametrize("count", [1, 999, 1000])
    def test_codes_match_pattern(self, count):
        clock = MutableClock(datetime(2024, 3, 7, 9, 30, tzinfo=timezone.utc))
        generator = OrderCodeGenerator(clock=clock)

        code = None
        for _ in range(count):
            code = generator.generate_code("r1")

        match = CODE_PATTERN.match(code)
        assert match is not None
        assert match.group(1) == "07"
        assert int(match.group(2)) == count
