"""
Unit tests for time utilities.
"""

import time
import unittest
from datetime import datetime, timedelta, timezone

from core.time import is_aware, now_ms, now_utc


class TestNowFunctions(unittest.TestCase):
    """Tests for now_* functions."""

    def test_now_utc(self):
        dt = now_utc()
        self.assertIsNotNone(dt.tzinfo)
        self.assertEqual(dt.utcoffset(), timedelta(0))

    def test_now_ms(self):
        before = int(time.time() * 1000)
        value = now_ms()
        after = int(time.time() * 1000)
        self.assertGreaterEqual(value, before)
        self.assertLessEqual(value, after)


class TestIsAware(unittest.TestCase):

    def test_naive(self):
        self.assertFalse(is_aware(datetime(2026, 1, 1)))

    def test_aware(self):
        self.assertTrue(is_aware(datetime(2026, 1, 1, tzinfo=timezone.utc)))
        self.assertTrue(is_aware(datetime(2026, 1, 1, tzinfo=timezone(timedelta(hours=2)))))


if __name__ == "__main__":
    unittest.main()
