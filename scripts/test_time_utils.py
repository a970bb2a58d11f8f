import unittest
from datetime import date, datetime, timedelta, timezone

from ayurdiet.services.time_utils import current_season, day_range, in_range, to_datetime


class TestTimeUtils(unittest.TestCase):
    def test_day_range_covers_one_utc_day(self):
        start, end = day_range(date(2024, 3, 10))
        self.assertEqual(start, datetime(2024, 3, 10, tzinfo=timezone.utc))
        self.assertEqual(end - start, timedelta(days=1))

    def test_to_datetime_accepts_iso_strings(self):
        dt = to_datetime("2024-03-10T08:30:00Z")
        self.assertEqual(dt, datetime(2024, 3, 10, 8, 30, tzinfo=timezone.utc))

    def test_to_datetime_naive_becomes_utc(self):
        dt = to_datetime(datetime(2024, 3, 10, 8, 30))
        self.assertEqual(dt.tzinfo, timezone.utc)

    def test_to_datetime_timestamp_dict(self):
        dt = to_datetime({"seconds": 0, "nanoseconds": 0})
        self.assertEqual(dt, datetime(1970, 1, 1, tzinfo=timezone.utc))

    def test_to_datetime_garbage(self):
        self.assertIsNone(to_datetime("not a date"))
        self.assertIsNone(to_datetime(42))

    def test_in_range_end_exclusive_by_default(self):
        start, end = day_range(date(2024, 3, 10))
        self.assertTrue(in_range(start, start, end))
        self.assertFalse(in_range(end, start, end))
        self.assertTrue(in_range(end, start, end, inclusive_end=True))

    def test_current_season(self):
        self.assertEqual(current_season(1), "winter")
        self.assertEqual(current_season(4), "spring")
        self.assertEqual(current_season(7), "summer")
        self.assertEqual(current_season(10), "autumn")
        self.assertEqual(current_season(12), "winter")


if __name__ == '__main__':
    unittest.main()
