from datetime import date, datetime
from types import SimpleNamespace

from app.services.eligibility import is_eligible


def _activity(start=None, end=None):
    return SimpleNamespace(start_date=start, end_date=end)


class TestIsEligible:
    def test_unbounded_always_eligible(self):
        assert is_eligible(_activity(), datetime(1999, 1, 1))
        assert is_eligible(_activity(), datetime(2099, 12, 31))

    def test_period_on_start_date_is_eligible(self):
        a = _activity(start=date(2024, 3, 15))
        assert is_eligible(a, datetime(2024, 3, 15, 0, 0))

    def test_period_before_start_date_is_not(self):
        a = _activity(start=date(2024, 3, 15))
        assert not is_eligible(a, datetime(2024, 3, 14, 0, 0))

    def test_period_on_end_date_is_eligible(self):
        a = _activity(end=date(2024, 3, 15))
        assert is_eligible(a, datetime(2024, 3, 15, 0, 0))

    def test_period_after_end_date_is_not(self):
        a = _activity(end=date(2024, 3, 15))
        assert not is_eligible(a, datetime(2024, 3, 16, 0, 0))

    def test_time_of_day_ignored(self):
        a = _activity(start=date(2024, 3, 15), end=date(2024, 3, 15))
        assert is_eligible(a, datetime(2024, 3, 15, 23, 59, 59))

    def test_accepts_plain_date(self):
        a = _activity(start=date(2024, 3, 1), end=date(2024, 3, 31))
        assert is_eligible(a, date(2024, 3, 20))
        assert not is_eligible(a, date(2024, 4, 1))

    def test_weekly_period_starting_before_start_date(self):
        # Week of Sun 2024-03-10; activity starts mid-week
        a = _activity(start=date(2024, 3, 12))
        assert not is_eligible(a, datetime(2024, 3, 10))
