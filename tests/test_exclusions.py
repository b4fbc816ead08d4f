"""
Tests for the exclusion filter (pure) and excluded-interval CRUD (DB).
"""
from datetime import date
from types import SimpleNamespace

import pytest

from app.core.errors import (
    DuplicateExcludedIntervalError,
    ExcludedIntervalNotFoundError,
    InvalidIntervalValueError,
)
from app.models.activity import Frequency
from app.models.excluded_interval import IntervalType
from app.services.exclusions import (
    ExclusionRules,
    add_interval,
    delete_interval,
    is_suppressed,
    list_intervals,
    load_rules,
    validate_interval_value,
)
from tests.helpers import make_user

SUNDAY = date(2024, 3, 10)      # ISO week 10
MONDAY = date(2024, 3, 11)
APRIL_FIRST = date(2024, 4, 1)


def _interval(frequency, interval_type, value):
    return SimpleNamespace(frequency=frequency, type=interval_type, value=value)


class TestIsSuppressed:
    def test_no_rules_never_suppresses(self):
        rules = ExclusionRules()
        for f in Frequency:
            assert is_suppressed(f, SUNDAY, rules) is False

    def test_daily_day_of_week(self):
        rules = ExclusionRules(daily_days={0})
        assert is_suppressed(Frequency.DAILY, SUNDAY, rules) is True
        assert is_suppressed(Frequency.DAILY, MONDAY, rules) is False

    def test_daily_rule_leaves_weekly_and_monthly_alone(self):
        rules = ExclusionRules(daily_days={0})
        assert is_suppressed(Frequency.WEEKLY, SUNDAY, rules) is False
        assert is_suppressed(Frequency.MONTHLY, SUNDAY, rules) is False

    def test_weekly_week_of_year(self):
        rules = ExclusionRules(weekly_weeks={10})
        assert is_suppressed(Frequency.WEEKLY, SUNDAY, rules) is True
        assert is_suppressed(Frequency.WEEKLY, date(2024, 3, 17), rules) is False

    def test_monthly_month(self):
        rules = ExclusionRules(monthly_months={4})
        assert is_suppressed(Frequency.MONTHLY, APRIL_FIRST, rules) is True
        assert is_suppressed(Frequency.MONTHLY, date(2024, 5, 1), rules) is False

    def test_unknown_frequency_not_suppressed(self):
        rules = ExclusionRules(daily_days={0}, weekly_weeks={10}, monthly_months={3})
        assert is_suppressed("HOURLY", SUNDAY, rules) is False


class TestExclusionRules:
    def test_only_matching_pairs_contribute(self):
        rules = ExclusionRules.from_intervals([
            _interval(Frequency.DAILY, IntervalType.DAY_OF_WEEK, 0),
            _interval(Frequency.WEEKLY, IntervalType.WEEK_OF_YEAR, 10),
            _interval(Frequency.MONTHLY, IntervalType.MONTH, 12),
            # Mismatched pairs are stored but have no effect
            _interval(Frequency.DAILY, IntervalType.MONTH, 3),
            _interval(Frequency.WEEKLY, IntervalType.DAY_OF_WEEK, 1),
        ])
        assert rules.daily_days == {0}
        assert rules.weekly_weeks == {10}
        assert rules.monthly_months == {12}


class TestValidateIntervalValue:
    @pytest.mark.parametrize("interval_type,value", [
        (IntervalType.DAY_OF_WEEK, 0),
        (IntervalType.DAY_OF_WEEK, 6),
        (IntervalType.WEEK_OF_YEAR, 1),
        (IntervalType.WEEK_OF_YEAR, 52),
        (IntervalType.MONTH, 1),
        (IntervalType.MONTH, 12),
    ])
    def test_bounds_accepted(self, interval_type, value):
        validate_interval_value(interval_type, value)

    @pytest.mark.parametrize("interval_type,value", [
        (IntervalType.DAY_OF_WEEK, 7),
        (IntervalType.DAY_OF_WEEK, -1),
        (IntervalType.WEEK_OF_YEAR, 0),
        (IntervalType.WEEK_OF_YEAR, 53),
        (IntervalType.MONTH, 0),
        (IntervalType.MONTH, 13),
    ])
    def test_out_of_range_rejected(self, interval_type, value):
        with pytest.raises(InvalidIntervalValueError) as exc_info:
            validate_interval_value(interval_type, value)
        assert exc_info.value.http_status == 400


class TestIntervalCrud:
    def test_add_and_load(self, db):
        user = make_user(db)
        add_interval(db, user.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 0)
        add_interval(db, user.id, Frequency.WEEKLY, IntervalType.WEEK_OF_YEAR, 10)
        rules = load_rules(db, user.id)
        assert rules.daily_days == {0}
        assert rules.weekly_weeks == {10}

    def test_duplicate_rejected(self, db):
        user = make_user(db)
        add_interval(db, user.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 0)
        with pytest.raises(DuplicateExcludedIntervalError):
            add_interval(db, user.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 0)
        assert len(list_intervals(db, user.id)) == 1

    def test_same_value_other_user_allowed(self, db):
        a = make_user(db, "a@example.com")
        b = make_user(db, "b@example.com")
        add_interval(db, a.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 0)
        add_interval(db, b.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 0)
        assert load_rules(db, b.id).daily_days == {0}

    def test_rules_are_per_user(self, db):
        a = make_user(db, "a@example.com")
        b = make_user(db, "b@example.com")
        add_interval(db, a.id, Frequency.MONTHLY, IntervalType.MONTH, 4)
        assert load_rules(db, b.id).monthly_months == set()

    def test_list_is_ordered(self, db):
        user = make_user(db)
        add_interval(db, user.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 6)
        add_interval(db, user.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 0)
        values = [i.value for i in list_intervals(db, user.id)]
        assert values == [0, 6]

    def test_delete(self, db):
        user = make_user(db)
        interval = add_interval(db, user.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 3)
        delete_interval(db, user.id, interval.id)
        assert list_intervals(db, user.id) == []

    def test_delete_foreign_interval_not_found(self, db):
        a = make_user(db, "a@example.com")
        b = make_user(db, "b@example.com")
        interval = add_interval(db, a.id, Frequency.DAILY, IntervalType.DAY_OF_WEEK, 3)
        with pytest.raises(ExcludedIntervalNotFoundError):
            delete_interval(db, b.id, interval.id)
