"""
Tests for weekly availability resolution.
"""

from datetime import time

import pendulum

from slotfinder.domain.availability import day_boundary_for, iter_days, resolve_availability
from slotfinder.domain.models import Interval, WeeklyAvailabilityRule

NEW_YORK = "America/New_York"


def _utc(value: str) -> Interval:
    start, end = value.split("/")
    return Interval(start=pendulum.parse(start), end=pendulum.parse(end))


def _range_nov30_to_dec3() -> Interval:
    """Start of Sun Nov 30 to end of Wed Dec 3, New York time."""
    return Interval(
        start=pendulum.parse("2025-11-30T00:00:00.000-05:00"),
        end=pendulum.parse("2025-12-03T23:59:59.999-05:00"),
    )


class TestDayBoundary:
    """Tests for the pendulum day boundary provider."""

    def test_maps_instant_to_local_midnight(self):
        day_boundary = day_boundary_for(NEW_YORK)

        # 03:00 UTC on Dec 2 is still Dec 1 in New York
        midnight = day_boundary(pendulum.parse("2025-12-02T03:00:00Z"))

        assert midnight == pendulum.datetime(2025, 12, 1, tz=NEW_YORK)
        assert midnight.timezone_name == NEW_YORK

    def test_iter_days_includes_both_boundaries(self):
        range_ = Interval(
            start=pendulum.datetime(2025, 12, 1, 15, tz=NEW_YORK),
            end=pendulum.datetime(2025, 12, 3, tz=NEW_YORK),
        )

        days = list(iter_days(range_, day_boundary_for(NEW_YORK)))

        assert [day.day for day in days] == [1, 2, 3]

    def test_iter_days_across_dst_change(self):
        """23 and 25 hour days neither skip nor repeat a date."""
        range_ = Interval(
            start=pendulum.datetime(2025, 3, 8, tz=NEW_YORK),
            end=pendulum.datetime(2025, 11, 3, tz=NEW_YORK),
        )

        days = list(iter_days(range_, day_boundary_for(NEW_YORK)))

        assert len(days) == 241
        assert all(day.hour == 0 and day.minute == 0 for day in days)
        assert len({day.to_date_string() for day in days}) == len(days)


class TestResolveAvailability:
    """Tests for resolve_availability."""

    def test_multiple_days_and_times(self):
        """Thursday is outside the range, so only Monday and Wednesday resolve."""
        rule = WeeklyAvailabilityRule(
            days_of_week=("mon", "wed", "thu"),
            times_of_day=(time(9, 30), time(13, 15)),
            duration_minutes=180,
        )

        result = resolve_availability([rule], _range_nov30_to_dec3(), day_boundary_for(NEW_YORK))

        assert result == [
            # Mon Dec 1: 9:30am ET - 12:30pm ET
            _utc("2025-12-01T14:30:00Z/2025-12-01T17:30:00Z"),
            # Mon Dec 1: 1:15pm ET - 4:15pm ET
            _utc("2025-12-01T18:15:00Z/2025-12-01T21:15:00Z"),
            # Wed Dec 3: 9:30am ET - 12:30pm ET
            _utc("2025-12-03T14:30:00Z/2025-12-03T17:30:00Z"),
            # Wed Dec 3: 1:15pm ET - 4:15pm ET
            _utc("2025-12-03T18:15:00Z/2025-12-03T21:15:00Z"),
        ]

    def test_interval_crossing_midnight(self):
        """A window running past midnight is kept whole."""
        rule = WeeklyAvailabilityRule(
            days_of_week=("mon",),
            times_of_day=(time(15, 20),),
            duration_minutes=600,
        )

        result = resolve_availability([rule], _range_nov30_to_dec3(), day_boundary_for(NEW_YORK))

        # Mon Dec 1, 3:20pm ET - Tue Dec 2, 1:20am ET
        assert result == [_utc("2025-12-01T20:20:00Z/2025-12-02T06:20:00Z")]

    def test_clipped_to_range(self):
        rule = WeeklyAvailabilityRule(
            days_of_week=("mon",),
            times_of_day=(time(9, 0),),
            duration_minutes=180,
        )
        range_ = Interval(
            start=pendulum.datetime(2025, 12, 1, 10, tz=NEW_YORK),
            end=pendulum.datetime(2025, 12, 1, 11, 30, tz=NEW_YORK),
        )

        result = resolve_availability([rule], range_, day_boundary_for(NEW_YORK))

        assert result == [range_]

    def test_window_outside_range_dropped(self):
        rule = WeeklyAvailabilityRule(
            days_of_week=("mon",),
            times_of_day=(time(9, 0),),
            duration_minutes=60,
        )
        range_ = Interval(
            start=pendulum.datetime(2025, 12, 1, 10, tz=NEW_YORK),
            end=pendulum.datetime(2025, 12, 1, 18, tz=NEW_YORK),
        )

        assert resolve_availability([rule], range_, day_boundary_for(NEW_YORK)) == []

    def test_overlapping_rules_not_normalized(self):
        """Overlaps between rules are left for the overlay to normalize."""
        morning = WeeklyAvailabilityRule(("mon",), (time(9, 0),), 120)
        late_morning = WeeklyAvailabilityRule(("mon",), (time(10, 0),), 120)

        result = resolve_availability(
            [morning, late_morning], _range_nov30_to_dec3(), day_boundary_for(NEW_YORK)
        )

        assert result == [
            _utc("2025-12-01T14:00:00Z/2025-12-01T16:00:00Z"),
            _utc("2025-12-01T15:00:00Z/2025-12-01T17:00:00Z"),
        ]

    def test_empty_rules(self):
        assert resolve_availability([], _range_nov30_to_dec3(), day_boundary_for(NEW_YORK)) == []

    def test_time_of_day_is_elapsed_since_midnight_on_dst_change(self):
        """
        Sunday Nov 2, 2025 falls back to EST. Nine hours after the EDT midnight
        (04:00Z) is 13:00Z, i.e. 08:00 local.
        """
        rule = WeeklyAvailabilityRule(("sun",), (time(9, 0),), 60)
        range_ = Interval(
            start=pendulum.datetime(2025, 11, 1, tz=NEW_YORK),
            end=pendulum.datetime(2025, 11, 3, tz=NEW_YORK),
        )

        result = resolve_availability([rule], range_, day_boundary_for(NEW_YORK))

        assert result == [_utc("2025-11-02T13:00:00Z/2025-11-02T14:00:00Z")]

    def test_day_of_week_uses_local_calendar(self):
        """Late Sunday evening in New York is already Monday in UTC."""
        rule = WeeklyAvailabilityRule(("sun",), (time(22, 0),), 60)
        range_ = Interval(
            start=pendulum.parse("2025-11-30T00:00:00Z"),
            end=pendulum.parse("2025-12-01T12:00:00Z"),
        )

        result = resolve_availability([rule], range_, day_boundary_for(NEW_YORK))

        assert result == [_utc("2025-12-01T03:00:00Z/2025-12-01T04:00:00Z")]
