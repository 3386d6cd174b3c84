"""Tests for the summary reducers."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from worklog.models.project import Project
from worklog.models.time_entry import TimeEntryInDB
from worklog.utils.aggregation import (
    NO_WORK_RECORDED,
    compute_overview,
    compute_project_metrics,
    earnings_for,
    hours_from_minutes,
    round_half_up,
)
from worklog.utils.datetime_format import parse_local_date_range, parse_local_instant
from worklog.utils.overlap import Interval, is_admissible

CREATED = datetime(2026, 1, 1, 4, 30, tzinfo=timezone.utc)  # 01-01-2026 10:00 AM local


def make_project(id="p1", is_billable=False, hourly_rate=None, name="Website"):
    return Project(
        _id=id,
        user_id="u1",
        name=name,
        description="",
        is_billable=is_billable,
        hourly_rate=hourly_rate,
        created_at=CREATED,
        updated_at=CREATED,
    )


def make_entry(project_id, start, minutes, id="e"):
    return TimeEntryInDB(
        _id=id,
        user_id="u1",
        project_id=project_id,
        description="work",
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        duration_minutes=minutes,
        created_at=start,
        updated_at=start,
    )


class TestRounding:
    """Tests for half-up rounding."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Decimal("1.005"), Decimal("1.01")),
            (Decimal("1.004"), Decimal("1.00")),
            (2.675, Decimal("2.68")),
            (Decimal("-1.005"), Decimal("-1.01")),
            (3, Decimal("3.00")),
        ],
    )
    def test_round_half_up(self, value, expected):
        """Test halves round away from zero."""
        assert round_half_up(value) == expected

    def test_hours_from_minutes(self):
        """Test minute totals convert to rounded hours."""
        assert hours_from_minutes(100) == Decimal("1.67")
        assert hours_from_minutes(90) == Decimal("1.50")
        assert hours_from_minutes(0) == Decimal("0.00")

    def test_earnings_use_rounded_hours(self):
        """Test earnings are computed from hours already rounded."""
        project = make_project(is_billable=True, hourly_rate=50.0)

        assert earnings_for(project, hours_from_minutes(100)) == Decimal("83.50")

    def test_non_billable_earns_nothing(self):
        """Test non-billable projects earn zero."""
        assert earnings_for(make_project(), Decimal("3.00")) == Decimal("0")


class TestProjectMetrics:
    """Tests for compute_project_metrics."""

    def test_billable_project(self):
        """Test hours, earnings and activity dates for a billable project."""
        project = make_project(is_billable=True, hourly_rate=50.0)
        first = datetime(2026, 1, 10, 3, 30, tzinfo=timezone.utc)  # 9:00 AM local
        second = datetime(2026, 1, 12, 8, 30, tzinfo=timezone.utc)  # 2:00 PM local
        entries = [
            make_entry("p1", second, 40, id="e2"),
            make_entry("p1", first, 60, id="e1"),
        ]

        summary = compute_project_metrics(project, entries)

        assert summary.total_working_hours == 1.67
        assert summary.total_earnings == 83.5
        assert summary.hourly_rate == 50.0
        assert summary.project_created_on == "01-01-2026 10:00 AM"
        assert summary.project_started_on == "10-01-2026 9:00 AM"
        assert summary.project_last_work_on == "12-01-2026 2:40 PM"

    def test_other_projects_entries_ignored(self):
        """Test only entries for the project are counted."""
        project = make_project(is_billable=True, hourly_rate=10.0)
        start = datetime(2026, 1, 10, 3, 30, tzinfo=timezone.utc)
        entries = [make_entry("p1", start, 30, id="a"), make_entry("p2", start, 600, id="b")]

        summary = compute_project_metrics(project, entries)

        assert summary.total_working_hours == 0.5
        assert summary.total_earnings == 5.0

    def test_no_entries(self):
        """Test a project without entries reports no work."""
        summary = compute_project_metrics(make_project(), [])

        assert summary.total_working_hours == 0.0
        assert summary.total_earnings == 0.0
        assert summary.hourly_rate is None
        assert summary.project_started_on == NO_WORK_RECORDED
        assert summary.project_last_work_on == NO_WORK_RECORDED

    def test_camel_case_serialization(self):
        """Test summaries serialize with camelCase keys."""
        summary = compute_project_metrics(make_project(), [])
        data = summary.model_dump(by_alias=True)

        assert "projectId" in data
        assert "totalWorkingHours" in data
        assert "projectLastWorkOn" in data


class TestOverview:
    """Tests for compute_overview."""

    def test_billable_and_non_billable(self):
        """Test totals split between billable and non-billable projects."""
        billable = make_project(id="p1", is_billable=True, hourly_rate=50.0)
        internal = make_project(id="p2", name="Internal")
        start = datetime(2026, 1, 10, 3, 30, tzinfo=timezone.utc)
        entries = [
            make_entry("p1", start, 100, id="a"),
            make_entry("p2", start + timedelta(hours=3), 45, id="b"),
        ]

        overview = compute_overview([billable, internal], entries)

        assert overview.total_projects == 2
        assert overview.total_working_hours == 2.42
        assert overview.billable_projects == 1
        assert overview.billable_hours == 1.67
        assert overview.billable_earnings == 83.5
        assert overview.non_billable_projects == 1
        assert overview.non_billable_hours == 0.75

    def test_projects_without_entries_not_classified(self):
        """Test a project with no entries counts toward neither category."""
        billable = make_project(id="p1", is_billable=True, hourly_rate=20.0)
        idle = make_project(id="p2", name="Idle")
        start = datetime(2026, 1, 10, 3, 30, tzinfo=timezone.utc)

        overview = compute_overview([billable, idle], [make_entry("p1", start, 60)])

        assert overview.billable_projects == 1
        assert overview.non_billable_projects == 0
        assert overview.non_billable_hours == 0.0

    def test_empty(self):
        """Test no projects gives all zeros."""
        overview = compute_overview([], [])

        assert overview.total_projects == 0
        assert overview.total_working_hours == 0.0
        assert overview.billable_earnings == 0.0


class TestRangePartition:
    """Splitting history at a day boundary neither drops nor repeats work."""

    def test_split_at_midnight_matches_whole(self):
        """Test the two halves add up to the unfiltered overview."""
        billable = make_project(id="p1", is_billable=True, hourly_rate=40.0)
        internal = make_project(id="p2", name="Internal")
        tenth = parse_local_date_range("10-01-2026")
        entries = [
            make_entry("p1", tenth.start - timedelta(hours=14), 60, id="a"),
            # ends on the last local minute of the 10th
            make_entry("p1", tenth.end - timedelta(seconds=59, minutes=60), 60, id="b"),
            make_entry("p2", tenth.start + timedelta(hours=14), 30, id="c"),
            # starts on the 10th, ends on the 11th
            make_entry("p1", tenth.end - timedelta(minutes=15), 45, id="d"),
            make_entry("p2", tenth.end + timedelta(hours=9), 90, id="e"),
        ]

        before = [entry for entry in entries if entry.end_time <= tenth.end]
        after = [entry for entry in entries if entry.end_time >= tenth.end + timedelta(seconds=1)]
        whole = compute_overview([billable, internal], entries)
        first = compute_overview([billable, internal], before)
        second = compute_overview([billable, internal], after)

        assert len(before) + len(after) == len(entries)
        assert first.total_working_hours + second.total_working_hours == whole.total_working_hours
        assert first.billable_earnings + second.billable_earnings == whole.billable_earnings
        assert whole.total_working_hours == 4.75

    def test_rounding_is_repeatable(self):
        """Test 100 minutes always rounds to 1.67 hours."""
        project = make_project(is_billable=True, hourly_rate=30.0)
        start = datetime(2026, 1, 10, 3, 30, tzinfo=timezone.utc)
        entries = [make_entry("p1", start, 100)]

        results = {compute_project_metrics(project, entries).total_working_hours for _ in range(20)}

        assert results == {1.67}


class TestLoggingScenario:
    """Admission of a day's entries followed by its summary."""

    def test_day_of_work(self):
        """Test a colliding entry is refused and the day totals the admitted work."""
        project = make_project(id="p1", is_billable=True, hourly_rate=50.0)
        first = make_entry("p1", parse_local_instant("10-01-2026 9:00 AM"), 120, id="a")
        stored = [Interval(first.start_time, first.end_time, id=first.id)]

        clash = Interval(parse_local_instant("10-01-2026 10:57 AM"), parse_local_instant("10-01-2026 12:00 PM"))
        later = Interval(parse_local_instant("10-01-2026 11:01 AM"), parse_local_instant("10-01-2026 12:00 PM"))

        assert first.duration_minutes == 120
        assert not is_admissible(clash, stored)
        assert is_admissible(later, stored)

        day = parse_local_date_range("10-01-2026")
        selected = [entry for entry in [first] if day.start <= entry.end_time <= day.end]
        summary = compute_project_metrics(project, selected)

        assert summary.total_working_hours == 2.0
        assert summary.total_earnings == 100.0
