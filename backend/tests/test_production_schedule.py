"""
test_production_schedule.py — Unit tests for the weekly schedule projection.

Fixture line (active projects by production order, P3 is on hold):
  idx 0 S2-01, 1 S2-02, 2 S2-03, 3 S1-01, 4 S1-02, 5 S1-03, 6 S1-04, 7 S1-05, 8 S1-06
Week starts at S2-02 (idx 1) with Mon-Thu 2/day, Fri 1, Sat 0, Sun unset.
"""

from datetime import date

import pytest

from app.models.moda_schema import Module, WeekSchedule
from app.services.production_schedule import (
    daily_target,
    find_week,
    modules_for_day,
    production_line,
    project_week,
    week_dates,
)


def _serials(modules):
    return [m.serial_number for m in modules]


class TestWeekDates:

    @pytest.mark.parametrize("reference", [date(2026, 10, 19), date(2026, 10, 21), date(2026, 10, 25)])
    def test_monday_to_sunday(self, reference):
        days = week_dates(reference)
        assert days[0].date == date(2026, 10, 19)
        assert days[6].date == date(2026, 10, 25)
        assert [d.day_name for d in days] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

    def test_next_week(self):
        assert week_dates(date(2026, 10, 21), week_offset=1)[0].date == date(2026, 10, 26)

    def test_shift_two_days_flagged(self):
        assert [d.is_weekend for d in week_dates(date(2026, 10, 21))] == [False] * 4 + [True] * 3


class TestFindWeek:

    def test_contains_date(self, week):
        assert find_week([week], date(2026, 10, 22)) is week
        assert find_week([week], date(2026, 10, 25)) is week

    def test_outside_range(self, week):
        assert find_week([week], date(2026, 10, 26)) is None
        assert find_week([], date(2026, 10, 22)) is None

    def test_weeks_without_dates_are_skipped(self, week):
        assert find_week([WeekSchedule(), week], date(2026, 10, 20)) is week


class TestProductionLine:

    def test_active_projects_in_production_order(self, projects):
        line = production_line(projects)
        assert _serials(line) == ["S2-01", "S2-02", "S2-03"] + [f"S1-0{i}" for i in range(1, 7)]

    def test_modules_tagged_with_project(self, projects):
        line = production_line(projects)
        assert line[0].project_id == "P2"
        assert line[0].project_name == "Locke Lofts"
        assert line[-1].project_id == "P1"

    def test_source_modules_not_mutated(self, projects):
        production_line(projects)
        assert projects[0].modules[0].project_id is None

    def test_selected_project(self, projects):
        assert _serials(production_line(projects, "P2")) == ["S2-01", "S2-02", "S2-03"]
        assert len(production_line(projects, "all")) == 9

    def test_missing_production_order_goes_last(self, projects):
        projects[1].production_order = None
        assert production_line(projects)[0].serial_number == "S1-01"


class TestModulesForDay:

    def test_daily_targets(self, week):
        assert [daily_target(week, i) for i in range(7)] == [2, 2, 2, 2, 1, 0, 0]

    def test_projection(self, projects, week):
        line = production_line(projects)
        assert _serials(modules_for_day(line, week, 0)) == ["S2-02", "S2-03"]
        assert _serials(modules_for_day(line, week, 1)) == ["S1-01", "S1-02"]
        assert _serials(modules_for_day(line, week, 3)) == ["S1-05", "S1-06"]

    def test_line_exhausted(self, projects, week):
        """Friday offset = 1 + 8 = 9 → past the last module."""
        line = production_line(projects)
        assert modules_for_day(line, week, 4) == []

    def test_zero_target_day(self, projects, week):
        assert modules_for_day(production_line(projects), week, 5) == []

    def test_unknown_starting_module_starts_at_zero(self, projects, week):
        week.starting_module = "NOPE"
        line = production_line(projects)
        assert _serials(modules_for_day(line, week, 0)) == ["S2-01", "S2-02"]

    def test_project_week(self, projects, week):
        days = project_week(production_line(projects), week)
        assert len(days) == 7
        assert sum(len(d) for d in days) == 8

    def test_no_week_configured(self):
        assert project_week([Module(serialNumber="A")], None) == [[] for _ in range(7)]
