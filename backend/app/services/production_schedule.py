"""
Weekly production schedule projection.

Turns a week's shift targets into the list of modules produced each day.
The production line is every active project's modules, projects ordered by
their production order. The week starts at ``starting_module`` and each
day takes the next ``target`` modules off the line.

Shift 1 covers Monday-Thursday, shift 2 Friday-Sunday.
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from app.models.moda_schema import Module, Project, WeekSchedule

logger = logging.getLogger("moda-schedule")

DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
DAY_ABBREVIATIONS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
SHIFT1_DAYS = {"monday", "tuesday", "wednesday", "thursday"}
SHIFT2_DAYS = {"friday", "saturday", "sunday"}

# Projects without a production order go to the back of the line
PRODUCTION_ORDER_SENTINEL = 999
ACTIVE_STATUS = "Active"


@dataclass
class ScheduleDay:
    day_name: str
    date: date
    is_weekend: bool


def week_dates(reference: date, week_offset: int = 0) -> List[ScheduleDay]:
    """Monday-Sunday of the week containing ``reference``, shifted by whole weeks."""
    monday = reference - timedelta(days=reference.weekday()) + timedelta(weeks=week_offset)
    return [
        ScheduleDay(
            day_name=DAY_ABBREVIATIONS[i],
            date=monday + timedelta(days=i),
            is_weekend=i >= 4,
        )
        for i in range(7)
    ]


def find_week(weeks: Iterable[WeekSchedule], target: date) -> Optional[WeekSchedule]:
    for week in weeks or []:
        if week.week_start is None or week.week_end is None:
            continue
        if week.week_start <= target <= week.week_end:
            return week
    return None


def production_line(
    projects: Iterable[Project], selected_project: Optional[str] = None
) -> List[Module]:
    """Modules of active projects in production order, tagged with their project."""
    active = [
        p for p in projects
        if p.status == ACTIVE_STATUS and (selected_project in (None, "all") or p.id == selected_project)
    ]
    active.sort(key=lambda p: p.production_order or PRODUCTION_ORDER_SENTINEL)

    line: List[Module] = []
    for project in active:
        for module in project.modules:
            line.append(module.model_copy(update={
                "project_id": project.id,
                "project_name": project.name,
            }))
    return line


def daily_target(week: WeekSchedule, day_index: int) -> int:
    day_name = DAY_NAMES[day_index]
    shift = week.shift1 if day_name in SHIFT1_DAYS else week.shift2
    return shift.get(day_name) or 0


def _start_index(line: List[Module], week: WeekSchedule) -> int:
    for idx, module in enumerate(line):
        if module.serial_number == week.starting_module:
            return idx
    if week.starting_module:
        logger.debug("Starting module %s not on the line, starting at 0", week.starting_module)
    return 0


def modules_for_day(line: List[Module], week: WeekSchedule, day_index: int) -> List[Module]:
    """
    Modules produced on ``day_index`` (0 = Monday).

    Offset = start index + cumulative targets of the earlier days; the slice
    is clipped at the end of the line.
    """
    target = daily_target(week, day_index)
    if target <= 0:
        return []
    offset = _start_index(line, week) + sum(daily_target(week, i) for i in range(day_index))
    return line[offset:offset + target]


def project_week(line: List[Module], week: Optional[WeekSchedule]) -> List[List[Module]]:
    """Seven day lists; all empty when no week is configured."""
    if week is None:
        return [[] for _ in DAY_NAMES]
    return [modules_for_day(line, week, i) for i in range(len(DAY_NAMES))]
