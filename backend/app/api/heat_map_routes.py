"""
Heat map routes.
Difficulty scoring per station and day for labor planning. The dashboard
posts the projects, stations, indicators and heat-map rows it has loaded;
this router projects the week's schedule and scores it.
"""
import logging
from dataclasses import asdict
from datetime import date
from typing import Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from app.models.moda_schema import (
    DifficultyIndicator, HeatMapEntry, Module, Project, Station, WeekSchedule,
)
from app.services.difficulty_engine import (
    aggregate_station_day,
    build_weekly_heat_map,
    category_legend,
    intensity_band,
    module_difficulty_summary,
)
from app.services.production_schedule import (
    find_week, production_line, project_week, week_dates,
)

router = APIRouter(prefix="/api/v1/heat-map", tags=["Heat Map"])
logger = logging.getLogger("moda-api.heat-map")


# ─── Pydantic schemas ────────────────────────────────────────────────────────

class StationDayRequest(BaseModel):
    station_id: str
    modules: list[Module]
    heat_map_by_project: dict[str, list[HeatMapEntry]] = Field(default_factory=dict)
    indicators: list[DifficultyIndicator] = Field(default_factory=list)


class WeeklyReportRequest(BaseModel):
    projects: list[Project]
    stations: list[Station]
    indicators: list[DifficultyIndicator] = Field(default_factory=list)
    heat_map_by_project: dict[str, list[HeatMapEntry]] = Field(default_factory=dict)
    # Either pass the week directly, or the configured weeks plus a date to look up
    week: Optional[WeekSchedule] = None
    weeks: list[WeekSchedule] = Field(default_factory=list)
    reference_date: Optional[date] = None
    week_offset: int = 0
    selected_project: Optional[str] = None


class ModuleSummaryRequest(BaseModel):
    indicator_ids: list[str] = Field(default_factory=list)
    heat_map_entries: list[HeatMapEntry] = Field(default_factory=list)
    station_ids: list[str]


# ─── Routes ──────────────────────────────────────────────────────────────────

@router.get("/categories")
async def list_categories():
    return {"categories": category_legend()}


@router.post("/station-day")
async def station_day(req: StationDayRequest):
    result = aggregate_station_day(
        req.station_id, req.modules, req.heat_map_by_project, req.indicators
    )
    return {
        **asdict(result),
        "intensity": result.intensity,
        "band": intensity_band(result.score, result.module_count),
    }


@router.post("/weekly-report")
async def weekly_report(req: WeeklyReportRequest):
    """
    Stations × days difficulty matrix for one production week.

    The week comes from ``week`` when given, otherwise from the configured
    ``weeks`` containing the Monday of the requested week.
    """
    days = week_dates(req.reference_date or date.today(), req.week_offset)
    week = req.week or find_week(req.weeks, days[0].date)
    if week is None and (req.weeks or req.reference_date):
        logger.info(f"No production week configured for {days[0].date.isoformat()}")

    line = production_line(req.projects, req.selected_project)
    day_modules = project_week(line, week)
    report = build_weekly_heat_map(
        req.stations, day_modules, req.heat_map_by_project, req.indicators
    )

    return {
        "days": [
            {
                "day_name": d.day_name,
                "date": d.date.isoformat(),
                "is_weekend": d.is_weekend,
                "modules": [m.serial_number for m in mods],
            }
            for d, mods in zip(days, day_modules)
        ],
        "rows": [
            {
                "station_id": row.station_id,
                "station_name": row.station_name,
                "day_scores": [
                    {**asdict(ds), "intensity": ds.intensity} for ds in row.day_scores
                ],
                "week_total": row.week_total,
                "week_modules": row.week_modules,
                "week_intensity": row.week_intensity,
            }
            for row in report.rows
        ],
        "day_totals": [asdict(t) for t in report.day_totals],
    }


@router.post("/module-summary")
async def module_summary(req: ModuleSummaryRequest):
    """Labor multiplier per station for a module's assigned difficulty indicators."""
    if not req.station_ids:
        raise HTTPException(status_code=400, detail="At least one station_id is required")
    return {
        "stations": module_difficulty_summary(
            req.indicator_ids, req.heat_map_entries, req.station_ids
        )
    }
