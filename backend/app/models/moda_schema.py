"""
Boundary records for MODA production data.

Modules, drawings and heat-map rows arrive from the dashboard's data layer as
loosely shaped JSON (camelCase on the module side, snake_case on the Supabase
side). Everything is validated here, once, so the matching and scoring code
can rely on plain attributes.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    # Accept both the dashboard aliases and the python field names
    model_config = ConfigDict(populate_by_name=True)


class Module(_Record):
    """A manufactured module as tracked on the production board."""
    id: Optional[str] = None
    serial_number: Optional[str] = Field(None, alias="serialNumber")
    hitch_blm: Optional[str] = Field(None, alias="hitchBLM")
    rear_blm: Optional[str] = Field(None, alias="rearBLM")
    sawbox: bool = False                 # sawboxes match on the hitch BLM only
    build_sequence: Optional[int] = Field(None, alias="buildSequence")
    project_id: Optional[str] = Field(None, alias="projectId")
    project_name: Optional[str] = Field(None, alias="projectName")


class Drawing(_Record):
    """A shop drawing file. Only ``name`` is read; other metadata is carried through."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str


class DifficultyIndicator(_Record):
    id: str
    name: str
    is_easier: Optional[bool] = None
    affects_all_stations: Optional[bool] = None
    display_order: Optional[int] = None


class HeatMapEntry(_Record):
    """One (indicator, station) difficulty rating for a project."""
    difficulty_indicator_id: str
    station_id: str
    # Free text: unknown categories degrade to "average" instead of failing
    difficulty_category: str = "average"
    notes: Optional[str] = None
    project_id: Optional[str] = None


class Station(_Record):
    id: str
    name: str


class Project(_Record):
    id: str
    name: str = ""
    status: str = "Active"
    production_order: Optional[int] = Field(None, alias="productionOrder")
    modules: list[Module] = Field(default_factory=list)


class WeekSchedule(_Record):
    """
    A production week: shift 1 runs Monday-Thursday, shift 2 Friday-Sunday.
    Targets are module counts per day keyed by lowercase day name.
    """
    week_start: Optional[date] = Field(None, alias="weekStart")
    week_end: Optional[date] = Field(None, alias="weekEnd")
    starting_module: Optional[str] = Field(None, alias="startingModule")
    shift1: dict[str, int] = Field(default_factory=dict)
    shift2: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, json_schema_extra={
        "example": {
            "weekStart": "2026-10-19",
            "weekEnd": "2026-10-25",
            "startingModule": "25-0412",
            "shift1": {"monday": 2, "tuesday": 2, "wednesday": 2, "thursday": 2},
            "shift2": {"friday": 1, "saturday": 1, "sunday": 0},
        }
    })
