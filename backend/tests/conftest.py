"""
conftest.py — Shared pytest fixtures for the MODA production core test suite.

No database or external service fixtures are defined here. All tests are
pure unit tests over in-memory records, plus HTTP tests through FastAPI's
TestClient.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``app.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
from datetime import date
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any app imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Modules & drawings
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_modules():
    """
    Five modules across two buildings:

      25-001  B1L2M03 / B1L2M04          (paired, distinct rear)
      25-002  B1L3M01 / B1L3M01          (both sides share one BLM)
      25-003  B2L1M03 sawbox, rear B2L1M09
      25-004  L1M02   (no building → building "1")
      25-005  no BLM at all
    """
    from app.models.moda_schema import Module
    return [
        Module(serialNumber="25-001", hitchBLM="B1L2M03", rearBLM="B1L2M04", buildSequence=3),
        Module(serialNumber="25-002", hitchBLM="B1L3M01", rearBLM="B1L3M01", buildSequence=1),
        Module(serialNumber="25-003", hitchBLM="B2L1M03", rearBLM="B2L1M09", sawbox=True,
               buildSequence=2),
        Module(serialNumber="25-004", hitchBLM="L1M02"),
        Module(serialNumber="25-005"),
    ]


@pytest.fixture
def sample_drawings():
    from app.models.moda_schema import Drawing
    return [
        Drawing(name="B1L2M03_Electrical.pdf", url="https://files.example/1"),
        Drawing(name="b1-l3-m01 Framing.pdf"),
        Drawing(name="L1M02_Plan.pdf"),
    ]


# ---------------------------------------------------------------------------
# Heat map
# ---------------------------------------------------------------------------

@pytest.fixture
def indicators():
    from app.models.moda_schema import DifficultyIndicator
    return [
        DifficultyIndicator(id="ind-stair", name="Stair"),
        DifficultyIndicator(id="ind-3hr", name="3HR Wall"),
        DifficultyIndicator(id="ind-short", name="Short", is_easier=True),
    ]


@pytest.fixture
def heat_map_by_project():
    """
    Project P1 at station "framing":
      Stair = hard (+1), 3HR Wall = very_hard (+2), Short = easy (-1)
    Project P1 at station "drywall":
      Stair = average (0)
    Project P2 has no heat map rows.
    """
    from app.models.moda_schema import HeatMapEntry
    return {
        "P1": [
            HeatMapEntry(difficulty_indicator_id="ind-stair", station_id="framing",
                         difficulty_category="hard"),
            HeatMapEntry(difficulty_indicator_id="ind-3hr", station_id="framing",
                         difficulty_category="very_hard"),
            HeatMapEntry(difficulty_indicator_id="ind-short", station_id="framing",
                         difficulty_category="easy"),
            HeatMapEntry(difficulty_indicator_id="ind-stair", station_id="drywall",
                         difficulty_category="average"),
        ],
        "P2": [],
    }


# ---------------------------------------------------------------------------
# Production schedule
# ---------------------------------------------------------------------------

@pytest.fixture
def projects():
    """
    Two active projects (P2 first by production order) and one on hold.
    P2: S2-01..S2-03   P1: S1-01..S1-06   P3 (On Hold): S3-01
    """
    from app.models.moda_schema import Module, Project
    return [
        Project(id="P1", name="Alvarado Creek", productionOrder=2,
                modules=[Module(serialNumber=f"S1-0{i}") for i in range(1, 7)]),
        Project(id="P2", name="Locke Lofts", productionOrder=1,
                modules=[Module(serialNumber=f"S2-0{i}") for i in range(1, 4)]),
        Project(id="P3", name="Parked", status="On Hold", productionOrder=0,
                modules=[Module(serialNumber="S3-01")]),
    ]


@pytest.fixture
def week():
    """Week of Monday 2026-10-19: Mon-Thu 2/day, Fri 1, Sat-Sun 0, starting at S2-02."""
    from app.models.moda_schema import WeekSchedule
    return WeekSchedule(
        weekStart=date(2026, 10, 19),
        weekEnd=date(2026, 10, 25),
        startingModule="S2-02",
        shift1={"monday": 2, "tuesday": 2, "wednesday": 2, "thursday": 2},
        shift2={"friday": 1, "saturday": 0},
    )
