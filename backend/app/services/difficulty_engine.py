"""
difficulty_engine.py — Heat-map difficulty scoring for production labor planning.

Each project rates every difficulty indicator (stairs, 3HR walls, sidewalls …)
per factory station on a five-step scale. This engine turns those ratings
into workload numbers:

  - Score per category: easy=-1, average=0, medium=+1, hard=+1, very_hard=+2
  - Station-day score: sum over the modules scheduled that day of the sum of
    their indicator scores at that station (scores are summed, never averaged)
  - Intensity label from the average score per module
  - Labor multipliers per module/station (max of the assigned indicators)
  - Weekly stations × days matrix with week and day totals

Missing data never raises: an indicator without an entry, an unknown
category or a project without a heat map all count as "average".
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from app.models.moda_schema import DifficultyIndicator, HeatMapEntry, Module, Station
from app.services.perf_monitor import timed

logger = logging.getLogger("moda-heat-map")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CATEGORY: str = "average"

DIFFICULTY_SCORES: Dict[str, int] = {
    "easy":      -1,
    "average":    0,
    "medium":     1,
    "hard":       1,
    "very_hard":  2,
}

# Labor-hour multipliers per category
DIFFICULTY_MULTIPLIERS: Dict[str, float] = {
    "easy":      0.8,
    "average":   1.0,
    "medium":    1.2,
    "hard":      1.4,
    "very_hard": 1.6,
}

CATEGORY_LABELS: Dict[str, str] = {
    "easy":      "Easy",
    "average":   "Average",
    "medium":    "Medium",
    "hard":      "Hard",
    "very_hard": "Very Hard",
}

NO_MODULES_LABEL: str = "No modules"

# Average score per module → (band, label). Upper bounds are inclusive:
#   avg <= -0.5  Light
#   avg <=  0.25 Normal
#   avg <=  0.75 Moderate
#   avg <=  1.25 Heavy
#   otherwise    Very Heavy
INTENSITY_THRESHOLDS: Tuple[Tuple[float, str, str], ...] = (
    (-0.5, "light",    "Light"),
    (0.25, "normal",   "Normal"),
    (0.75, "moderate", "Moderate"),
    (1.25, "heavy",    "Heavy"),
)
TOP_BAND: Tuple[str, str] = ("very_heavy", "Very Heavy")

# Multiplier → category, upper bounds inclusive
_MULTIPLIER_CATEGORIES: Tuple[Tuple[float, str], ...] = (
    (0.8, "easy"),
    (1.0, "average"),
    (1.2, "medium"),
    (1.4, "hard"),
)


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass
class IndicatorScore:
    name: str
    category: str
    score: int


@dataclass
class ModuleScoreDetail:
    serial: Optional[str]
    score: int
    indicators: List[IndicatorScore] = field(default_factory=list)


@dataclass
class StationDayScore:
    score: int = 0
    module_count: int = 0
    details: List[ModuleScoreDetail] = field(default_factory=list)

    @property
    def intensity(self) -> str:
        return intensity_label(self.score, self.module_count)


@dataclass
class StationWeekRow:
    station_id: str
    station_name: str
    day_scores: List[StationDayScore]
    week_total: int
    week_modules: int
    week_intensity: str


@dataclass
class DayTotal:
    score: int
    module_count: int
    intensity: str


@dataclass
class WeeklyHeatMap:
    rows: List[StationWeekRow]
    day_totals: List[DayTotal]


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score_of(category: Optional[str]) -> int:
    """Integer workload score for a category; unknown or missing → 0 (average)."""
    if category not in DIFFICULTY_SCORES:
        if category is not None:
            logger.debug("Unrecognised difficulty category %r scored as average", category)
        return DIFFICULTY_SCORES[DEFAULT_CATEGORY]
    return DIFFICULTY_SCORES[category]


def _entry_index(entries: Optional[Iterable[HeatMapEntry]]) -> Dict[Tuple[str, str], str]:
    """(indicator_id, station_id) → category; the first row wins on duplicates."""
    index: Dict[Tuple[str, str], str] = {}
    for entry in entries or []:
        index.setdefault(
            (entry.difficulty_indicator_id, entry.station_id), entry.difficulty_category
        )
    return index


def _score_station_day(
    station_id: str,
    modules: Sequence[Module],
    indexes: Mapping[Optional[str], Dict[Tuple[str, str], str]],
    indicators: Sequence[DifficultyIndicator],
) -> StationDayScore:
    result = StationDayScore(module_count=len(modules))
    for module in modules:
        index = indexes.get(module.project_id) or {}
        module_score = 0
        scored: List[IndicatorScore] = []
        for indicator in indicators:
            category = index.get((indicator.id, station_id))
            if category is None:
                continue
            score = score_of(category)
            if score != 0:
                module_score += score
                scored.append(IndicatorScore(name=indicator.name, category=category, score=score))
        result.score += module_score
        if scored:
            result.details.append(
                ModuleScoreDetail(serial=module.serial_number, score=module_score, indicators=scored)
            )
    return result


def _build_indexes(
    heat_map_by_project: Optional[Mapping[str, Iterable[HeatMapEntry]]]
) -> Dict[Optional[str], Dict[Tuple[str, str], str]]:
    return {
        project_id: _entry_index(entries)
        for project_id, entries in (heat_map_by_project or {}).items()
    }


@timed
def aggregate_station_day(
    station_id: str,
    scheduled_modules: Sequence[Module],
    heat_map_by_project: Optional[Mapping[str, Iterable[HeatMapEntry]]],
    indicators: Sequence[DifficultyIndicator],
) -> StationDayScore:
    """
    Sum difficulty scores for every module scheduled at ``station_id`` on one day.

    ``module_count`` counts every scheduled module, scoring or not.
    ``details`` lists only modules with at least one non-zero indicator, and
    within each only the non-zero indicators.
    """
    return _score_station_day(
        station_id,
        list(scheduled_modules or []),
        _build_indexes(heat_map_by_project),
        indicators or [],
    )


def _band(score: float, module_count: int) -> Tuple[str, str]:
    if module_count == 0:
        return "none", NO_MODULES_LABEL
    avg = score / module_count
    for upper, band, label in INTENSITY_THRESHOLDS:
        if avg <= upper:
            return band, label
    return TOP_BAND


def intensity_label(score: float, module_count: int) -> str:
    """Light / Normal / Moderate / Heavy / Very Heavy, or "No modules" when count is 0."""
    return _band(score, module_count)[1]


def intensity_band(score: float, module_count: int) -> str:
    """Stable key for the intensity bucket (``none`` when count is 0)."""
    return _band(score, module_count)[0]


# ---------------------------------------------------------------------------
# Labor multipliers
# ---------------------------------------------------------------------------

def multiplier_of(category: Optional[str]) -> float:
    return DIFFICULTY_MULTIPLIERS.get(category or DEFAULT_CATEGORY, 1.0)


def category_for_multiplier(multiplier: float) -> str:
    for upper, category in _MULTIPLIER_CATEGORIES:
        if multiplier <= upper:
            return category
    return "very_hard"


def module_station_multiplier(
    module_indicator_ids: Optional[Iterable[str]],
    heat_map_entries: Optional[Iterable[HeatMapEntry]],
    station_id: str,
) -> float:
    """
    Labor multiplier for a module at a station: the highest multiplier among
    the module's assigned indicators, never below 1.0.
    """
    index = _entry_index(heat_map_entries)
    max_multiplier = 1.0
    for indicator_id in module_indicator_ids or []:
        category = index.get((indicator_id, station_id))
        if category is not None:
            max_multiplier = max(max_multiplier, multiplier_of(category))
    return max_multiplier


def module_difficulty_summary(
    module_indicator_ids: Optional[Iterable[str]],
    heat_map_entries: Optional[Iterable[HeatMapEntry]],
    station_ids: Iterable[str],
) -> Dict[str, Dict[str, Any]]:
    indicator_ids = list(module_indicator_ids or [])
    entries = list(heat_map_entries or [])
    summary: Dict[str, Dict[str, Any]] = {}
    for station_id in station_ids:
        multiplier = module_station_multiplier(indicator_ids, entries, station_id)
        summary[station_id] = {
            "category": category_for_multiplier(multiplier),
            "multiplier": multiplier,
        }
    return summary


def category_legend() -> List[Dict[str, Any]]:
    return [
        {
            "category": category,
            "label": CATEGORY_LABELS[category],
            "score": DIFFICULTY_SCORES[category],
            "multiplier": DIFFICULTY_MULTIPLIERS[category],
        }
        for category in DIFFICULTY_SCORES
    ]


# ---------------------------------------------------------------------------
# Weekly matrix
# ---------------------------------------------------------------------------

@timed
def build_weekly_heat_map(
    stations: Sequence[Station],
    day_modules: Sequence[Sequence[Module]],
    heat_map_by_project: Optional[Mapping[str, Iterable[HeatMapEntry]]],
    indicators: Sequence[DifficultyIndicator],
) -> WeeklyHeatMap:
    """
    Score every station on every day in ``day_modules`` (one module list per
    day, usually seven) and roll up week totals per station and day totals
    across stations.
    """
    indexes = _build_indexes(heat_map_by_project)
    indicators = indicators or []
    day_modules = [list(modules or []) for modules in day_modules or []]

    rows: List[StationWeekRow] = []
    for station in stations or []:
        day_scores = [
            _score_station_day(station.id, modules, indexes, indicators)
            for modules in day_modules
        ]
        week_total = sum(d.score for d in day_scores)
        week_modules = sum(d.module_count for d in day_scores)
        rows.append(StationWeekRow(
            station_id=station.id,
            station_name=station.name,
            day_scores=day_scores,
            week_total=week_total,
            week_modules=week_modules,
            week_intensity=intensity_label(week_total, week_modules),
        ))

    day_totals = []
    for day_idx in range(len(day_modules)):
        score = sum(row.day_scores[day_idx].score for row in rows)
        count = sum(row.day_scores[day_idx].module_count for row in rows)
        day_totals.append(DayTotal(score=score, module_count=count,
                                   intensity=intensity_label(score, count)))

    logger.debug(
        "Weekly heat map built: %d stations x %d days", len(rows), len(day_modules)
    )
    return WeeklyHeatMap(rows=rows, day_totals=day_totals)
