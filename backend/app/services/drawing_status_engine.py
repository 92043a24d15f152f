"""Drawing status log — shop drawing coverage for every module in a project."""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from app.models.moda_schema import Drawing, Module
from app.services.blm_matcher import (
    BLMIdentifier,
    find_matching_drawing,
    module_sort_key,
    parse_blm,
    sort_identifier,
)
from app.services.perf_monitor import timed

logger = logging.getLogger("moda-drawing-status")

STATUS_FILTERS = ("all", "has", "missing")


@dataclass
class ModuleDrawingStatus:
    module: Module
    has_drawing: bool
    drawing: Optional[Drawing]
    parsed: BLMIdentifier
    display_blm: Optional[str]


def display_blm(module: Module) -> Optional[str]:
    """Hitch BLM alone when both sides share it (or rear is blank), else "hitch / rear"."""
    if module.hitch_blm == module.rear_blm or not module.rear_blm:
        return module.hitch_blm
    return f"{module.hitch_blm} / {module.rear_blm}"


@timed
def build_status_log(
    modules: Iterable[Module], drawings: Optional[List[Drawing]]
) -> List[ModuleDrawingStatus]:
    statuses = []
    for module in modules or []:
        drawing = find_matching_drawing(module, drawings)
        statuses.append(ModuleDrawingStatus(
            module=module,
            has_drawing=drawing is not None,
            drawing=drawing,
            parsed=parse_blm(sort_identifier(module)),
            display_blm=display_blm(module),
        ))
    logger.debug(
        "Status log built: %d modules, %d with drawings",
        len(statuses), sum(1 for s in statuses if s.has_drawing),
    )
    return statuses


def _matches_search(module: Module, term: str) -> bool:
    fields = [module.serial_number, module.hitch_blm, module.rear_blm]
    if any(f and term in f.lower() for f in fields):
        return True
    return module.build_sequence is not None and term in str(module.build_sequence)


def filter_status_log(
    statuses: Iterable[ModuleDrawingStatus],
    status: str = "all",
    search: str = "",
) -> List[ModuleDrawingStatus]:
    """
    Keep rows by drawing status ("all" | "has" | "missing") and an optional
    case-insensitive search over serial number, both BLMs and build sequence.
    """
    results = list(statuses or [])
    if status == "has":
        results = [s for s in results if s.has_drawing]
    elif status == "missing":
        results = [s for s in results if not s.has_drawing]

    term = (search or "").strip().lower()
    if term:
        results = [s for s in results if _matches_search(s.module, term)]
    return results


def sort_status_log(
    statuses: Iterable[ModuleDrawingStatus], sort_key: str = "module", direction: str = "asc"
) -> List[ModuleDrawingStatus]:
    return sorted(
        statuses or [],
        key=lambda s: module_sort_key(s.module, sort_key, parsed=s.parsed),
        reverse=direction != "asc",
    )


def coverage_stats(statuses: List[ModuleDrawingStatus]) -> Dict[str, Any]:
    statuses = statuses or []
    total = len(statuses)
    with_drawings = sum(1 for s in statuses if s.has_drawing)
    # Round half up, as shown on the dashboard progress bar
    percentage = math.floor(with_drawings * 100 / total + 0.5) if total > 0 else 0
    return {
        "total": total,
        "with_drawings": with_drawings,
        "missing": total - with_drawings,
        "percentage": percentage,
    }
