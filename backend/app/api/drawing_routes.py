"""
Shop drawing routes.
BLM parsing, drawing lookup per module and the drawing status log used by
the Drawings tab. Requests carry the already-loaded modules and drawings.
"""
import logging
from typing import Literal, Optional
from fastapi import APIRouter
from pydantic import BaseModel, Field
from app.models.moda_schema import Drawing, Module
from app.services.blm_matcher import find_matching_drawing, parse_blm, sort_modules
from app.services.drawing_status_engine import (
    build_status_log,
    coverage_stats,
    filter_status_log,
    sort_status_log,
)

router = APIRouter(prefix="/api/v1/drawings", tags=["Shop Drawings"])
logger = logging.getLogger("moda-api.drawings")

SortKey = Literal["module", "level", "building", "sequence"]
Direction = Literal["asc", "desc"]


# ─── Pydantic schemas ────────────────────────────────────────────────────────

class ParseBLMRequest(BaseModel):
    raw: Optional[str] = None


class MatchRequest(BaseModel):
    module: Module
    drawings: list[Drawing] = Field(default_factory=list)


class SortModulesRequest(BaseModel):
    modules: list[Module]
    sort_by: SortKey = "module"
    direction: Direction = "asc"


class StatusLogRequest(BaseModel):
    modules: list[Module]
    drawings: list[Drawing] = Field(default_factory=list)
    sort_by: SortKey = "module"
    direction: Direction = "asc"
    status: Literal["all", "has", "missing"] = "all"
    search: str = ""


# ─── Routes ──────────────────────────────────────────────────────────────────

@router.post("/parse-blm")
async def parse_blm_route(req: ParseBLMRequest):
    parsed = parse_blm(req.raw)
    return {
        "building": parsed.building,
        "level": parsed.level,
        "module": parsed.module,
        "raw": parsed.raw,
        "matched": parsed.matched,
    }


@router.post("/match")
async def match_drawing(req: MatchRequest):
    """First drawing (in request order) whose file name carries the module's BLM."""
    drawing = find_matching_drawing(req.module, req.drawings)
    return {
        "has_drawing": drawing is not None,
        "drawing": drawing.model_dump() if drawing else None,
    }


@router.post("/sort-modules")
async def sort_modules_route(req: SortModulesRequest):
    ordered = sort_modules(req.modules, req.sort_by, req.direction)
    return {"modules": [m.model_dump(by_alias=True) for m in ordered]}


@router.post("/status-log")
async def status_log(req: StatusLogRequest):
    """
    Drawing coverage for every module.

    Stats are computed over the full log; filtering and search only narrow
    the returned rows.
    """
    statuses = build_status_log(req.modules, req.drawings)
    stats = coverage_stats(statuses)
    rows = sort_status_log(
        filter_status_log(statuses, req.status, req.search), req.sort_by, req.direction
    )
    logger.info(
        f"Status log: {stats['with_drawings']}/{stats['total']} modules with drawings "
        f"({len(rows)} rows after filters)"
    )
    return {
        "stats": stats,
        "modules": [
            {
                "module": s.module.model_dump(by_alias=True),
                "has_drawing": s.has_drawing,
                "drawing": s.drawing.model_dump() if s.drawing else None,
                "display_blm": s.display_blm,
                "parsed": {
                    "building": s.parsed.building,
                    "level": s.parsed.level,
                    "module": s.parsed.module,
                },
            }
            for s in rows
        ],
    }
