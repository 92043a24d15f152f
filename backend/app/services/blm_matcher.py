"""
blm_matcher.py — Building/Level/Module identifier parsing and shop-drawing matching.

A BLM code locates a module in a project's building and level grid, e.g.
``B1L2M03`` (building 1, level 2, module 3). The same code shows up in
module records (hitch and rear side) and, in free form, in shop drawing
file names (``B1-L2-M03 Electrical.pdf``, ``L2M03_Plan.pdf``).

Covers:
  - Normalisation and parsing of raw BLM strings (never raises)
  - Identifier selection per module (sawboxes defer to the hitch side)
  - Drawing lookup by full BLM or by the building-less ``L#M#`` core
  - Multi-key module ordering (module / level / building / sequence)

All functions are pure and work on already-loaded records.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from app.models.moda_schema import Drawing, Module

logger = logging.getLogger("moda-blm")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(r"[_\-\s]")
_BLM_RE = re.compile(r"(?:B(\d+))?L(\d+)M(\d+)", re.ASCII)
_CORE_RE = re.compile(r"L\d+M\d+", re.ASCII)

DEFAULT_BUILDING: str = "1"

# Modules without a build sequence sort after every sequenced module
SEQUENCE_SENTINEL: int = 9999

SORT_KEYS: Tuple[str, ...] = ("module", "level", "building", "sequence")


@dataclass(frozen=True)
class BLMIdentifier:
    """
    Parsed BLM code. The unmatched sentinel is
    ``BLMIdentifier(building="", level=0, module=0, raw=<normalised input>)``.
    """
    building: str
    level: int
    module: int
    raw: str

    @property
    def matched(self) -> bool:
        return self.building != ""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def normalize_blm(value: Optional[str]) -> str:
    """Uppercase and drop underscores, hyphens and whitespace."""
    if not value:
        return ""
    return _STRIP_RE.sub("", value.upper())


def parse_blm(raw: Optional[str]) -> BLMIdentifier:
    """
    Parse a free-form BLM string.

    ``"b2-l3-m07"`` → building "2", level 3, module 7, raw "B2L3M07".
    A missing building prefix defaults to building "1". Inputs with no
    ``L#M#`` group (including None and "") return the unmatched sentinel.
    """
    normalized = normalize_blm(raw)
    match = _BLM_RE.search(normalized)
    if not match:
        return BLMIdentifier(building="", level=0, module=0, raw=normalized)
    return BLMIdentifier(
        building=match.group(1) or DEFAULT_BUILDING,
        level=int(match.group(2)),
        module=int(match.group(3)),
        raw=normalized,
    )


def extract_core(normalized: Optional[str]) -> Optional[str]:
    """Return the ``L#M#`` part of a normalised BLM, or None."""
    if not normalized:
        return None
    match = _CORE_RE.search(normalized)
    return match.group(0) if match else None


# ---------------------------------------------------------------------------
# Identifier selection
# ---------------------------------------------------------------------------

def sort_identifier(module: Module) -> Optional[str]:
    """The BLM a module is parsed and ordered by: hitch for sawboxes, else hitch-or-rear."""
    if module.sawbox:
        return module.hitch_blm
    return module.hitch_blm or module.rear_blm


def matching_identifiers(module: Module) -> Tuple[str, Optional[str]]:
    """
    Return ``(primary, secondary)`` normalised identifiers used for drawing lookup.

    Sawboxes are drawn with their hitch-side partner, so only the hitch BLM
    counts and the rear BLM is ignored entirely. Other modules use hitch
    (falling back to rear) as primary and the rear BLM as secondary when it
    differs from the hitch BLM.
    """
    if module.sawbox:
        return normalize_blm(module.hitch_blm), None

    primary = normalize_blm(module.hitch_blm or module.rear_blm)
    secondary = None
    if module.rear_blm != module.hitch_blm and module.rear_blm:
        secondary = normalize_blm(module.rear_blm)
    return primary, secondary


# ---------------------------------------------------------------------------
# Drawing matching
# ---------------------------------------------------------------------------

def _needles(module: Module) -> List[str]:
    """Substrings tested against each drawing name, in priority order."""
    primary, secondary = matching_identifiers(module)
    candidates = [primary, secondary, extract_core(primary), extract_core(secondary)]
    # An empty needle would match every file name. The dashboard let a module
    # with no BLM match any drawing; here it matches none.
    return [c for c in candidates if c]


def _drawing_matches(drawing: Drawing, needles: Sequence[str]) -> bool:
    file_name = normalize_blm(drawing.name)
    return any(needle in file_name for needle in needles)


def find_matching_drawing(
    module: Module, drawings: Optional[Iterable[Drawing]]
) -> Optional[Drawing]:
    """
    Return the first drawing (in input order) whose normalised file name
    contains the module's primary BLM, secondary BLM, primary ``L#M#`` core
    or secondary ``L#M#`` core. None when nothing matches.
    """
    if not drawings:
        return None
    needles = _needles(module)
    if not needles:
        return None
    for drawing in drawings:
        if _drawing_matches(drawing, needles):
            return drawing
    return None


def has_matching_drawing(module: Module, drawings: Optional[Iterable[Drawing]]) -> bool:
    """True as soon as any drawing matches (see find_matching_drawing)."""
    return find_matching_drawing(module, drawings) is not None


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def module_sort_key(module: Module, sort_key: str, parsed: Optional[BLMIdentifier] = None):
    """
    Comparison key for one module.

      module   → (module, level, building)
      level    → (level, module, building)
      building → (building, level, module)
      sequence → (build_sequence or 9999,)

    Buildings compare as strings. Unknown keys order by module number only.
    """
    if sort_key == "sequence":
        return (module.build_sequence or SEQUENCE_SENTINEL,)

    p = parsed if parsed is not None else parse_blm(sort_identifier(module))
    if sort_key == "module":
        return (p.module, p.level, p.building)
    if sort_key == "level":
        return (p.level, p.module, p.building)
    if sort_key == "building":
        return (p.building, p.level, p.module)
    return (p.module,)


def sort_modules(
    modules: Iterable[Module], sort_key: str = "module", direction: str = "asc"
) -> List[Module]:
    """
    Order modules by ``sort_key``; any direction other than "asc" reverses
    the whole ordering without changing which key is primary.

    Python's sort is stable, so modules with equal keys keep their input
    order in both directions. Callers should not rely on that.
    """
    if sort_key not in SORT_KEYS:
        logger.debug("Unknown sort key %r, ordering by module number", sort_key)
    return sorted(
        modules or [],
        key=lambda m: module_sort_key(m, sort_key),
        reverse=direction != "asc",
    )
