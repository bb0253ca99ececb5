"""Crag Info MCP Server.

FastMCP server exposing area lookups and grade helpers as tools.
Run: crag-info-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .core.api import get_area_by_uuid, get_crag_details_near
from .core.clients.graphql import get_client
from .core.grades import GRADE_CONTEXT_TO_GRADE_SCALES, Grade, GradeHelper
from .core.models import ClimbDisciplineRecord, GradeContext
from .core.scales import get_scale

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)
LOCAL_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)


def _get_log_level() -> int:
    raw = os.environ.get("CRAG_INFO_LOG_LEVEL", "INFO")
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        logger.warning("Ignoring invalid CRAG_INFO_LOG_LEVEL=%r, using INFO", raw)
        return logging.INFO
    return level


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and create the shared query client."""
    logging.basicConfig(level=_get_log_level(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    get_client()
    yield


mcp = FastMCP(
    "Crag Info",
    instructions="Find climbing crags near a location, look up cached areas, and format or validate climbing grades for US, French and Australian grade contexts.",
    lifespan=lifespan,
)


def _require_context(context: str) -> str:
    if context not in GRADE_CONTEXT_TO_GRADE_SCALES:
        supported = ", ".join(c.value for c in GradeContext)
        raise ValueError(f"Unknown grade context '{context}'. Use one of: {supported}")
    return context


# ─── Tool 1: Crags near ──────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def crags_near(
    lng: float,
    lat: float,
    min_distance: int = 0,
    max_distance: int = 50000,
    place_id: str = "unspecified",
    include_crags: bool = True,
) -> dict:
    """Climbing crags within a distance band around a coordinate.

    Args:
        lng: Longitude.
        lat: Latitude.
        min_distance: Inner radius in meters. Default 0.
        max_distance: Outer radius in meters. Default 50000.
        place_id: Optional id echoed back with the result.
        include_crags: Include crag details. Default True.
    """
    result = await get_crag_details_near((lng, lat), (min_distance, max_distance), place_id, include_crags)
    payload = result.model_dump()
    if result.error:
        payload["summary"] = f"Lookup failed: {result.error}"
    else:
        payload["summary"] = f"{len(result.data)} crag(s) between {min_distance} m and {max_distance} m"
    return payload


# ─── Tool 2: Cached area ─────────────────────────────────────────────────────


@mcp.tool(annotations=LOCAL_ONLY)
def area_by_uuid(uuid: str) -> dict:
    """An area previously returned by crags_near, read from the local cache.

    Args:
        uuid: Area uuid.
    """
    area = get_area_by_uuid(uuid)
    return {"uuid": uuid, "found": area is not None, "area": area}


# ─── Tool 3: Format grade ────────────────────────────────────────────────────


@mcp.tool(annotations=LOCAL_ONLY)
def format_grade(
    context: str,
    values: dict[str, str],
    disciplines: Optional[dict[str, bool]] = None,
    is_boulder: bool = False,
) -> dict:
    """Display grade of a climb in a grade context.

    Args:
        context: Grade context: 'US', 'FR' or 'AU'.
        values: Recorded grades keyed by scale, e.g. {"yds": "5.10a", "french": "6a"}.
        disciplines: Discipline flags, e.g. {"sport": true}.
        is_boulder: Whether the climb is in a bouldering area.
    """
    grade = Grade(_require_context(context), values, ClimbDisciplineRecord(**(disciplines or {})), is_boulder)
    return {
        "context": context,
        "grade": grade.to_string(),
        "scale": grade.bouldering_scale_name if grade.is_bouldering() else grade.route_scale_name,
    }


# ─── Tool 4: Validate grade ──────────────────────────────────────────────────


@mcp.tool(annotations=LOCAL_ONLY)
def validate_grade(
    context: str,
    grade: str,
    discipline: Optional[str] = None,
    is_boulder: bool = False,
) -> dict:
    """Check a user-entered grade against the scale for a context and discipline.

    Args:
        context: Grade context: 'US', 'FR' or 'AU'.
        grade: Grade as typed, e.g. '5.10a', 'V4', '6b+', '5.10a/b'.
        discipline: 'bouldering', 'sport', 'trad' or 'tr'. Defaults by is_boulder.
        is_boulder: Whether the climb is a boulder problem.
    """
    helper = GradeHelper(_require_context(context), is_boulder)
    error = helper.validate(grade, discipline)
    return {"context": context, "grade": grade, "valid": error is None, "error": error}


# ─── Tool 5: Grade scales ────────────────────────────────────────────────────


@mcp.tool(annotations=LOCAL_ONLY)
def grade_scales() -> dict:
    """Grade scale used for each discipline in each grade context."""
    contexts = {}
    for context, disciplines in GRADE_CONTEXT_TO_GRADE_SCALES.items():
        contexts[context] = {}
        for discipline, scale_id in disciplines.items():
            scale = get_scale(scale_id)
            contexts[context][discipline] = {"id": scale_id, "name": scale.name if scale else None}
    return {"contexts": contexts}


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
