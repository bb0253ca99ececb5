"""Climbing grade and area models.

Grade contexts, scale ids, discipline flags, bulk-form climb rows, and the
flattened result of a near-crags query.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field


class GradeContext(str, Enum):
    """Regional grading context of an area."""

    US = "US"
    FR = "FR"
    AU = "AU"


class GradeScales(str, Enum):
    """Grade scale identifiers."""

    YDS = "yds"
    VSCALE = "vscale"
    FONT = "font"
    FRENCH = "french"
    UIAA = "uiaa"
    EWBANK = "ewbank"
    SAXON = "saxon"
    NORWEGIAN = "norwegian"
    BRAZILIAN_CRUX = "brazilian_crux"
    WI = "wi"
    AI = "ai"
    AID = "aid"


class Discipline(str, Enum):
    """Climbing discipline."""

    SPORT = "sport"
    TRAD = "trad"
    BOULDERING = "bouldering"
    TR = "tr"
    ALPINE = "alpine"
    MIXED = "mixed"
    AID = "aid"
    SNOW = "snow"
    ICE = "ice"
    DEEPWATERSOLO = "deepwatersolo"


class ClimbDisciplineRecord(BaseModel):
    """Which disciplines apply to a climb."""

    sport: bool = False
    trad: bool = False
    bouldering: bool = False
    tr: bool = False
    alpine: bool = False
    mixed: bool = False
    aid: bool = False
    snow: bool = False
    ice: bool = False
    deepwatersolo: bool = False


# Raw grade as recorded for a climb, keyed by scale identifier
GradeValues = dict[str, str]

# Validation-rule descriptor handed to form code, e.g. {"validate": {"is_valid_grade": fn}}
RulesType = dict[str, Any]

GradeValidator = Callable[[Optional[str]], Optional[str]]


class EditableClimb(BaseModel):
    """A climb row in a bulk edit form, with per-field errors recorded by the form."""

    name: str = ""
    grade: Optional[str] = None
    disciplines: ClimbDisciplineRecord = Field(default_factory=ClimbDisciplineRecord)
    errors: Optional[dict[str, Optional[str]]] = None


class CragsDetailsNear(BaseModel):
    """Areas found near a coordinate, flattened from the grouped query result."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    place_id: Optional[str] = None
    error: Optional[str] = None
