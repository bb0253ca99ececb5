"""Grade formatting and validation for climbs.

An area's grade context (US, FR, AU) and a climb's disciplines decide which
scale a stored grade is read from. Scoring is left to ``scales.get_scale``;
this module only picks the scale and interprets the score.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from .models import (
    ClimbDisciplineRecord,
    EditableClimb,
    GradeContext,
    GradeScales,
    GradeValidator,
    GradeValues,
    RulesType,
)
from .scales import get_scale

logger = logging.getLogger(__name__)

INVALID_GRADE = "Invalid grade"
MISSING_GRADE = "Missing grade"
FORMAT_ERROR = "Format error"

_CONTEXT_TABLE = {
    GradeContext.US: {
        "trad": GradeScales.YDS,
        "sport": GradeScales.YDS,
        "bouldering": GradeScales.VSCALE,
        "tr": GradeScales.YDS,
        "alpine": GradeScales.YDS,
        "mixed": GradeScales.YDS,
        "aid": GradeScales.YDS,
        "snow": GradeScales.YDS,
        "ice": GradeScales.YDS,
    },
    GradeContext.FR: {
        "trad": GradeScales.FRENCH,
        "sport": GradeScales.FRENCH,
        "bouldering": GradeScales.FONT,
        "tr": GradeScales.FRENCH,
        "alpine": GradeScales.FRENCH,
        "mixed": GradeScales.FRENCH,
        "aid": GradeScales.FRENCH,
        "snow": GradeScales.FRENCH,
        "ice": GradeScales.FRENCH,
    },
    GradeContext.AU: {
        "trad": GradeScales.EWBANK,
        "sport": GradeScales.EWBANK,
        "bouldering": GradeScales.VSCALE,
        "tr": GradeScales.EWBANK,
        "deepwatersolo": GradeScales.EWBANK,
        "alpine": GradeScales.YDS,
        "mixed": GradeScales.YDS,
        "aid": GradeScales.AID,
        "snow": GradeScales.YDS,
        "ice": GradeScales.WI,
    },
}

# region -> discipline -> scale id, read-only
GRADE_CONTEXT_TO_GRADE_SCALES: Mapping[str, Mapping[str, str]] = MappingProxyType({
    context.value: MappingProxyType({d: scale.value for d, scale in disciplines.items()})
    for context, disciplines in _CONTEXT_TABLE.items()
})


def _as_key(value) -> Optional[str]:
    if value is None:
        return None
    return value.value if isinstance(value, Enum) else str(value)


def get_grade_scales(context) -> Optional[Mapping[str, str]]:
    """Discipline -> scale id table for a region, or None for an unknown region."""
    return GRADE_CONTEXT_TO_GRADE_SCALES.get(_as_key(context))


def get_grade_scale(context, discipline) -> Optional[str]:
    """Scale id for a (region, discipline) pair, or None when the pair is not mapped."""
    scales = get_grade_scales(context)
    if scales is None:
        return None
    return scales.get(_as_key(discipline))


def score_is_valid(scale_id: Optional[str], user_input: str) -> bool:
    """A grade is valid when the scale scores it as a range or a non-negative number."""
    scale = get_scale(scale_id)
    score = scale.get_score(user_input) if scale is not None else -1
    if isinstance(score, list):
        return True
    return score is not None and score >= 0


def _grade_validator(scale_id: Optional[str], empty_result: Optional[str]) -> GradeValidator:
    def is_valid_grade(user_input: Optional[str]) -> Optional[str]:
        if user_input is None or user_input == "":
            return empty_result
        return None if score_is_valid(scale_id, user_input) else INVALID_GRADE

    return is_valid_grade


class Grade:
    """A climb's grade as seen from one regional grade context."""

    def __init__(
        self,
        grade_context: Union[GradeContext, str, None],
        values: Optional[GradeValues],
        disciplines: Union[ClimbDisciplineRecord, Mapping[str, bool], None],
        is_boulder: bool = False,
    ):
        if grade_context is None:
            raise ValueError("Missing grade context")
        self.context = grade_context
        self.values = dict(values or {})
        if isinstance(disciplines, ClimbDisciplineRecord):
            disciplines = disciplines.model_dump()
        self.disciplines = dict(disciplines or {})
        self.is_boulder = bool(is_boulder)
        self.gradescales = get_grade_scales(grade_context)
        if self.gradescales is None:
            logger.debug("No grade scales for context %r", grade_context)

    def __repr__(self) -> str:
        return f"Grade({_as_key(self.context)!r}, {self.values!r})"

    def _scale_for(self, discipline: str) -> Optional[str]:
        if self.gradescales is None:
            return None
        return self.gradescales.get(discipline)

    def to_string(self) -> Optional[str]:
        """The grade to display, or None when no value exists for the climb's scale."""
        if self.is_bouldering():
            return self.to_string_bouldering()
        if self.is_trad_sport_tr():
            return self.to_string_trad_sport_aid()
        return None

    def __str__(self) -> str:
        return self.to_string() or ""

    def is_bouldering(self) -> bool:
        return self.is_boulder or bool(self.disciplines.get("bouldering", False))

    def is_trad_sport_tr(self) -> bool:
        return any(bool(self.disciplines.get(d, False)) for d in ("sport", "trad", "tr", "aid"))

    def to_string_bouldering(self) -> Optional[str]:
        key = self._scale_for("bouldering")
        if key is None:
            return None
        return self.values.get(key)

    def to_string_trad_sport_aid(self) -> Optional[str]:
        key = self._scale_for("sport")
        if key is None:
            return None
        return self.values.get(key)

    @property
    def bouldering_scale_name(self) -> str:
        scale = get_scale(self._scale_for("bouldering"))
        return scale.name if scale is not None else ""

    @property
    def route_scale_name(self) -> str:
        scale = get_scale(self._scale_for("sport"))
        return scale.name.upper() if scale is not None else ""

    @property
    def bouldering_validation_rules(self) -> RulesType:
        return {"validate": {"is_valid_grade": _grade_validator(self._scale_for("bouldering"), None)}}

    def get_sport_trad_validation_rules(self, discipline: str = "trad") -> RulesType:
        """Rules for a route grade field. A blank grade is allowed (e.g. route under development)."""
        return {"validate": {"is_valid_grade": _grade_validator(self._scale_for(_as_key(discipline)), None)}}


class GradeHelper:
    """Grade validation for climb entry forms within one grade context."""

    def __init__(self, grade_context: Union[GradeContext, str, None], is_boulder: bool = False):
        self.grade_scales = get_grade_scales(grade_context)
        self.is_boulder = bool(is_boulder)

    def get_bulk_validation_rules(self) -> RulesType:
        def validate(entries: Iterable[Union[EditableClimb, Mapping]]) -> Optional[str]:
            for entry in entries:
                # rows are checked by their recorded errors only
                errors = entry.get("errors") if isinstance(entry, Mapping) else entry.errors
                if any(v is not None for v in (errors or {}).values()):
                    return FORMAT_ERROR
            return None

        return {"validate": validate}

    def _discipline_scale(self, discipline: Optional[str]) -> Optional[str]:
        if self.grade_scales is None:
            return None
        if discipline is None:
            discipline = "bouldering" if self.is_boulder else "trad"
        return self.grade_scales.get(_as_key(discipline))

    def get_validation_rules(self, discipline: Optional[str] = None) -> RulesType:
        """Rules for a new climb's grade field, where a grade is required."""
        return {"validate": {"is_valid_grade": _grade_validator(self._discipline_scale(discipline), MISSING_GRADE)}}

    def validate(self, grade_str: Optional[str], discipline: Optional[str] = None) -> Optional[str]:
        rules = self.get_validation_rules(discipline).get("validate")
        if rules is None:
            return None
        error = rules["is_valid_grade"](grade_str)
        return None if error is None else INVALID_GRADE
