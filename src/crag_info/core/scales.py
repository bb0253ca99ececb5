"""Grade scale resolution.

Formatting and validation only ever ask two things of a scale: its display
name and the score of a user-entered grade. Scales are looked up by
identifier through a small registry so that a full grading library can be
plugged in with ``register_scale``.

The built-in scales are ordered grade tables. A grade scores as its position
in the table; a slash or dash range (``5.10a/b``, ``V3-4``, ``6a/6a+``)
scores as ``[low, high]``; anything else scores ``-1``.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional, Protocol, Union

from .models import GradeScales

logger = logging.getLogger(__name__)

Score = Union[int, list[int]]

# "/" always separates a range; "-" only when another grade follows it ("V3-4", not "5.10-")
_SLASH_RANGE = re.compile(r"\s*/\s*")
_DASH_RANGE = re.compile(r"\s*-\s*(?=\S)")


class GradeScale(Protocol):
    id: str
    name: str

    def get_score(self, grade: str) -> Score: ...


class TableScale:
    """A grade scale backed by an ordered list of grades."""

    def __init__(self, scale_id: str, name: str, grades: list[str], aliases: Optional[dict[str, str]] = None):
        self.id = scale_id
        self.name = name
        self.grades = list(grades)
        self._index = {g.lower(): i for i, g in enumerate(self.grades)}
        for alias, grade in (aliases or {}).items():
            self._index[alias.lower()] = self._index[grade.lower()]

    def __repr__(self) -> str:
        return f"TableScale({self.id!r}, {len(self.grades)} grades)"

    def _lookup(self, grade: str) -> int:
        return self._index.get(grade.strip().lower(), -1)

    def get_score(self, grade: str) -> Score:
        if not isinstance(grade, str) or not grade.strip():
            return -1
        score = self._lookup(grade)
        if score >= 0:
            return score

        separator = _SLASH_RANGE if "/" in grade else _DASH_RANGE
        parts = separator.split(grade.strip(), maxsplit=1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return -1
        first, second = parts
        low = self._lookup(first)
        if low < 0:
            return -1
        high = self._lookup(second)
        if high < 0 and len(second) < len(first):
            # "5.10a/b", "V3-4": the second half only carries the changed suffix
            high = self._lookup(first[: len(first) - len(second)] + second)
        if high < 0:
            return -1
        return sorted([low, high])


def _yds_grades() -> list[str]:
    grades = []
    for n in range(0, 10):
        grades.extend([f"5.{n}-", f"5.{n}", f"5.{n}+"])
    for n in range(10, 16):
        # unlettered and +/- grades sit between the letters they overlap
        grades.extend([f"5.{n}a", f"5.{n}-", f"5.{n}b", f"5.{n}", f"5.{n}c", f"5.{n}+", f"5.{n}d"])
    return grades


def _vscale_grades() -> list[str]:
    grades = ["VB"]
    for n in range(0, 18):
        grades.extend([f"V{n}-", f"V{n}", f"V{n}+"])
    return grades


def _sport_grades(first_number: int) -> list[str]:
    grades = [str(n) for n in range(1, first_number)]
    for n in range(first_number, 6):
        grades.extend([f"{n}a", f"{n}", f"{n}b", f"{n}c", f"{n}+"])
    for n in range(6, 10):
        for letter in "abc":
            grades.extend([f"{n}{letter}", f"{n}{letter}+"])
    return grades


def _font_grades() -> list[str]:
    grades = ["3", "4", "4+", "5", "5+"]
    for n in range(6, 9):
        for letter in "abc":
            grades.extend([f"{n}{letter}", f"{n}{letter}+"])
    grades.append("9a")
    return grades


BUILTIN_SCALES: list[TableScale] = [
    TableScale(GradeScales.YDS.value, "Yosemite Decimal System", _yds_grades()),
    TableScale(
        GradeScales.VSCALE.value,
        "V Scale",
        _vscale_grades(),
        aliases={"V-easy": "VB"},
    ),
    TableScale(GradeScales.FONT.value, "Font", _font_grades()),
    TableScale(GradeScales.FRENCH.value, "French", _sport_grades(4)),
    TableScale(GradeScales.EWBANK.value, "Ewbank", [str(n) for n in range(1, 40)]),
    TableScale(GradeScales.WI.value, "WI", [f"WI{n}" for n in range(1, 9)]),
    TableScale(
        GradeScales.AID.value,
        "Aid",
        [f"A{n}" for n in range(0, 6)],
        aliases={f"C{n}": f"A{n}" for n in range(0, 6)},
    ),
]

_registry: dict[str, GradeScale] = {scale.id: scale for scale in BUILTIN_SCALES}


def _key(scale_id) -> str:
    return scale_id.value if isinstance(scale_id, Enum) else str(scale_id)


def get_scale(scale_id) -> Optional[GradeScale]:
    """Return the scale registered under ``scale_id``, or None."""
    if scale_id is None:
        return None
    return _registry.get(_key(scale_id))


def register_scale(scale: GradeScale) -> None:
    """Install (or replace) the resolver for ``scale.id``."""
    key = _key(scale.id)
    if key in _registry:
        logger.info("Replacing grade scale %s", key)
    _registry[key] = scale


def reset_scales() -> None:
    """Restore the built-in scales."""
    _registry.clear()
    _registry.update({scale.id: scale for scale in BUILTIN_SCALES})
