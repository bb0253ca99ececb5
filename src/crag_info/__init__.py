"""Crag Info — climbing grade helpers and OpenBeta area queries.

Grade formatting and validation per regional grade context, plus thin
query functions for areas near a coordinate and cached area reads.
"""

__version__ = "0.1.0"

from .core.api import get_area_by_uuid, get_crag_details_near
from .core.grades import Grade, GradeHelper

__all__ = ["Grade", "GradeHelper", "get_area_by_uuid", "get_crag_details_near"]
