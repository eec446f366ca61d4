"""Catalog service models."""

from services.catalog_service.models.coach import Coach, UserRef
from services.catalog_service.models.enums import (
    Difficulty,
    MaterialType,
    ProgramCategory,
    Specialization,
    enum_values,
)
from services.catalog_service.models.program import CoachingProgram

__all__ = [
    "Coach",
    "CoachingProgram",
    "Difficulty",
    "MaterialType",
    "ProgramCategory",
    "Specialization",
    "UserRef",
    "enum_values",
]
