"""Catalog service schemas."""

from services.catalog_service.schemas.coach import (
    AvailabilitySlot,
    CoachCreate,
    CoachResponse,
    CoachSummary,
    UserSummary,
)
from services.catalog_service.schemas.common import (
    ApiResponse,
    DeleteConfirmation,
    NonEmptyStr,
    Page,
)
from services.catalog_service.schemas.program import (
    Duration,
    MaterialCreate,
    MaterialResponse,
    ProgramCreate,
    ProgramResponse,
    ProgramStatsResponse,
    ProgramUpdate,
    SeatStatusResponse,
)

__all__ = [
    "ApiResponse",
    "AvailabilitySlot",
    "CoachCreate",
    "CoachResponse",
    "CoachSummary",
    "DeleteConfirmation",
    "Duration",
    "MaterialCreate",
    "MaterialResponse",
    "NonEmptyStr",
    "Page",
    "ProgramCreate",
    "ProgramResponse",
    "ProgramStatsResponse",
    "ProgramUpdate",
    "SeatStatusResponse",
    "UserSummary",
]
