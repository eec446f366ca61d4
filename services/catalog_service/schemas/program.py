from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from services.catalog_service.models import (
    Difficulty,
    MaterialType,
    ProgramCategory,
    Specialization,
)
from services.catalog_service.schemas.coach import CoachSummary
from services.catalog_service.schemas.common import NonEmptyStr


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# --- Value objects ---


class Duration(BaseModel):
    weeks: int = Field(gt=0)
    sessions_per_week: int = Field(gt=0)


class MaterialCreate(BaseModel):
    title: NonEmptyStr
    type: MaterialType
    description: Optional[str] = None
    url: Optional[str] = None


class MaterialResponse(BaseModel):
    title: str
    type: MaterialType
    description: Optional[str] = None
    url: Optional[str] = None


# --- Program Schemas ---


class ProgramBase(BaseModel):
    title: NonEmptyStr
    description: NonEmptyStr
    category: ProgramCategory
    specialization: Specialization
    difficulty: Difficulty
    coach_id: UUID
    duration: Duration
    max_participants: int = Field(gt=0)
    price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    start_date: datetime
    end_date: datetime
    benefits: List[NonEmptyStr] = Field(default_factory=list)
    requirements: List[NonEmptyStr] = Field(default_factory=list)


class ProgramCreate(ProgramBase):
    # Defaults to weeks * sessions_per_week when omitted
    total_sessions: Optional[int] = Field(default=None, ge=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        return _to_utc(value)

    @model_validator(mode="after")
    def check_schedule(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        if self.total_sessions is None:
            self.total_sessions = self.duration.weeks * self.duration.sessions_per_week
        return self


class ProgramUpdate(BaseModel):
    """Partial update. Enrollment counters and materials are not editable here."""

    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    category: Optional[ProgramCategory] = None
    specialization: Optional[Specialization] = None
    difficulty: Optional[Difficulty] = None
    coach_id: Optional[UUID] = None
    duration: Optional[Duration] = None
    total_sessions: Optional[int] = Field(default=None, ge=0)
    max_participants: Optional[int] = Field(default=None, gt=0)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    benefits: Optional[List[NonEmptyStr]] = None
    requirements: Optional[List[NonEmptyStr]] = None

    @field_validator(
        "title",
        "description",
        "category",
        "specialization",
        "difficulty",
        "coach_id",
        "duration",
        "total_sessions",
        "max_participants",
        "price",
        "start_date",
        "end_date",
        "benefits",
        "requirements",
        mode="before",
    )
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("field may be omitted but not set to null")
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        return _to_utc(value)


class ProgramResponse(BaseModel):
    id: UUID
    title: str
    description: str
    category: ProgramCategory
    specialization: Specialization
    difficulty: Difficulty
    coach_id: UUID
    coach: Optional[CoachSummary] = None
    duration: Duration
    total_sessions: int
    max_participants: int
    current_enrollments: int
    price: Decimal
    start_date: datetime
    end_date: datetime
    benefits: List[str] = []
    requirements: List[str] = []
    materials: List[MaterialResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Stats & Seats ---


class ProgramStatsResponse(BaseModel):
    program_id: UUID
    max_participants: int
    current_enrollments: int
    seats_remaining: int
    fill_rate: float
    total_sessions: int
    material_count: int
    days_remaining: int


class SeatStatusResponse(BaseModel):
    program_id: UUID
    current_enrollments: int
    max_participants: int
    seats_remaining: int
