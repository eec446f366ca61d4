import re
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from services.catalog_service.schemas.common import NonEmptyStr

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class AvailabilitySlot(BaseModel):
    """A weekly availability window. Declarative only, nothing is booked."""

    day: NonEmptyStr
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time_format(cls, value: str) -> str:
        if not _TIME_RE.match(value):
            raise ValueError("time must be HH:MM (24h)")
        return value

    @model_validator(mode="after")
    def check_window(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class UserSummary(BaseModel):
    id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CoachCreate(BaseModel):
    user_id: UUID
    specializations: List[NonEmptyStr] = Field(default_factory=list)
    experience: int = Field(default=0, ge=0)
    availability: List[AvailabilitySlot] = Field(default_factory=list)
    assigned_sessions: int = Field(default=0, ge=0)

    @field_validator("specializations")
    @classmethod
    def dedupe_specializations(cls, value: List[str]) -> List[str]:
        # Set semantics, first occurrence wins the ordering.
        return list(dict.fromkeys(value))


class CoachSummary(BaseModel):
    """Coach as embedded in a program response."""

    id: UUID
    specializations: List[str] = []
    experience: int = 0
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class CoachResponse(CoachSummary):
    user_id: UUID
    availability: List[AvailabilitySlot] = []
    assigned_sessions: int = 0
    assigned_programs: List[UUID] = []
    created_at: datetime
    updated_at: datetime
