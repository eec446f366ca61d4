import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from .program import CoachingProgram

# ============================================================================
# REFERENCE MODELS
# ============================================================================


class UserRef(Base):
    """Read-only view of the identity service's users table."""

    __tablename__ = "users"
    __table_args__ = {"extend_existing": True, "info": {"skip_autogenerate": True}}

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    first_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)


# ============================================================================
# COACH MODELS
# ============================================================================


class Coach(Base):
    """Coach profile. Owns no programs; ``programs`` is the reverse of
    ``CoachingProgram.coach_id``."""

    __tablename__ = "coaches"
    __table_args__ = (
        CheckConstraint("experience >= 0", name="ck_coaches_experience_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False
    )

    specializations: Mapped[list] = mapped_column(JSON, default=list)
    experience: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    # [{"day": "monday", "start_time": "09:00", "end_time": "11:00"}, ...]
    availability: Mapped[list] = mapped_column(JSON, default=list)
    assigned_sessions: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    user = relationship("UserRef")
    programs: Mapped[list["CoachingProgram"]] = relationship(
        "CoachingProgram", back_populates="coach", order_by="CoachingProgram.created_at"
    )

    @property
    def assigned_programs(self) -> list[uuid.UUID]:
        """Ids of the programs this coach runs. Requires ``programs`` loaded."""
        return [program.id for program in self.programs]

    def __repr__(self):
        return f"<Coach {self.id}>"
