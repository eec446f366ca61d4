import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.catalog_service.models.enums import (
    Difficulty,
    ProgramCategory,
    Specialization,
    enum_values,
)
from sqlalchemy import JSON, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from .coach import Coach


class CoachingProgram(Base):
    __tablename__ = "coaching_programs"
    __table_args__ = (
        CheckConstraint(
            "current_enrollments >= 0 AND current_enrollments <= max_participants",
            name="ck_coaching_programs_enrollments_within_capacity",
        ),
        CheckConstraint(
            "max_participants > 0", name="ck_coaching_programs_max_participants_positive"
        ),
        CheckConstraint(
            "total_sessions >= 0", name="ck_coaching_programs_total_sessions_non_negative"
        ),
        CheckConstraint("price >= 0", name="ck_coaching_programs_price_non_negative"),
        CheckConstraint(
            "end_date > start_date", name="ck_coaching_programs_end_after_start"
        ),
        Index("ix_coaching_programs_created_at_id", "created_at", "id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    category: Mapped[ProgramCategory] = mapped_column(
        SAEnum(
            ProgramCategory,
            name="program_category_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )
    specialization: Mapped[Specialization] = mapped_column(
        SAEnum(
            Specialization,
            name="program_specialization_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )
    difficulty: Mapped[Difficulty] = mapped_column(
        SAEnum(
            Difficulty,
            name="program_difficulty_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )

    coach_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("coaches.id"), nullable=False, index=True
    )

    # Schedule
    duration: Mapped[dict] = mapped_column(JSON, nullable=False)  # {weeks, sessions_per_week}
    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Capacity
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    current_enrollments: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )

    # Pricing (currency-agnostic)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)

    # Content
    benefits: Mapped[list] = mapped_column(JSON, default=list)
    requirements: Mapped[list] = mapped_column(JSON, default=list)
    materials: Mapped[list] = mapped_column(JSON, default=list)  # insertion order

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    coach: Mapped["Coach"] = relationship("Coach", back_populates="programs")

    def __repr__(self):
        return f"<CoachingProgram {self.title}>"
