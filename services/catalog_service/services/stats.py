"""Derived per-program metrics. Read-only."""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import ensure_aware, utc_now
from services.catalog_service.models import CoachingProgram
from services.catalog_service.schemas import ProgramStatsResponse
from services.catalog_service.services.programs import IdLike, get_program
from sqlalchemy.ext.asyncio import AsyncSession


def compute_stats(
    program: CoachingProgram, now: Optional[datetime] = None
) -> ProgramStatsResponse:
    now = now or utc_now()
    max_participants = program.max_participants or 0
    enrolled = program.current_enrollments or 0

    remaining = ensure_aware(program.end_date) - ensure_aware(now)

    return ProgramStatsResponse(
        program_id=program.id,
        max_participants=max_participants,
        current_enrollments=enrolled,
        seats_remaining=max_participants - enrolled,
        fill_rate=(enrolled / max_participants) if max_participants else 0.0,
        total_sessions=program.total_sessions,
        material_count=len(program.materials or []),
        days_remaining=max(0, remaining.days),
    )


async def get_program_stats(
    db: AsyncSession, program_id: IdLike, now: Optional[datetime] = None
) -> ProgramStatsResponse:
    program = await get_program(db, program_id)
    return compute_stats(program, now)
