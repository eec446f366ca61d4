"""Seat accounting for coaching programs.

Each operation is one conditional UPDATE evaluated by the database, so the
check and the increment cannot interleave with another caller's, on this
process or any other. There is no in-process lock and no retry.
"""

import uuid
from dataclasses import dataclass

from libs.common.errors import CapacityExceededError, NotFoundError
from libs.common.logging import get_logger
from libs.db.guards import store_guard
from services.catalog_service.models import CoachingProgram
from services.catalog_service.services.programs import IdLike, coerce_id
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class SeatStatus:
    program_id: uuid.UUID
    current_enrollments: int
    max_participants: int

    @property
    def seats_remaining(self) -> int:
        return self.max_participants - self.current_enrollments


async def _program_exists(db: AsyncSession, program_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(CoachingProgram.id).where(CoachingProgram.id == program_id)
    )
    return result.scalar_one_or_none() is not None


@store_guard
async def reserve_seat(db: AsyncSession, program_id: IdLike) -> SeatStatus:
    """Take one seat, or raise CapacityExceededError without writing anything."""
    pid = coerce_id(program_id)
    result = await db.execute(
        update(CoachingProgram)
        .where(
            CoachingProgram.id == pid,
            CoachingProgram.current_enrollments < CoachingProgram.max_participants,
        )
        .values(current_enrollments=CoachingProgram.current_enrollments + 1)
        .returning(CoachingProgram.current_enrollments, CoachingProgram.max_participants)
        .execution_options(synchronize_session=False)
    )
    row = result.first()

    if row is None:
        exists = await _program_exists(db, pid)
        await db.rollback()
        if not exists:
            raise NotFoundError("Program not found")
        logger.info("Seat reservation rejected for program %s: full", pid)
        raise CapacityExceededError(
            "Program is full", details={"program_id": str(pid)}
        )

    await db.commit()
    status = SeatStatus(pid, row.current_enrollments, row.max_participants)
    logger.info(
        "Reserved seat on program %s (%s/%s)",
        pid,
        status.current_enrollments,
        status.max_participants,
    )
    return status


@store_guard
async def release_seat(db: AsyncSession, program_id: IdLike) -> SeatStatus:
    """Give one seat back. Releasing on an empty program is a no-op (floor 0)."""
    pid = coerce_id(program_id)
    result = await db.execute(
        update(CoachingProgram)
        .where(
            CoachingProgram.id == pid,
            CoachingProgram.current_enrollments > 0,
        )
        .values(current_enrollments=CoachingProgram.current_enrollments - 1)
        .returning(CoachingProgram.current_enrollments, CoachingProgram.max_participants)
        .execution_options(synchronize_session=False)
    )
    row = result.first()

    if row is None:
        current = await db.execute(
            select(
                CoachingProgram.current_enrollments, CoachingProgram.max_participants
            ).where(CoachingProgram.id == pid)
        )
        row = current.first()
        await db.rollback()
        if row is None:
            raise NotFoundError("Program not found")
        return SeatStatus(pid, row.current_enrollments, row.max_participants)

    await db.commit()
    logger.info(
        "Released seat on program %s (%s/%s)",
        pid,
        row.current_enrollments,
        row.max_participants,
    )
    return SeatStatus(pid, row.current_enrollments, row.max_participants)
