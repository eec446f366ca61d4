"""Program repository: persistence of coaching programs and coaches.

Owns referential integrity between a program and its coach. The coach's
``assigned_programs`` index is the reverse side of ``coach_id``, so creating,
re-assigning or deleting a program keeps it consistent without extra writes.
"""

import uuid
from typing import Any, Mapping, Optional, Union

from libs.common.datetime_utils import ensure_aware
from libs.common.errors import NotFoundError, ValidationFailedError
from libs.common.logging import get_logger
from libs.db.guards import store_guard
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from services.catalog_service.models import Coach, CoachingProgram, UserRef
from services.catalog_service.schemas import CoachCreate, ProgramCreate, ProgramUpdate
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

logger = get_logger(__name__)

IdLike = Union[uuid.UUID, str]

# Eager-load chain for program responses (coach + linked user display fields)
PROGRAM_LOAD_OPTIONS = (selectinload(CoachingProgram.coach).selectinload(Coach.user),)
COACH_LOAD_OPTIONS = (selectinload(Coach.user), selectinload(Coach.programs))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def coerce_id(value: IdLike, label: str = "Program") -> uuid.UUID:
    """Parse an id. A malformed id cannot resolve, so it is a NotFound."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(f"{label} not found")


def parse_payload(schema: type[BaseModel], data: Union[BaseModel, Mapping[str, Any]]):
    """Validate raw input against a schema, reporting failures as ValidationFailedError."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationFailedError(
            f"Invalid {schema.__name__} payload",
            details=exc.errors(include_url=False, include_context=False),
        )


async def _coach_exists(db: AsyncSession, coach_id: uuid.UUID) -> bool:
    result = await db.execute(select(Coach.id).where(Coach.id == coach_id))
    return result.scalar_one_or_none() is not None


async def load_program(
    db: AsyncSession, program_id: uuid.UUID, *, for_update: bool = False
) -> Optional[CoachingProgram]:
    query = (
        select(CoachingProgram)
        .where(CoachingProgram.id == program_id)
        .options(*PROGRAM_LOAD_OPTIONS)
        .execution_options(populate_existing=True)
    )
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Programs
# ---------------------------------------------------------------------------


@store_guard
async def create_program(
    db: AsyncSession, data: Union[ProgramCreate, Mapping[str, Any]]
) -> CoachingProgram:
    """Insert a program with zero enrollments and no materials."""
    program_in = parse_payload(ProgramCreate, data)

    if not await _coach_exists(db, program_in.coach_id):
        raise ValidationFailedError(
            "coach_id does not reference an existing coach",
            details={"coach_id": str(program_in.coach_id)},
        )

    program = CoachingProgram(
        **program_in.model_dump(), current_enrollments=0, materials=[]
    )
    db.add(program)
    await db.commit()

    logger.info(
        "Created coaching program %s for coach %s", program.id, program.coach_id
    )
    return await load_program(db, program.id)


@store_guard
async def get_program(db: AsyncSession, program_id: IdLike) -> CoachingProgram:
    program = await load_program(db, coerce_id(program_id))
    if not program:
        raise NotFoundError("Program not found")
    return program


@store_guard
async def update_program(
    db: AsyncSession,
    program_id: IdLike,
    changes: Union[ProgramUpdate, Mapping[str, Any]],
) -> CoachingProgram:
    """Merge a partial update and revalidate the schedule and capacity invariants.

    On any violation nothing is written.
    """
    pid = coerce_id(program_id)
    update_in = parse_payload(ProgramUpdate, changes)
    update_data = update_in.model_dump(exclude_unset=True)

    program = await load_program(db, pid, for_update=True)
    if not program:
        raise NotFoundError("Program not found")

    start = ensure_aware(update_data.get("start_date", program.start_date))
    end = ensure_aware(update_data.get("end_date", program.end_date))
    if end <= start:
        await db.rollback()
        raise ValidationFailedError("end_date must be after start_date")

    new_coach_id = update_data.get("coach_id")
    if new_coach_id is not None and new_coach_id != program.coach_id:
        if not await _coach_exists(db, new_coach_id):
            await db.rollback()
            raise ValidationFailedError(
                "coach_id does not reference an existing coach",
                details={"coach_id": str(new_coach_id)},
            )

    new_max = update_data.pop("max_participants", None)
    if new_max is not None and new_max != program.max_participants:
        # Conditional write so a seat reserved after our read still counts.
        result = await db.execute(
            update(CoachingProgram)
            .where(
                CoachingProgram.id == pid,
                CoachingProgram.current_enrollments <= new_max,
            )
            .values(max_participants=new_max)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # Read before rollback; rollback expires the loaded program
            details = {
                "max_participants": new_max,
                "current_enrollments": program.current_enrollments,
            }
            await db.rollback()
            raise ValidationFailedError(
                "max_participants cannot be lower than current enrollments",
                details=details,
            )
        set_committed_value(program, "max_participants", new_max)

    for field, value in update_data.items():
        setattr(program, field, value)

    await db.commit()
    logger.info("Updated coaching program %s", pid)
    return await load_program(db, pid)


@store_guard
async def delete_program(db: AsyncSession, program_id: IdLike) -> uuid.UUID:
    pid = coerce_id(program_id)
    program = await load_program(db, pid)
    if not program:
        raise NotFoundError("Program not found")

    coach_id = program.coach_id
    await db.delete(program)
    await db.commit()

    logger.info("Deleted coaching program %s (coach %s)", pid, coach_id)
    return pid


# ---------------------------------------------------------------------------
# Coaches
# ---------------------------------------------------------------------------


@store_guard
async def create_coach(
    db: AsyncSession, data: Union[CoachCreate, Mapping[str, Any]]
) -> Coach:
    coach_in = parse_payload(CoachCreate, data)

    user = await db.execute(select(UserRef.id).where(UserRef.id == coach_in.user_id))
    if user.scalar_one_or_none() is None:
        raise NotFoundError("User not found")

    coach = Coach(
        user_id=coach_in.user_id,
        specializations=coach_in.specializations,
        experience=coach_in.experience,
        availability=[slot.model_dump() for slot in coach_in.availability],
        assigned_sessions=coach_in.assigned_sessions,
    )
    db.add(coach)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationFailedError("A coach profile already exists for this user")

    logger.info("Created coach %s for user %s", coach.id, coach.user_id)
    return await get_coach(db, coach.id)


@store_guard
async def get_coach(db: AsyncSession, coach_id: IdLike) -> Coach:
    query = (
        select(Coach)
        .where(Coach.id == coerce_id(coach_id, "Coach"))
        .options(*COACH_LOAD_OPTIONS)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    coach = result.scalar_one_or_none()
    if not coach:
        raise NotFoundError("Coach not found")
    return coach


@store_guard
async def ensure_coach_exists(db: AsyncSession, coach_id: IdLike) -> uuid.UUID:
    cid = coerce_id(coach_id, "Coach")
    if not await _coach_exists(db, cid):
        raise NotFoundError("Coach not found")
    return cid
