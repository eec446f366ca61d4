"""Discovery queries: filter, order and paginate programs.

Filters are predicates. A blank filter means "no constraint"; a value that is
not a member of the field's enum (or a malformed coach id) can never match,
so it yields an empty page rather than an error.
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.db.guards import store_guard
from services.catalog_service.models import (
    CoachingProgram,
    Difficulty,
    ProgramCategory,
    Specialization,
)
from services.catalog_service.services.programs import (
    PROGRAM_LOAD_OPTIONS,
    ensure_coach_exists,
)
from sqlalchemy import false, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ProgramFilters:
    category: Optional[str] = None
    specialization: Optional[str] = None
    difficulty: Optional[str] = None
    coach_id: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ProgramFilters":
        """Build filters from loose request params, ignoring unknown keys."""
        known = {name: params.get(name) for name in cls.__dataclass_fields__}
        return cls(**{k: _blank_to_none(v) for k, v in known.items()})

    def for_coach(self, coach_id: uuid.UUID) -> "ProgramFilters":
        return replace(self, coach_id=str(coach_id))


@dataclass
class ProgramPage(Generic[T]):
    docs: List[T] = field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    current_page: int = 1
    page_size: int = 0


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _enum_condition(column, enum_cls: Type[Enum], raw: str):
    try:
        return column == enum_cls(raw)
    except ValueError:
        return false()


def build_conditions(filters: ProgramFilters) -> list:
    """Translate filters into AND-ed SQL conditions."""
    conditions = []
    if filters.category is not None:
        conditions.append(
            _enum_condition(CoachingProgram.category, ProgramCategory, filters.category)
        )
    if filters.specialization is not None:
        conditions.append(
            _enum_condition(
                CoachingProgram.specialization, Specialization, filters.specialization
            )
        )
    if filters.difficulty is not None:
        conditions.append(
            _enum_condition(CoachingProgram.difficulty, Difficulty, filters.difficulty)
        )
    if filters.coach_id is not None:
        try:
            conditions.append(CoachingProgram.coach_id == uuid.UUID(filters.coach_id))
        except ValueError:
            conditions.append(false())
    return conditions


def resolve_page_size(page_size: Optional[int]) -> int:
    """Apply the configured default and ceiling to a requested page size."""
    settings = get_settings()
    if page_size is None or page_size < 1:
        page_size = settings.CATALOG_DEFAULT_PAGE_SIZE
    return min(page_size, settings.CATALOG_MAX_PAGE_SIZE)


def total_pages_for(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if total_count else 0


@store_guard
async def list_programs(
    db: AsyncSession,
    filters: Optional[ProgramFilters] = None,
    *,
    page: int = 1,
    page_size: Optional[int] = None,
) -> ProgramPage[CoachingProgram]:
    """Return one page of matching programs, newest first (ties broken by id)."""
    filters = filters or ProgramFilters()
    page = max(page, 1)
    page_size = resolve_page_size(page_size)
    conditions = build_conditions(filters)

    count_query = select(func.count()).select_from(CoachingProgram).where(*conditions)
    total_count = (await db.execute(count_query)).scalar_one()

    query = (
        select(CoachingProgram)
        .where(*conditions)
        .options(*PROGRAM_LOAD_OPTIONS)
        .order_by(CoachingProgram.created_at.desc(), CoachingProgram.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .execution_options(populate_existing=True)
    )
    docs = list((await db.execute(query)).scalars().all()) if total_count else []

    logger.debug(
        "Listed programs filters=%s page=%s size=%s total=%s",
        filters,
        page,
        page_size,
        total_count,
    )
    return ProgramPage(
        docs=docs,
        total_count=total_count,
        total_pages=total_pages_for(total_count, page_size),
        current_page=page,
        page_size=page_size,
    )


async def list_programs_by_coach(
    db: AsyncSession,
    coach_id,
    filters: Optional[ProgramFilters] = None,
    *,
    page: int = 1,
    page_size: Optional[int] = None,
) -> ProgramPage[CoachingProgram]:
    """Programs run by one coach. NotFound if the coach itself does not exist."""
    cid = await ensure_coach_exists(db, coach_id)
    filters = (filters or ProgramFilters()).for_coach(cid)
    return await list_programs(db, filters, page=page, page_size=page_size)
