from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from libs.auth.dependencies import require_coach
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.catalog_service.schemas import (
    ApiResponse,
    DeleteConfirmation,
    MaterialCreate,
    Page,
    ProgramCreate,
    ProgramResponse,
    ProgramStatsResponse,
    ProgramUpdate,
)
from services.catalog_service.services import materials, programs, query, stats
from services.catalog_service.services.query import ProgramFilters, ProgramPage
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["programs"])
logger = get_logger(__name__)


def _page_response(page: ProgramPage) -> ApiResponse[Page[ProgramResponse]]:
    return ApiResponse(
        data=Page[ProgramResponse](
            docs=[ProgramResponse.model_validate(p) for p in page.docs],
            total_count=page.total_count,
            total_pages=page.total_pages,
            current_page=page.current_page,
            page_size=page.page_size,
        )
    )


def _program_response(program) -> ApiResponse[ProgramResponse]:
    return ApiResponse(data=ProgramResponse.model_validate(program))


def _filters(request: Request) -> ProgramFilters:
    # Read raw query params so unrecognized enum values reach the engine
    # (where they match nothing) instead of failing request validation.
    return ProgramFilters.from_params(request.query_params)


# --- Discovery (public) ---


@router.get("/programs", response_model=ApiResponse[Page[ProgramResponse]])
async def list_programs(
    filters: ProgramFilters = Depends(_filters),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Alias for page_size"),
    db: AsyncSession = Depends(get_async_db),
):
    """List programs. Filters: category, specialization, difficulty, coach_id."""
    result = await query.list_programs(
        db, filters, page=page, page_size=page_size or limit
    )
    return _page_response(result)


@router.get(
    "/programs/coach/{coach_id}",
    response_model=ApiResponse[Page[ProgramResponse]],
)
async def list_programs_by_coach(
    coach_id: str,
    filters: ProgramFilters = Depends(_filters),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Alias for page_size"),
    db: AsyncSession = Depends(get_async_db),
):
    result = await query.list_programs_by_coach(
        db, coach_id, filters, page=page, page_size=page_size or limit
    )
    return _page_response(result)


@router.get("/programs/{program_id}", response_model=ApiResponse[ProgramResponse])
async def get_program(
    program_id: str,
    db: AsyncSession = Depends(get_async_db),
):
    return _program_response(await programs.get_program(db, program_id))


@router.get(
    "/programs/{program_id}/stats",
    response_model=ApiResponse[ProgramStatsResponse],
)
async def get_program_stats(
    program_id: str,
    db: AsyncSession = Depends(get_async_db),
):
    return ApiResponse(data=await stats.get_program_stats(db, program_id))


# --- Authoring (coach/admin) ---


@router.post(
    "/programs",
    response_model=ApiResponse[ProgramResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_program(
    program_in: ProgramCreate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    program = await programs.create_program(db, program_in)
    logger.info("Program %s created by %s", program.id, current_user.user_id)
    return _program_response(program)


@router.put("/programs/{program_id}", response_model=ApiResponse[ProgramResponse])
async def update_program(
    program_id: str,
    program_in: ProgramUpdate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    program = await programs.update_program(db, program_id, program_in)
    return _program_response(program)


@router.delete(
    "/programs/{program_id}", response_model=ApiResponse[DeleteConfirmation]
)
async def delete_program(
    program_id: str,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    deleted_id = await programs.delete_program(db, program_id)
    logger.info("Program %s deleted by %s", deleted_id, current_user.user_id)
    return ApiResponse(data=DeleteConfirmation(id=str(deleted_id)))


@router.post(
    "/programs/{program_id}/materials",
    response_model=ApiResponse[ProgramResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_material(
    program_id: str,
    material_in: MaterialCreate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    program = await materials.add_material(db, program_id, material_in)
    return _program_response(program)
