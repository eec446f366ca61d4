from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.catalog_service.schemas import ApiResponse, CoachCreate, CoachResponse
from services.catalog_service.services import programs
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["coaches"])


@router.post(
    "/coaches",
    response_model=ApiResponse[CoachResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_coach(
    coach_in: CoachCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a coach profile for an existing user."""
    coach = await programs.create_coach(db, coach_in)
    return ApiResponse(data=CoachResponse.model_validate(coach))


@router.get("/coaches/{coach_id}", response_model=ApiResponse[CoachResponse])
async def get_coach(
    coach_id: str,
    db: AsyncSession = Depends(get_async_db),
):
    coach = await programs.get_coach(db, coach_id)
    return ApiResponse(data=CoachResponse.model_validate(coach))
