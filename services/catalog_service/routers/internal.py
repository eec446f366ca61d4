from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_service_role
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.catalog_service.schemas import ApiResponse, SeatStatusResponse
from services.catalog_service.services import capacity
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["internal"])


# --- Internal Service-to-Service Endpoints ---


def _seat_response(seat: capacity.SeatStatus) -> ApiResponse[SeatStatusResponse]:
    return ApiResponse(
        data=SeatStatusResponse(
            program_id=seat.program_id,
            current_enrollments=seat.current_enrollments,
            max_participants=seat.max_participants,
            seats_remaining=seat.seats_remaining,
        )
    )


@router.post(
    "/internal/programs/{program_id}/seats/reserve",
    response_model=ApiResponse[SeatStatusResponse],
)
async def reserve_seat(
    program_id: str,
    _: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    """Called by the enrollment flow before it takes payment.

    409 capacity_exceeded when the program is full.
    """
    return _seat_response(await capacity.reserve_seat(db, program_id))


@router.post(
    "/internal/programs/{program_id}/seats/release",
    response_model=ApiResponse[SeatStatusResponse],
)
async def release_seat(
    program_id: str,
    _: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    """Called when an enrollment is cancelled or its payment fails."""
    return _seat_response(await capacity.release_seat(db, program_id))
