"""Material metadata attached to a program. Binaries live elsewhere."""

from typing import Any, Mapping, Union

from libs.common.datetime_utils import utc_now
from libs.common.errors import NotFoundError
from libs.common.logging import get_logger
from libs.db.guards import store_guard
from services.catalog_service.models import CoachingProgram
from services.catalog_service.schemas import MaterialCreate
from services.catalog_service.services.programs import (
    IdLike,
    coerce_id,
    load_program,
    parse_payload,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

logger = get_logger(__name__)


@store_guard
async def add_material(
    db: AsyncSession,
    program_id: IdLike,
    material: Union[MaterialCreate, Mapping[str, Any]],
) -> CoachingProgram:
    """Append a material; insertion order is display order."""
    pid = coerce_id(program_id)
    material_in = parse_payload(MaterialCreate, material)

    program = await load_program(db, pid, for_update=True)
    if not program:
        raise NotFoundError("Program not found")

    program.materials = [*(program.materials or []), material_in.model_dump(mode="json")]
    flag_modified(program, "materials")
    program.updated_at = utc_now()
    await db.commit()

    logger.info(
        "Added %s material '%s' to program %s",
        material_in.type.value,
        material_in.title,
        pid,
    )
    return await load_program(db, pid)
