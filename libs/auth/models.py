from typing import Optional

from pydantic import BaseModel, EmailStr, Field

COACH_ROLES = frozenset({"coach", "admin", "service_role"})
ADMIN_ROLES = frozenset({"admin", "service_role"})


class AuthUser(BaseModel):
    """
    Represents an authenticated caller, decoded from a bearer token.
    """

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"

    model_config = {"populate_by_name": True}

    @property
    def is_coach(self) -> bool:
        return self.role in COACH_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
