import uuid
from typing import Optional

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """
    Represents the authenticated caller, built from the JWT claims.
    """

    user_id: uuid.UUID = Field(..., alias="sub")
    email: Optional[str] = None
    roles: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def is_admin(self) -> bool:
        return "ADMIN" in self.roles

    def has_any_role(self, *roles: str) -> bool:
        return any(role in self.roles for role in roles)
