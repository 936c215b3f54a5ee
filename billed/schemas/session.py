"""Session Record Schema"""

from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from billed.models.enums import UserRole


class SessionRecord(BaseModel):
    """
    Signed-in user identity kept in the session store under "user".

    The role is read from "type" (what the login form writes) or "role".
    Only known roles validate; anything else is "not authenticated".
    """
    role: UserRole = Field(
        validation_alias=AliasChoices("type", "role"),
        serialization_alias="type",
    )
    email: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
