"""Auth Schemas for the local bills API"""

from pydantic import BaseModel, Field

from billed.models.enums import UserRole


class LoginRequest(BaseModel):
    email: str
    password: str


class UserCreate(BaseModel):
    """Registration body, as the login form sends it"""
    type: UserRole = UserRole.EMPLOYEE
    name: str = ""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    type: UserRole
    name: str
    email: str
