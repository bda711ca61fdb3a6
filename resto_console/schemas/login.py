"""
Pydantic schemas for the two-phase login
"""

from pydantic import AliasChoices, Field
from typing import Optional
import uuid

from resto_console.schemas.base import CamelModel


class LoginCheck(CamelModel):
    """Phase 1: who is this phone at this company"""
    user_phone: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("userPhone", "phone", "user_phone"),
    )
    company_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("companyId", "company_id"),
    )


class LoginComplete(LoginCheck):
    """Phase 2: password is the client-side SHA-1 digest"""
    password: str = Field(..., min_length=1)


class LoginIdentity(CamelModel):
    user_name: str
    user_email: Optional[str] = None
    api_key: str
    company_id: str


class UserProfile(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    user_name: str
    user_email: Optional[str] = None
    user_phone: str
    user_role: str
    profile_image: Optional[str] = None
    api_key: str
    company_id: str


class LoginResult(CamelModel):
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Seconds until the token expires")
    user_data: UserProfile
