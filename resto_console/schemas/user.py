"""
Pydantic schemas for tenant users
"""

from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from resto_console.models.user import TenantUser
from resto_console.schemas.base import CamelModel, blank_to_none


class UserCreate(CamelModel):
    user_name: str = Field(..., min_length=1, max_length=255)
    user_phone: str = Field(..., min_length=1, max_length=50)
    user_role: str = Field(..., min_length=1, max_length=50)
    user_email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, description="Client-side SHA-1 digest")
    profile_image: Optional[str] = None

    @field_validator("user_email", "password", "profile_image", mode="before")
    @classmethod
    def _blank_is_missing(cls, value):
        return blank_to_none(value)


class UserUpdate(CamelModel):
    """Partial update; only fields present in the request are applied"""
    user_name: Optional[str] = Field(None, min_length=1, max_length=255)
    user_phone: Optional[str] = Field(None, min_length=1, max_length=50)
    user_role: Optional[str] = Field(None, min_length=1, max_length=50)
    user_email: Optional[EmailStr] = None
    password: Optional[str] = None
    profile_image: Optional[str] = None

    @field_validator("user_email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        return blank_to_none(value)


class UserRead(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    api_key: str
    user_name: str
    user_phone: str
    user_email: Optional[str] = None
    user_role: str
    profile_image: Optional[str] = None
    is_deleted: bool
    created_date: datetime
    updated_date: Optional[datetime] = None
    deleted_date: Optional[datetime] = None
    re_enabled_date: Optional[datetime] = None
    last_logged_in: Optional[datetime] = None

    @classmethod
    def from_model(cls, user: TenantUser) -> "UserRead":
        return cls(
            id=user.id,
            api_key=user.api_key,
            user_name=user.user_name,
            user_phone=user.user_phone,
            user_email=user.user_email,
            user_role=user.user_role,
            profile_image=user.profile_image,
            is_deleted=user.is_deleted,
            created_date=user.created_date,
            updated_date=user.updated_date,
            deleted_date=user.deleted_date,
            re_enabled_date=user.re_enabled_date,
            last_logged_in=user.last_logged_in,
        )


class UserPage(CamelModel):
    users: List[UserRead]
    total: int
    page: int
    page_size: int
    total_pages: int
