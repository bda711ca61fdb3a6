"""
Pydantic schemas for tenant provisioning
"""

from pydantic import EmailStr, Field, field_validator
from typing import List, Optional

from resto_console.schemas.base import CamelModel, blank_to_none


class InstanceCreate(CamelModel):
    """New tenant request; password is the client-side SHA-1 digest"""
    company_name: str = Field(..., min_length=1, max_length=255)
    company_id: Optional[str] = Field(None, max_length=32)
    company_email: Optional[EmailStr] = None
    user_name: str = Field(..., min_length=1, max_length=255)
    user_email: Optional[EmailStr] = None
    user_phone: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)

    @field_validator("company_id", "company_email", "user_email", mode="before")
    @classmethod
    def _blank_is_missing(cls, value):
        return blank_to_none(value)


class InstanceResponse(CamelModel):
    api_key: str
    company_id: str
    company_name: str
    user_name: str
    user_email: Optional[str] = None
    collections: List[str] = Field(default_factory=list, description="Collections created for the tenant")
