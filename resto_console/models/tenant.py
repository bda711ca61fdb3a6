"""
Tenant model - one row per provisioned restaurant instance
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from resto_console.models.base import timestamp_type, utcnow


class TenantStatus(str, Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"


class Tenant(SQLModel, table=True):
    """Tenant record, immutable after provisioning except for status"""

    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    company_name: str = Field(max_length=255, nullable=False)
    company_email: Optional[str] = Field(default=None, max_length=255)
    company_id: str = Field(unique=True, index=True, max_length=32, description="Login-facing company identifier")
    api_key: str = Field(unique=True, index=True, max_length=64, description="Tenant key, always lower-case")

    # Owner
    user_name: str = Field(max_length=255)
    user_email: Optional[str] = Field(default=None, max_length=255)
    user_phone: str = Field(max_length=50)

    subscription: str = Field(default="Free", max_length=50)
    status: TenantStatus = Field(default=TenantStatus.ACTIVE, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=timestamp_type())
