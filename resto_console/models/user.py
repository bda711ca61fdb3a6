"""
Tenant user model with soft delete
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Index, text
from datetime import datetime
from typing import Optional
import uuid

from resto_console.models.base import timestamp_type, utcnow


class TenantUser(SQLModel, table=True):
    """Staff member of one tenant"""

    __tablename__ = "tenant_users"
    __table_args__ = (
        # One active user per phone number inside a tenant
        Index(
            "uq_tenant_users_active_phone",
            "api_key",
            "user_phone",
            unique=True,
            sqlite_where=text("NOT is_deleted"),
            postgresql_where=text("NOT is_deleted"),
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    api_key: str = Field(index=True, max_length=64, description="Tenant key for multi-tenant isolation")

    # Profile
    user_name: str = Field(max_length=255, nullable=False)
    user_phone: str = Field(max_length=50, nullable=False)
    user_email: Optional[str] = Field(default=None, max_length=255)
    user_role: str = Field(index=True, max_length=50)
    profile_image: Optional[str] = Field(default=None, max_length=1000)

    # Authentication
    password_hash: Optional[str] = Field(default=None)
    last_logged_in: Optional[datetime] = Field(default=None, sa_type=timestamp_type())

    # Soft delete
    is_deleted: bool = Field(default=False, index=True)
    deleted_date: Optional[datetime] = Field(default=None, sa_type=timestamp_type())
    re_enabled_date: Optional[datetime] = Field(default=None, sa_type=timestamp_type())

    # Timestamps
    created_date: datetime = Field(default_factory=utcnow, sa_type=timestamp_type(), index=True)
    updated_date: Optional[datetime] = Field(default=None, sa_type=timestamp_type())
