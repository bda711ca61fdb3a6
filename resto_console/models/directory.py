"""
Directory entries - global phone/company to API key routing for login
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint
from datetime import datetime
from typing import Optional
import uuid

from resto_console.models.base import timestamp_type, utcnow


class DirectoryEntry(SQLModel, table=True):
    """Cross-tenant record mirrored from tenant users, never holds credentials"""

    __tablename__ = "directory_entries"
    __table_args__ = (
        UniqueConstraint("user_phone", "api_key", name="uq_directory_phone_api_key"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_name: str = Field(max_length=255)
    user_email: Optional[str] = Field(default=None, max_length=255)
    user_phone: str = Field(index=True, max_length=50)
    api_key: str = Field(index=True, max_length=64)
    company_id: str = Field(index=True, max_length=32)
    profile_image: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime = Field(default_factory=utcnow, sa_type=timestamp_type())
    updated_at: Optional[datetime] = Field(default=None, sa_type=timestamp_type())
