"""
Settings documents, one per (tenant, type); api_key NULL is the shared layer
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, Index, JSON, UniqueConstraint, text
from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from resto_console.models.base import timestamp_type, utcnow


class SettingsDocument(SQLModel, table=True):
    __tablename__ = "settings_documents"
    __table_args__ = (
        UniqueConstraint("api_key", "type", name="uq_settings_api_key_type"),
        # NULLs never collide in the constraint above, so the shared layer needs its own
        Index(
            "uq_settings_shared_type",
            "type",
            unique=True,
            sqlite_where=text("api_key IS NULL"),
            postgresql_where=text("api_key IS NULL"),
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    api_key: Optional[str] = Field(default=None, index=True, max_length=64)
    type: str = Field(index=True, max_length=50)
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=timestamp_type())
