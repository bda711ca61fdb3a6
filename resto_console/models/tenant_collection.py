"""
Registry of the logical collections provisioned for each tenant
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint
from datetime import datetime
import uuid

from resto_console.models.base import timestamp_type, utcnow


class TenantCollection(SQLModel, table=True):
    __tablename__ = "tenant_collections"
    __table_args__ = (
        UniqueConstraint("api_key", "logical_name", name="uq_tenant_collection_logical"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    api_key: str = Field(index=True, max_length=64)
    logical_name: str = Field(max_length=50, description="users, items, orders, settings or inventory")
    name: str = Field(unique=True, max_length=128, description="lowercase(api_key) + '_' + logical_name")
    created_at: datetime = Field(default_factory=utcnow, sa_type=timestamp_type())
