"""
Menu item model
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint
from datetime import datetime
from typing import Optional
import uuid

from resto_console.models.base import timestamp_type, utcnow


class MenuItem(SQLModel, table=True):
    """Menu item, names and codes unique within a tenant"""

    __tablename__ = "menu_items"
    __table_args__ = (
        UniqueConstraint("api_key", "item_name", name="uq_menu_items_name"),
        UniqueConstraint("api_key", "item_code", name="uq_menu_items_code"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    api_key: str = Field(index=True, max_length=64, description="Tenant key for multi-tenant isolation")

    # Item details
    item_name: str = Field(max_length=255, nullable=False)
    item_code: str = Field(max_length=64, nullable=False)
    category: Optional[str] = Field(default=None, index=True, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=1000)

    # Pricing
    mrp: float = Field(description="Maximum retail price, always positive")
    selling_price: Optional[float] = None
    discount: Optional[float] = None

    # Flags
    is_available: bool = Field(default=True)
    is_veg: Optional[bool] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=timestamp_type())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=timestamp_type())


class ItemCodeCounter(SQLModel, table=True):
    """Last sequential item code issued per tenant, advanced by compare-and-swap"""

    __tablename__ = "item_code_counters"

    api_key: str = Field(primary_key=True, max_length=64)
    last_value: int = Field(default=0)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=timestamp_type())
