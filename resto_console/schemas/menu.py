"""
Pydantic schemas for menu items
"""

from pydantic import Field
from typing import Any, Optional
from datetime import datetime
import uuid

from resto_console.models.menu_item import MenuItem
from resto_console.schemas.base import CamelModel


class MenuItemWrite(CamelModel):
    """Create and partial update body; price is validated by the menu service"""
    item_name: Optional[str] = Field(None, max_length=255)
    item_code: Optional[str] = Field(None, max_length=64)
    category: Optional[str] = Field(None, alias="Category", max_length=255)
    mrp: Optional[Any] = Field(None, alias="MRP")
    selling_price: Optional[float] = None
    discount: Optional[float] = None
    is_available: Optional[bool] = None
    is_veg: Optional[bool] = None
    description: Optional[str] = Field(None, max_length=2000)
    image_url: Optional[str] = Field(None, max_length=1000)


class MenuItemRead(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    api_key: str
    item_name: str
    item_code: str
    category: Optional[str] = Field(None, alias="Category")
    mrp: float = Field(..., alias="MRP")
    selling_price: Optional[float] = None
    discount: Optional[float] = None
    is_available: bool
    is_veg: Optional[bool] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, item: MenuItem) -> "MenuItemRead":
        return cls(
            id=item.id,
            api_key=item.api_key,
            item_name=item.item_name,
            item_code=item.item_code,
            category=item.category,
            mrp=item.mrp,
            selling_price=item.selling_price,
            discount=item.discount,
            is_available=item.is_available,
            is_veg=item.is_veg,
            description=item.description,
            image_url=item.image_url,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class ExistsResponse(CamelModel):
    exists: bool


class CodeResponse(CamelModel):
    code: str
