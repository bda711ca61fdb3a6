"""
Menu item service

Reads degrade to empty results when the tenant has no items collection;
writes require it.
"""

import math
from typing import Any, List, Optional
import uuid
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import structlog

from resto_console.core.errors import DataStoreError, NotFoundError, ValidationError
from resto_console.models.base import utcnow
from resto_console.models.menu_item import MenuItem
from resto_console.schemas.menu import MenuItemWrite
from resto_console.services import item_codes, tenant_store

logger = structlog.get_logger(__name__)

PRICE_MESSAGE = "Price must be a valid number greater than 0"


def parse_price(value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(PRICE_MESSAGE, field="MRP")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError(PRICE_MESSAGE, field="MRP")
    if not math.isfinite(price) or price <= 0:
        raise ValidationError(PRICE_MESSAGE, field="MRP")
    return price


def parse_item_id(value: Optional[str], field: str = "excludeId") -> Optional[uuid.UUID]:
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"{field} is not a valid id", field=field)


def _has_items(session: Session, api_key: Optional[str]) -> bool:
    if api_key is None:
        return False
    return tenant_store.resolve_collection(session, api_key, tenant_store.ITEMS) is not None


def _require_items(session: Session, api_key: str) -> str:
    api_key = tenant_store.normalize_api_key(api_key)
    if tenant_store.resolve_collection(session, api_key, tenant_store.ITEMS) is None:
        raise NotFoundError("Menu collection not found for this tenant")
    return api_key


def list_items(session: Session, api_key: Optional[str], category: Optional[str] = None) -> List[MenuItem]:
    if not _has_items(session, api_key):
        return []
    query = select(MenuItem).where(MenuItem.api_key == tenant_store.normalize_api_key(api_key))
    if category is not None:
        query = query.where(MenuItem.category == category)
    try:
        return list(session.exec(query.order_by(MenuItem.created_at.asc())).all())
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch menu items: {e}")
        raise DataStoreError() from e


def _exists(session: Session, api_key: Optional[str], column, value: str, exclude_id=None) -> bool:
    exclude = parse_item_id(exclude_id)
    if not value or not _has_items(session, api_key):
        return False
    query = select(MenuItem.id).where(MenuItem.api_key == tenant_store.normalize_api_key(api_key), column == value)
    if exclude is not None:
        query = query.where(MenuItem.id != exclude)
    return session.exec(query).first() is not None


def item_name_exists(session: Session, api_key: Optional[str], name: str, exclude_id=None) -> bool:
    """Exact, case-sensitive name match within the tenant"""
    return _exists(session, api_key, MenuItem.item_name, name, exclude_id)


def item_code_exists(session: Session, api_key: Optional[str], code: str, exclude_id=None) -> bool:
    return _exists(session, api_key, MenuItem.item_code, code, exclude_id)


def get_item(session: Session, api_key: str, item_id: uuid.UUID) -> MenuItem:
    api_key = tenant_store.normalize_api_key(api_key)
    item = session.exec(
        select(MenuItem).where(MenuItem.id == item_id, MenuItem.api_key == api_key)
    ).first()
    if item is None:
        raise NotFoundError("Menu item not found")
    return item


def _check_unique(session: Session, api_key: str, fields: dict, exclude_id=None):
    if "item_name" in fields and item_name_exists(session, api_key, fields["item_name"], exclude_id):
        raise ValidationError("An item with this name already exists", field="itemName")
    if "item_code" in fields and item_code_exists(session, api_key, fields["item_code"], exclude_id):
        raise ValidationError("An item with this code already exists", field="itemCode")


def _commit(session: Session, item: MenuItem, action: str) -> MenuItem:
    try:
        session.add(item)
        session.commit()
        session.refresh(item)
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Duplicate menu item on {action}: {e}")
        raise ValidationError("An item with this name or code already exists") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action} menu item: {e}")
        raise DataStoreError(f"Failed to {action} menu item") from e
    return item


def _clean_fields(fields: dict) -> dict:
    for key, wire_name in (("item_name", "itemName"), ("item_code", "itemCode")):
        if key in fields and (fields[key] is None or not fields[key].strip()):
            raise ValidationError(f"{wire_name} is required", field=wire_name)
    if "mrp" in fields:
        fields["mrp"] = parse_price(fields["mrp"])
    if fields.get("is_available", True) is None:
        del fields["is_available"]
    return fields


def create_item(session: Session, api_key: str, data: MenuItemWrite) -> MenuItem:
    if not data.item_name or not data.item_name.strip():
        raise ValidationError("itemName is required", field="itemName")
    if "mrp" not in data.model_fields_set:
        raise ValidationError(PRICE_MESSAGE, field="MRP")
    fields = data.model_dump(exclude_unset=True)
    if not (fields.get("item_code") or "").strip():
        # Blank code means "assign the next one"
        fields.pop("item_code", None)
    fields = _clean_fields(fields)

    api_key = _require_items(session, api_key)
    _check_unique(session, api_key, fields)
    if not fields.get("item_code"):
        fields["item_code"] = item_codes.next_item_code(session, api_key)

    now = utcnow()
    item = MenuItem(api_key=api_key, created_at=now, updated_at=now, **fields)
    item = _commit(session, item, "add")
    logger.info(f"Created menu item {item.id} ({item.item_code}) for tenant {api_key}")
    return item


def update_item(session: Session, api_key: str, item_id: uuid.UUID, data: MenuItemWrite) -> MenuItem:
    fields = _clean_fields(data.model_dump(exclude_unset=True))

    api_key = _require_items(session, api_key)
    item = get_item(session, api_key, item_id)
    _check_unique(session, api_key, fields, exclude_id=item_id)

    for key, value in fields.items():
        setattr(item, key, value)
    item.updated_at = utcnow()

    item = _commit(session, item, "update")
    logger.info(f"Updated menu item {item_id}")
    return item


def delete_item(session: Session, api_key: str, item_id: uuid.UUID):
    api_key = _require_items(session, api_key)
    item = get_item(session, api_key, item_id)
    try:
        session.delete(item)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to delete menu item {item_id}: {e}")
        raise DataStoreError("Failed to delete menu item") from e
    logger.info(f"Deleted menu item {item_id}")
