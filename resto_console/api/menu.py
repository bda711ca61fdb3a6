"""
Menu items API endpoints
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from typing import List, Optional
import uuid

from resto_console.core.database import get_session
from resto_console.core.dependencies import get_api_key, get_optional_api_key
from resto_console.schemas.base import MessageResponse
from resto_console.schemas.menu import ExistsResponse, MenuItemRead, MenuItemWrite
from resto_console.services import menu as menu_service

router = APIRouter()


@router.get("", response_model=List[MenuItemRead])
def list_menu_items(
    api_key: Optional[str] = Depends(get_optional_api_key),
    session: Session = Depends(get_session)
):
    """All menu items of the tenant, empty when it has none yet"""
    return [MenuItemRead.from_model(item) for item in menu_service.list_items(session, api_key)]


@router.get("/category/{category}", response_model=List[MenuItemRead])
def list_menu_items_by_category(
    category: str,
    api_key: Optional[str] = Depends(get_optional_api_key),
    session: Session = Depends(get_session)
):
    items = menu_service.list_items(session, api_key, category=category)
    return [MenuItemRead.from_model(item) for item in items]


@router.get("/check-name", response_model=ExistsResponse)
def check_item_name(
    name: str = Query(...),
    exclude_id: Optional[str] = Query(None, alias="excludeId"),
    api_key: Optional[str] = Depends(get_optional_api_key),
    session: Session = Depends(get_session)
):
    return ExistsResponse(exists=menu_service.item_name_exists(session, api_key, name, exclude_id))


@router.get("/check-code", response_model=ExistsResponse)
def check_item_code(
    code: str = Query(...),
    exclude_id: Optional[str] = Query(None, alias="excludeId"),
    api_key: Optional[str] = Depends(get_optional_api_key),
    session: Session = Depends(get_session)
):
    return ExistsResponse(exists=menu_service.item_code_exists(session, api_key, code, exclude_id))


@router.post("", response_model=MenuItemRead, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    item_data: MenuItemWrite,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    return MenuItemRead.from_model(menu_service.create_item(session, api_key, item_data))


@router.put("/{item_id}", response_model=MenuItemRead)
def update_menu_item(
    item_id: uuid.UUID,
    item_data: MenuItemWrite,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    return MenuItemRead.from_model(menu_service.update_item(session, api_key, item_id, item_data))


@router.delete("/{item_id}", response_model=MessageResponse)
def delete_menu_item(
    item_id: uuid.UUID,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    menu_service.delete_item(session, api_key, item_id)
    return MessageResponse(message="Menu item deleted")
