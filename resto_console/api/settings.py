"""
Settings API endpoints
"""

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session
from typing import Any, Dict, Optional

from resto_console.core.database import get_session
from resto_console.core.dependencies import get_api_key, get_optional_api_key
from resto_console.schemas.menu import CodeResponse
from resto_console.schemas.settings import RoleCreate, RolesResponse
from resto_console.services import item_codes
from resto_console.services import settings as settings_service

router = APIRouter()


@router.get("/generate-code", response_model=CodeResponse)
def generate_item_code(
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    """Reserve the next sequential item code"""
    return CodeResponse(code=item_codes.next_item_code(session, api_key))


@router.post("/userRoles", response_model=RolesResponse)
def add_user_role(
    role_data: RoleCreate,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    return RolesResponse(roles=settings_service.add_user_role(session, api_key, role_data.role))


@router.get("/{settings_type}")
def get_settings(
    settings_type: str,
    api_key: Optional[str] = Depends(get_optional_api_key),
    session: Session = Depends(get_session)
) -> Dict[str, Any]:
    return settings_service.get_settings_by_type(session, settings_type, api_key)


@router.put("/{settings_type}")
def update_settings(
    settings_type: str,
    updates: Dict[str, Any] = Body(...),
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
) -> Dict[str, Any]:
    return settings_service.update_settings(session, settings_type, api_key, updates)
