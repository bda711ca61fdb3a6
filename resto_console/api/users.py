"""
Users API endpoints
"""

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlmodel import Session
from typing import List, Optional, Union
import uuid

from resto_console.core.database import get_session
from resto_console.core.dependencies import get_api_key
from resto_console.schemas.base import MessageResponse
from resto_console.schemas.user import UserCreate, UserPage, UserRead, UserUpdate
from resto_console.services import users as users_service

router = APIRouter()


@router.get("", response_model=Union[UserPage, List[UserRead]])
def list_users(
    role: Optional[str] = Query(None),
    user_status: str = Query(users_service.STATUS_ACTIVE, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    """Active users of a role, or one page of users by status"""
    if role:
        return [UserRead.from_model(u) for u in users_service.list_users(session, api_key, role)]

    users, total, total_pages = users_service.page_users(session, api_key, user_status, page, page_size)
    return UserPage(
        users=[UserRead.from_model(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )


@router.get("/export/csv")
def export_users(
    user_status: str = Query(users_service.STATUS_ACTIVE, alias="status"),
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    content = users_service.export_users_csv(session, api_key, user_status)
    filename = f"users_{user_status.lower()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: uuid.UUID,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    return UserRead.from_model(users_service.get_user(session, api_key, user_id))


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    return UserRead.from_model(users_service.create_user(session, api_key, user_data))


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: uuid.UUID,
    user_data: UserUpdate,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    return UserRead.from_model(users_service.update_user(session, api_key, user_id, user_data))


@router.delete("/{user_id}", response_model=UserRead)
def deactivate_user(
    user_id: uuid.UUID,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    """Soft delete; the user can be re-enabled later"""
    return UserRead.from_model(users_service.soft_delete_user(session, api_key, user_id))


@router.post("/{user_id}/re-enable", response_model=UserRead)
def re_enable_user(
    user_id: uuid.UUID,
    overrides: Optional[UserUpdate] = Body(None),
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    return UserRead.from_model(users_service.re_enable_user(session, api_key, user_id, overrides))


@router.delete("/{user_id}/permanent", response_model=MessageResponse)
def delete_user_permanently(
    user_id: uuid.UUID,
    api_key: str = Depends(get_api_key),
    session: Session = Depends(get_session)
):
    users_service.permanently_delete_user(session, api_key, user_id)
    return MessageResponse(message="User permanently deleted")
