"""
Two-phase login endpoints
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from resto_console.core.database import get_session
from resto_console.schemas.login import LoginCheck, LoginComplete, LoginIdentity, LoginResult
from resto_console.services import login as login_service

router = APIRouter()


@router.post("/check", response_model=LoginIdentity)
def check_login(
    login_data: LoginCheck,
    session: Session = Depends(get_session)
):
    """Phase 1: resolve phone and company ID to a tenant"""
    return login_service.identify(session, login_data.user_phone, login_data.company_id)


@router.post("/complete", response_model=LoginResult)
def complete_login(
    login_data: LoginComplete,
    session: Session = Depends(get_session)
):
    """Phase 2: verify the password and issue a session token"""
    return login_service.complete_login(
        session, login_data.user_phone, login_data.company_id, login_data.password
    )
