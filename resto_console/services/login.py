"""
Two-phase login

Phase one resolves (phone, company) to a tenant through the directory
without any password. Phase two checks the password against the tenant's
own user record and issues a signed session token.
"""

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError
import structlog

from resto_console.core.auth import create_access_token, verify_password
from resto_console.core.config import get_settings
from resto_console.core.errors import AuthError, DataStoreError, InvalidCredentials
from resto_console.models.base import utcnow
from resto_console.models.tenant import TenantStatus
from resto_console.models.user import TenantUser
from resto_console.schemas.login import LoginIdentity, LoginResult, UserProfile
from resto_console.services import directory, tenant_store

logger = structlog.get_logger(__name__)


def identify(session: Session, user_phone: str, company_id: str) -> LoginIdentity:
    entry = directory.find_entry(session, user_phone, company_id)
    if entry is None:
        logger.info(f"Login check failed for company {company_id}")
        raise AuthError("Invalid phone number or company ID")

    tenant = directory.get_tenant_by_company(session, entry.company_id)
    if tenant is None or tenant.status != TenantStatus.ACTIVE:
        raise AuthError("Invalid company account")

    return LoginIdentity(
        user_name=entry.user_name,
        user_email=entry.user_email,
        api_key=entry.api_key.lower(),
        company_id=entry.company_id,
    )


def authenticate(session: Session, user_phone: str, company_id: str, password: str) -> UserProfile:
    """Any failure is reported as InvalidCredentials, whichever step it was"""
    entry = directory.find_entry(session, user_phone, company_id)
    if entry is None:
        raise InvalidCredentials()

    api_key = tenant_store.resolve_users(session, entry.api_key).api_key
    user = session.exec(
        select(TenantUser).where(
            TenantUser.api_key == api_key,
            TenantUser.user_phone == user_phone,
            TenantUser.is_deleted == False,  # noqa: E712
        )
    ).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info(f"Login failed for tenant {api_key}")
        raise InvalidCredentials()

    user.last_logged_in = utcnow()
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to record login for user {user.id}: {e}")
        raise DataStoreError() from e

    logger.info(f"User logged in: {user.id}")
    return UserProfile(
        id=user.id,
        user_name=user.user_name,
        user_email=user.user_email,
        user_phone=user.user_phone,
        user_role=user.user_role,
        profile_image=user.profile_image or entry.profile_image,
        api_key=api_key,
        company_id=entry.company_id,
    )


def complete_login(session: Session, user_phone: str, company_id: str, password: str) -> LoginResult:
    profile = authenticate(session, user_phone, company_id, password)
    settings = get_settings()
    token = create_access_token(user_id=profile.id, api_key=profile.api_key, role=profile.user_role)
    return LoginResult(
        token=token,
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user_data=profile,
    )
