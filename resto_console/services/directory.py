"""
Tenant directory - global lookups that route a login to its tenant

Helpers here only stage changes on the session; the calling service owns
the commit so a tenant user and its directory entry change together.
"""

from typing import Optional
from sqlmodel import Session, select
import structlog

from resto_console.models.base import utcnow
from resto_console.models.directory import DirectoryEntry
from resto_console.models.tenant import Tenant

logger = structlog.get_logger(__name__)


def get_tenant(session: Session, api_key: str) -> Optional[Tenant]:
    return session.exec(select(Tenant).where(Tenant.api_key == api_key.lower())).first()


def get_tenant_by_company(session: Session, company_id: str) -> Optional[Tenant]:
    return session.exec(select(Tenant).where(Tenant.company_id == company_id)).first()


def find_entry(session: Session, user_phone: str, company_id: str) -> Optional[DirectoryEntry]:
    """Exact match on both phone and company"""
    return session.exec(
        select(DirectoryEntry).where(
            DirectoryEntry.user_phone == user_phone,
            DirectoryEntry.company_id == company_id,
        )
    ).first()


def get_entry(session: Session, api_key: str, user_phone: str) -> Optional[DirectoryEntry]:
    return session.exec(
        select(DirectoryEntry).where(
            DirectoryEntry.api_key == api_key,
            DirectoryEntry.user_phone == user_phone,
        )
    ).first()


def upsert_entry(
    session: Session,
    api_key: str,
    company_id: str,
    user_phone: str,
    user_name: str,
    user_email: Optional[str] = None,
    profile_image: Optional[str] = None,
    previous_phone: Optional[str] = None,
) -> DirectoryEntry:
    """
    Mirror a tenant user into the directory, keyed by (phone, api key).

    ``previous_phone`` moves an existing entry when the user's phone changed.
    """
    entry = get_entry(session, api_key, user_phone)
    if previous_phone and previous_phone != user_phone:
        stale = get_entry(session, api_key, previous_phone)
        if stale is not None:
            if entry is None:
                entry = stale
            else:
                session.delete(stale)

    if entry is None:
        entry = DirectoryEntry(
            api_key=api_key,
            company_id=company_id,
            user_phone=user_phone,
            user_name=user_name,
            user_email=user_email,
            profile_image=profile_image,
        )
        logger.debug(f"Directory entry added for tenant {api_key}")
    else:
        entry.user_phone = user_phone
        entry.user_name = user_name
        entry.user_email = user_email
        entry.profile_image = profile_image
        entry.updated_at = utcnow()

    session.add(entry)
    return entry


def remove_entry(session: Session, api_key: str, user_phone: str) -> bool:
    entry = get_entry(session, api_key, user_phone)
    if entry is None:
        return False
    session.delete(entry)
    return True
