"""
Tenant provisioning

Creates the tenant record and directory entry, registers the tenant's
collections, then seeds the Admin user and default settings. Collection
registration is best effort: a failure is logged and the remaining
collections are still created, nothing is rolled back.
"""

import re
import time
from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import structlog

from resto_console.core.auth import hash_password
from resto_console.core.errors import DataStoreError, ValidationError
from resto_console.models.directory import DirectoryEntry
from resto_console.models.tenant import Tenant
from resto_console.models.user import TenantUser
from resto_console.schemas.instance import InstanceCreate, InstanceResponse
from resto_console.services import settings as settings_service
from resto_console.services import tenant_store

logger = structlog.get_logger(__name__)

API_KEY_PREFIX_LENGTH = 8
MAX_API_KEY_ATTEMPTS = 10
COMPANY_ID_START = 10000
ADMIN_ROLE = "Admin"

_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]")


def current_millis() -> int:
    return int(time.time() * 1000)


def derive_api_key(company_name: str, timestamp_ms: int) -> str:
    """
    ``lowercase(alphanumerics of company_name)[:8] + "_" + last 4 digits of timestamp``
    """
    prefix = _NON_ALNUM.sub("", company_name).lower()[:API_KEY_PREFIX_LENGTH] or "tenant"
    return f"{prefix}_{str(timestamp_ms)[-4:]}"


def allocate_api_key(session: Session, company_name: str, timestamp_ms: Optional[int] = None) -> str:
    """Derive a key not held by any tenant, stepping the timestamp on collision"""
    timestamp_ms = current_millis() if timestamp_ms is None else timestamp_ms
    for offset in range(MAX_API_KEY_ATTEMPTS):
        api_key = derive_api_key(company_name, timestamp_ms + offset)
        taken = session.exec(select(Tenant.id).where(Tenant.api_key == api_key)).first()
        if taken is None:
            return api_key
        logger.warning(f"API key {api_key} already in use, retrying")
    raise DataStoreError("Could not allocate a unique API key")


def generate_company_id(session: Session, company_name: str) -> str:
    """Two letter prefix from the company name plus a five digit counter, e.g. AC10001"""
    prefix = (_NON_ALNUM.sub("", company_name)[:2].upper()).ljust(2, "X")
    pattern = re.compile(rf"^{prefix}(\d{{5}})$")
    existing = session.exec(select(Tenant.company_id).where(Tenant.company_id.startswith(prefix))).all()
    highest = COMPANY_ID_START
    for company_id in existing:
        match = pattern.match(company_id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}{highest + 1:05d}"


def _create_collections(session: Session, api_key: str) -> List[str]:
    created = []
    for logical_name in tenant_store.TENANT_COLLECTIONS:
        try:
            ref = tenant_store.create_collection(session, api_key, logical_name)
        except DataStoreError:
            logger.error(f"Skipping collection {logical_name} for tenant {api_key}")
            continue
        created.append(ref.name)
    return created


def provision_tenant(
    session: Session,
    data: InstanceCreate,
    timestamp_ms: Optional[int] = None,
) -> InstanceResponse:
    """Create a tenant with its collections, Admin user and default settings"""
    if session.exec(select(DirectoryEntry.id).where(DirectoryEntry.user_phone == data.user_phone)).first():
        raise ValidationError("A user with this phone number already exists", field="userPhone")

    try:
        if data.company_id:
            company_id = data.company_id
            if session.exec(select(Tenant.id).where(Tenant.company_id == company_id)).first():
                raise ValidationError("A company with this ID already exists", field="companyId")
        else:
            company_id = generate_company_id(session, data.company_name)

        api_key = allocate_api_key(session, data.company_name, timestamp_ms)
        logger.info(f"Creating new instance with API key: {api_key} and company ID: {company_id}")

        session.add(Tenant(
            company_name=data.company_name,
            company_email=data.company_email,
            company_id=company_id,
            api_key=api_key,
            user_name=data.user_name,
            user_email=data.user_email,
            user_phone=data.user_phone,
        ))
        session.add(DirectoryEntry(
            user_name=data.user_name,
            user_email=data.user_email,
            user_phone=data.user_phone,
            api_key=api_key,
            company_id=company_id,
        ))
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Tenant creation conflicted: {e}")
        raise ValidationError("A tenant with this company ID or API key already exists") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to create tenant record: {e}")
        raise DataStoreError("Failed to create new instance") from e

    collections = _create_collections(session, api_key)

    try:
        session.add(TenantUser(
            api_key=api_key,
            user_name=data.user_name,
            user_email=data.user_email,
            user_phone=data.user_phone,
            user_role=ADMIN_ROLE,
            password_hash=hash_password(data.password),
        ))
        settings_service.seed_defaults(session, api_key)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to seed tenant {api_key}: {e}")
        raise DataStoreError("Failed to create new instance") from e

    logger.info(f"Instance {api_key} created with {len(collections)} collections")
    return InstanceResponse(
        api_key=api_key,
        company_id=company_id,
        company_name=data.company_name,
        user_name=data.user_name,
        user_email=data.user_email,
        collections=collections,
    )
