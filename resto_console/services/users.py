"""
Tenant user service

Every change to a user is mirrored into the tenant directory in the same
commit, so login routing always matches the tenant's users.
"""

import csv
import io
import math
from datetime import datetime
from typing import List, Optional, Tuple
import uuid
from sqlmodel import Session, select
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import structlog

from resto_console.core.auth import hash_password
from resto_console.core.errors import DataStoreError, NotFoundError, ValidationError
from resto_console.models.base import utcnow
from resto_console.models.user import TenantUser
from resto_console.schemas.user import UserCreate, UserUpdate
from resto_console.services import directory, tenant_store

logger = structlog.get_logger(__name__)

STATUS_ACTIVE = "Active"
STATUS_DELETED = "Deleted"
STATUS_ALL = "All"

CSV_HEADER = ["Name", "Phone Number", "Email", "Role", "User Status", "Created Date", "Deleted Date"]
CSV_MISSING = "N/A"
CSV_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PHONE_IN_USE = "A user with this phone number already exists"


def _scope(session: Session, api_key: str) -> str:
    return tenant_store.resolve_users(session, api_key).api_key


def _company_id(session: Session, api_key: str) -> str:
    tenant = directory.get_tenant(session, api_key)
    if tenant is None:
        raise NotFoundError("Tenant not found")
    return tenant.company_id


def _status_filter(query, status: str):
    normalized = (status or STATUS_ACTIVE).strip().capitalize()
    if normalized == STATUS_ACTIVE:
        return query.where(TenantUser.is_deleted == False)  # noqa: E712
    if normalized == STATUS_DELETED:
        return query.where(TenantUser.is_deleted == True)  # noqa: E712
    if normalized == STATUS_ALL:
        return query
    raise ValidationError(f"Unknown user status {status}", field="status")


def _commit(session: Session, action: str):
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Conflict on user {action}: {e}")
        raise ValidationError(PHONE_IN_USE, field="userPhone") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action} user: {e}")
        raise DataStoreError(f"Failed to {action} user") from e


def _mirror(session: Session, user: TenantUser, previous_phone: Optional[str] = None):
    # Pending user changes are flushed by _commit, where conflicts are mapped
    with session.no_autoflush:
        directory.upsert_entry(
            session,
            api_key=user.api_key,
            company_id=_company_id(session, user.api_key),
            user_phone=user.user_phone,
            user_name=user.user_name,
            user_email=user.user_email,
            profile_image=user.profile_image,
            previous_phone=previous_phone,
        )


def phone_in_use(session: Session, api_key: str, phone: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    """Whether a non-deleted user of the tenant already has this phone"""
    query = select(TenantUser.id).where(
        TenantUser.api_key == tenant_store.normalize_api_key(api_key),
        TenantUser.user_phone == phone,
        TenantUser.is_deleted == False,  # noqa: E712
    )
    if exclude_id is not None:
        query = query.where(TenantUser.id != exclude_id)
    return session.exec(query).first() is not None


def get_user(session: Session, api_key: str, user_id: uuid.UUID) -> TenantUser:
    """Any user that was not permanently deleted, soft-deleted ones included"""
    api_key = _scope(session, api_key)
    user = session.exec(
        select(TenantUser).where(TenantUser.id == user_id, TenantUser.api_key == api_key)
    ).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users(session: Session, api_key: str, role: Optional[str] = None) -> List[TenantUser]:
    api_key = _scope(session, api_key)
    query = select(TenantUser).where(
        TenantUser.api_key == api_key,
        TenantUser.is_deleted == False,  # noqa: E712
    )
    if role:
        query = query.where(TenantUser.user_role == role)
    try:
        return list(session.exec(query.order_by(TenantUser.created_date.desc())).all())
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch users: {e}")
        raise DataStoreError() from e


def page_users(
    session: Session,
    api_key: str,
    status: str = STATUS_ACTIVE,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[TenantUser], int, int]:
    """One page of users, newest first; returns (users, total, total_pages)"""
    if page < 1:
        raise ValidationError("page must be 1 or greater", field="page")
    if page_size < 1:
        raise ValidationError("pageSize must be 1 or greater", field="pageSize")

    api_key = _scope(session, api_key)
    base = _status_filter(select(TenantUser).where(TenantUser.api_key == api_key), status)
    count_query = _status_filter(
        select(func.count()).select_from(TenantUser).where(TenantUser.api_key == api_key),
        status,
    )
    try:
        total = session.exec(count_query).one()
        users = session.exec(
            base.order_by(TenantUser.created_date.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch user page: {e}")
        raise DataStoreError() from e

    total_pages = math.ceil(total / page_size) if total else 0
    return list(users), total, total_pages


def create_user(session: Session, api_key: str, data: UserCreate) -> TenantUser:
    api_key = _scope(session, api_key)
    if phone_in_use(session, api_key, data.user_phone):
        raise ValidationError(PHONE_IN_USE, field="userPhone")

    now = utcnow()
    user = TenantUser(
        api_key=api_key,
        user_name=data.user_name,
        user_phone=data.user_phone,
        user_email=data.user_email,
        user_role=data.user_role,
        profile_image=data.profile_image,
        password_hash=hash_password(data.password) if data.password else None,
        created_date=now,
        updated_date=now,
    )
    session.add(user)
    _mirror(session, user)
    _commit(session, "create")
    session.refresh(user)

    logger.info(f"User created: {user.id} in tenant {api_key}")
    return user


def _apply(user: TenantUser, fields: dict):
    password = fields.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for key, value in fields.items():
        if key in ("user_name", "user_phone", "user_role") and value is None:
            continue
        setattr(user, key, value)


def update_user(session: Session, api_key: str, user_id: uuid.UUID, data: UserUpdate) -> TenantUser:
    user = get_user(session, api_key, user_id)
    fields = data.model_dump(exclude_unset=True)

    new_phone = fields.get("user_phone")
    # Deleted users included: they may not take a phone held by an active user
    if new_phone and new_phone != user.user_phone:
        if phone_in_use(session, user.api_key, new_phone, exclude_id=user.id):
            raise ValidationError(PHONE_IN_USE, field="userPhone")

    previous_phone = user.user_phone
    _apply(user, fields)
    user.updated_date = utcnow()
    session.add(user)
    _mirror(session, user, previous_phone=previous_phone)
    _commit(session, "update")
    session.refresh(user)

    logger.info(f"User updated: {user_id}")
    return user


def soft_delete_user(session: Session, api_key: str, user_id: uuid.UUID) -> TenantUser:
    user = get_user(session, api_key, user_id)
    now = utcnow()
    user.is_deleted = True
    user.deleted_date = now
    user.updated_date = now
    session.add(user)
    _commit(session, "deactivate")
    session.refresh(user)

    logger.info(f"User deactivated: {user_id}")
    return user


def re_enable_user(
    session: Session,
    api_key: str,
    user_id: uuid.UUID,
    overrides: Optional[UserUpdate] = None,
) -> TenantUser:
    """Clear the deletion markers, optionally applying profile changes at the same time"""
    user = get_user(session, api_key, user_id)
    if not user.is_deleted:
        raise ValidationError("User is not deleted", field="isDeleted")

    fields = overrides.model_dump(exclude_unset=True) if overrides else {}
    phone = fields.get("user_phone") or user.user_phone
    if phone_in_use(session, user.api_key, phone, exclude_id=user.id):
        raise ValidationError(PHONE_IN_USE, field="userPhone")

    previous_phone = user.user_phone
    _apply(user, fields)
    now = utcnow()
    user.is_deleted = False
    user.deleted_date = None
    user.re_enabled_date = now
    user.updated_date = now
    session.add(user)
    _mirror(session, user, previous_phone=previous_phone)
    _commit(session, "re-enable")
    session.refresh(user)

    logger.info(f"User re-enabled: {user_id}")
    return user


def permanently_delete_user(session: Session, api_key: str, user_id: uuid.UUID):
    """Remove the user and its directory entry; irreversible"""
    user = get_user(session, api_key, user_id)

    # A soft-deleted namesake may still hold the phone; keep the entry for it
    shared = session.exec(
        select(TenantUser.id).where(
            TenantUser.api_key == user.api_key,
            TenantUser.user_phone == user.user_phone,
            TenantUser.id != user.id,
        )
    ).first()
    if shared is None:
        directory.remove_entry(session, user.api_key, user.user_phone)

    session.delete(user)
    _commit(session, "delete")
    logger.warning(f"User permanently deleted: {user_id}")


def _csv_value(value) -> str:
    if value is None or value == "":
        return CSV_MISSING
    if isinstance(value, datetime):
        return value.strftime(CSV_DATE_FORMAT)
    return str(value)


def export_users_csv(session: Session, api_key: str, status: str = STATUS_ACTIVE) -> str:
    api_key = _scope(session, api_key)
    query = _status_filter(select(TenantUser).where(TenantUser.api_key == api_key), status)
    users = session.exec(query.order_by(TenantUser.created_date.desc())).all()

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for user in users:
        writer.writerow([
            _csv_value(user.user_name),
            _csv_value(user.user_phone),
            _csv_value(user.user_email),
            _csv_value(user.user_role),
            STATUS_DELETED if user.is_deleted else STATUS_ACTIVE,
            _csv_value(user.created_date),
            _csv_value(user.deleted_date),
        ])
    logger.info(f"Exported {len(users)} users for tenant {api_key}")
    return buffer.getvalue()
