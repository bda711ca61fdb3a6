"""
Tenant settings service

Reads fall through three layers: the tenant's own document, the shared
document (api_key NULL), then the built-in defaults below.
"""

from copy import deepcopy
from typing import Any, Dict, List, Optional
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import structlog

from resto_console.core.errors import DataStoreError, NotFoundError, ValidationError
from resto_console.models.base import utcnow
from resto_console.models.settings_document import SettingsDocument
from resto_console.services import tenant_store

logger = structlog.get_logger(__name__)

CATALOG = "catalog"
USER_ROLES = "userRoles"
USER_EDIT = "userEdit"

DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    CATALOG: {"itemDelete": False, "itemEdit": True},
    USER_ROLES: {"roles": ["Admin", "Manager", "Staff"]},
    USER_EDIT: {"userEdit": True, "userDelete": True},
}

# Keys owned by the document itself, never taken from an update body
RESERVED_KEYS = {"type", "apiKey", "_id", "id"}


def _render(doc_type: str, data: Dict[str, Any], api_key: Optional[str] = None) -> Dict[str, Any]:
    rendered = {"type": doc_type}
    if api_key:
        rendered["apiKey"] = api_key
    rendered.update(data)
    return rendered


def _find(session: Session, doc_type: str, api_key: Optional[str]) -> Optional[SettingsDocument]:
    query = select(SettingsDocument).where(SettingsDocument.type == doc_type)
    if api_key is None:
        query = query.where(SettingsDocument.api_key.is_(None))
    else:
        query = query.where(SettingsDocument.api_key == api_key)
    return session.exec(query).first()


def seed_defaults(session: Session, api_key: str):
    """Stage the default documents for a new tenant; caller commits"""
    for doc_type, data in DEFAULT_SETTINGS.items():
        session.add(SettingsDocument(api_key=api_key, type=doc_type, data=deepcopy(data)))


def get_settings_by_type(session: Session, doc_type: str, api_key: Optional[str] = None) -> Dict[str, Any]:
    try:
        if api_key is not None:
            api_key = tenant_store.normalize_api_key(api_key)
            if tenant_store.resolve_collection(session, api_key, tenant_store.SETTINGS):
                doc = _find(session, doc_type, api_key)
                if doc is not None:
                    return _render(doc_type, doc.data, api_key)

        shared = _find(session, doc_type, None)
        if shared is not None:
            return _render(doc_type, shared.data)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch settings for type {doc_type}: {e}")
        raise DataStoreError() from e

    if doc_type in DEFAULT_SETTINGS:
        return _render(doc_type, deepcopy(DEFAULT_SETTINGS[doc_type]))
    raise NotFoundError(f"No settings of type {doc_type}")


def _validate(doc_type: str, updates: Dict[str, Any]):
    if doc_type == USER_ROLES and "roles" in updates:
        roles = updates["roles"]
        if not isinstance(roles, list) or not all(isinstance(r, str) and r.strip() for r in roles):
            raise ValidationError("roles must be a list of role names", field="roles")


def update_settings(session: Session, doc_type: str, api_key: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Upsert the tenant's document of ``doc_type``, merging the given fields"""
    api_key = tenant_store.normalize_api_key(api_key)
    updates = {k: v for k, v in updates.items() if k not in RESERVED_KEYS}
    _validate(doc_type, updates)

    if tenant_store.resolve_collection(session, api_key, tenant_store.SETTINGS) is None:
        raise NotFoundError("Settings collection not found for this tenant")

    # Second pass covers a concurrent first insert of the same document
    for attempt in range(2):
        try:
            doc = _find(session, doc_type, api_key)
            if doc is None:
                doc = SettingsDocument(api_key=api_key, type=doc_type, data=dict(updates))
            else:
                doc.data = {**doc.data, **updates}
                doc.updated_at = utcnow()
            session.add(doc)
            session.commit()
            session.refresh(doc)
            logger.info(f"Settings {doc_type} updated for tenant {api_key}")
            return _render(doc_type, doc.data, api_key)
        except IntegrityError as e:
            session.rollback()
            if attempt:
                logger.error(f"Failed to update settings for type {doc_type}: {e}")
                raise DataStoreError() from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to update settings for type {doc_type}: {e}")
            raise DataStoreError() from e


def get_user_roles(session: Session, api_key: Optional[str] = None) -> List[str]:
    return list(get_settings_by_type(session, USER_ROLES, api_key).get("roles") or [])


def add_user_role(session: Session, api_key: str, role: str) -> List[str]:
    role = role.strip()
    if not role:
        raise ValidationError("role is required", field="role")
    roles = get_user_roles(session, api_key)
    if role in roles:
        raise ValidationError("This role already exists", field="role")
    roles.append(role)
    return update_settings(session, USER_ROLES, api_key, {"roles": roles})["roles"]
