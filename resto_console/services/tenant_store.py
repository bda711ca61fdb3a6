"""
Per-tenant data store resolution

Every tenant-owned row carries its tenant's API key. A tenant's logical
collections (users, items, ...) are recorded in ``tenant_collections`` so
that reads can tell "tenant has no items yet" from "tenant has items".
"""

from dataclasses import dataclass
from typing import Optional
from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError
import structlog

from resto_console.core.errors import DataStoreError, NotConfiguredError, NotFoundError
from resto_console.models.tenant_collection import TenantCollection
from resto_console.services import directory

logger = structlog.get_logger(__name__)

USERS = "users"
ITEMS = "items"
ORDERS = "orders"
SETTINGS = "settings"
INVENTORY = "inventory"

TENANT_COLLECTIONS = (USERS, ITEMS, ORDERS, SETTINGS, INVENTORY)


@dataclass(frozen=True)
class CollectionRef:
    api_key: str
    logical_name: str
    name: str


def normalize_api_key(api_key: Optional[str]) -> str:
    """Lower-cased key, NotConfiguredError when none was supplied"""
    if api_key is None or not api_key.strip():
        raise NotConfiguredError()
    return api_key.strip().lower()


def collection_name(api_key: str, logical_name: str) -> str:
    return f"{normalize_api_key(api_key)}_{logical_name}"


def _ref(row: TenantCollection) -> CollectionRef:
    return CollectionRef(api_key=row.api_key, logical_name=row.logical_name, name=row.name)


def create_collection(session: Session, api_key: str, logical_name: str) -> CollectionRef:
    """Register a tenant collection; an already registered one is returned as is"""
    api_key = normalize_api_key(api_key)
    name = collection_name(api_key, logical_name)
    existing = session.exec(select(TenantCollection).where(TenantCollection.name == name)).first()
    if existing:
        return _ref(existing)

    row = TenantCollection(api_key=api_key, logical_name=logical_name, name=name)
    try:
        session.add(row)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to create collection {name}: {e}")
        raise DataStoreError(f"Failed to create collection {name}") from e

    logger.info(f"Created collection {name}")
    return _ref(row)


def resolve_collection(session: Session, api_key: str, logical_name: str) -> Optional[CollectionRef]:
    """The tenant's collection for ``logical_name``, None when it was never provisioned"""
    name = collection_name(api_key, logical_name)
    try:
        row = session.exec(select(TenantCollection).where(TenantCollection.name == name)).first()
    except SQLAlchemyError as e:
        logger.error(f"Failed to resolve collection {name}: {e}")
        raise DataStoreError() from e
    return _ref(row) if row else None


def resolve_users(session: Session, api_key: str) -> CollectionRef:
    """Users are the one collection created on demand, and only for a provisioned tenant"""
    ref = resolve_collection(session, api_key, USERS)
    if ref is None:
        api_key = normalize_api_key(api_key)
        if directory.get_tenant(session, api_key) is None:
            raise NotFoundError("Tenant not found")
        logger.warning(f"Users collection missing for {api_key}, creating it")
        ref = create_collection(session, api_key, USERS)
    return ref

