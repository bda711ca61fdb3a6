"""
Sequential item codes

The next code is one above the larger of the tenant's counter and the
highest trailing number found in existing item codes. It is reserved by a
compare-and-swap on the counter row, so concurrent callers never get the
same code.
"""

import re
from sqlmodel import Session, select
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import structlog

from resto_console.core.errors import DataStoreError
from resto_console.models.base import utcnow
from resto_console.models.menu_item import ItemCodeCounter, MenuItem
from resto_console.services import tenant_store

logger = structlog.get_logger(__name__)

DEFAULT_START = 1001
MAX_ATTEMPTS = 5

_TRAILING_DIGITS = re.compile(r"(\d+)$")


def trailing_number(code) -> int:
    """Trailing digit run of a code, 0 when there is none"""
    if not code:
        return 0
    match = _TRAILING_DIGITS.search(str(code))
    return int(match.group(1)) if match else 0


def highest_item_code(session: Session, api_key: str) -> int:
    codes = session.exec(select(MenuItem.item_code).where(MenuItem.api_key == api_key)).all()
    return max((trailing_number(code) for code in codes), default=0)


def next_item_code(session: Session, api_key: str) -> str:
    """Reserve and return the tenant's next sequential item code"""
    api_key = tenant_store.normalize_api_key(api_key)

    for _ in range(MAX_ATTEMPTS):
        try:
            counter = session.get(ItemCodeCounter, api_key)
            current = counter.last_value if counter else 0
            highest = max(current, highest_item_code(session, api_key))
            candidate = highest + 1 if highest else DEFAULT_START

            if counter is None:
                session.add(ItemCodeCounter(api_key=api_key, last_value=candidate))
                session.commit()
                return str(candidate)

            result = session.exec(
                update(ItemCodeCounter)
                .where(
                    ItemCodeCounter.api_key == api_key,
                    ItemCodeCounter.last_value == current,
                )
                .values(last_value=candidate, updated_at=utcnow())
            )
            if result.rowcount == 1:
                session.commit()
                return str(candidate)
            session.rollback()
            logger.debug(f"Item code {candidate} taken concurrently for {api_key}, retrying")
        except IntegrityError:
            # Another request created the counter row first
            session.rollback()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to generate item code for {api_key}: {e}")
            raise DataStoreError("Failed to generate unique code") from e

    raise DataStoreError("Failed to generate unique code")
