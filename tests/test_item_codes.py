"""
Tests for sequential item code generation
"""

import pytest
from sqlmodel import Session

from resto_console.core.errors import NotConfiguredError
from resto_console.models.menu_item import ItemCodeCounter
from resto_console.schemas.menu import MenuItemWrite
from resto_console.services import item_codes, menu


@pytest.mark.parametrize("code, expected", [
    ("A-1005", 1005),
    ("B-999", 999),
    ("bad-code", 0),
    ("1001", 1001),
    ("12-ab-7", 7),
    ("", 0),
    (None, 0),
])
def test_trailing_number(code, expected):
    assert item_codes.trailing_number(code) == expected


def test_first_code_is_1001(db: Session, tenant):
    assert item_codes.next_item_code(db, tenant.api_key) == "1001"


def test_next_code_follows_highest_existing(db: Session, tenant):
    for name, code in (("Dosa", "A-1005"), ("Idli", "B-999"), ("Vada", "bad-code")):
        menu.create_item(db, tenant.api_key, MenuItemWrite(itemName=name, itemCode=code, MRP=50))

    assert item_codes.next_item_code(db, tenant.api_key) == "1006"


def test_codes_are_never_reissued(db: Session, tenant):
    first = item_codes.next_item_code(db, tenant.api_key)
    second = item_codes.next_item_code(db, tenant.api_key)

    assert (first, second) == ("1001", "1002")
    assert db.get(ItemCodeCounter, tenant.api_key).last_value == 1002


def test_counter_ahead_of_items_wins(db: Session, tenant):
    db.add(ItemCodeCounter(api_key=tenant.api_key, last_value=2000))
    db.commit()
    menu.create_item(db, tenant.api_key, MenuItemWrite(itemName="Dosa", itemCode="X-1500", MRP=50))

    assert item_codes.next_item_code(db, tenant.api_key) == "2001"


def test_codes_are_per_tenant(db: Session, tenant):
    item_codes.next_item_code(db, tenant.api_key)

    assert item_codes.next_item_code(db, "other_0001") == "1001"


def test_requires_api_key(db: Session):
    with pytest.raises(NotConfiguredError):
        item_codes.next_item_code(db, None)
