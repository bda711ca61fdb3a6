"""
Tests for the two-phase login
"""

import hashlib
import pytest
from sqlmodel import Session, select

from resto_console.core.auth import decode_access_token
from resto_console.core.errors import AuthError, InvalidCredentials
from resto_console.models.tenant import Tenant, TenantStatus
from resto_console.models.user import TenantUser
from resto_console.services import login

from tests.conftest import PASSWORD_DIGEST


def test_identify(db: Session, tenant):
    identity = login.identify(db, "555", "ACME")

    assert identity.api_key == "acme_1234"
    assert identity.company_id == "ACME"
    assert identity.user_name == "Olivia Owner"


@pytest.mark.parametrize("phone, company_id", [("556", "ACME"), ("555", "acme"), ("555", "OTHER")])
def test_identify_requires_exact_match(db: Session, tenant, phone, company_id):
    with pytest.raises(AuthError):
        login.identify(db, phone, company_id)


def test_identify_suspended_tenant(db: Session, tenant):
    record = db.exec(select(Tenant).where(Tenant.api_key == tenant.api_key)).one()
    record.status = TenantStatus.SUSPENDED
    db.add(record)
    db.commit()

    with pytest.raises(AuthError) as exc:
        login.identify(db, "555", "ACME")
    assert exc.value.message == "Invalid company account"


def test_authenticate(db: Session, tenant):
    profile = login.authenticate(db, "555", "ACME", PASSWORD_DIGEST)

    assert profile.api_key == "acme_1234"
    assert profile.company_id == "ACME"
    assert profile.user_role == "Admin"

    admin = db.get(TenantUser, profile.id)
    assert admin.last_logged_in is not None


def test_authenticate_wrong_password(db: Session, tenant):
    wrong = hashlib.sha1(b"not-the-password").hexdigest()

    with pytest.raises(AuthError):
        login.authenticate(db, "555", "ACME", wrong)


def test_authenticate_deleted_user(db: Session, tenant):
    admin = db.exec(select(TenantUser).where(TenantUser.api_key == tenant.api_key)).one()
    admin.is_deleted = True
    db.add(admin)
    db.commit()

    with pytest.raises(InvalidCredentials):
        login.authenticate(db, "555", "ACME", PASSWORD_DIGEST)


def test_authenticate_unknown_phone_is_generic(db: Session, tenant):
    with pytest.raises(InvalidCredentials) as exc:
        login.authenticate(db, "999", "ACME", PASSWORD_DIGEST)
    assert exc.value.message == "Invalid credentials"


def test_complete_login_issues_token(db: Session, tenant):
    result = login.complete_login(db, "555", "ACME", PASSWORD_DIGEST)

    payload = decode_access_token(result.token)
    assert payload["api_key"] == "acme_1234"
    assert payload["sub"] == str(result.user_data.id)
    assert payload["role"] == "Admin"
    assert result.expires_in > 0
