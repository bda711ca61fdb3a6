"""
End-to-end tests through the HTTP API
"""

import uuid
from sqlmodel import select
from fastapi.testclient import TestClient

from resto_console.models.tenant_collection import TenantCollection

from tests.conftest import PASSWORD_DIGEST


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_instance(client: TestClient):
    response = client.post("/api/instances/create", json={
        "companyName": "Spice Garden",
        "companyEmail": "hello@spicegarden.com",
        "userName": "Priya",
        "userPhone": "900",
        "password": PASSWORD_DIGEST,
    })

    assert response.status_code == 201
    body = response.json()
    assert body["apiKey"].startswith("spicegar_")
    assert body["companyId"] == "SP10001"
    assert len(body["collections"]) == 5


def test_create_instance_validation(client: TestClient):
    response = client.post("/api/instances/create", json={"companyName": "No Owner"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_create_instance_duplicate_phone(client: TestClient, tenant):
    response = client.post("/api/instances/create", json={
        "companyName": "Second",
        "userName": "Olivia",
        "userPhone": "555",
        "password": PASSWORD_DIGEST,
    })

    assert response.status_code == 400
    assert response.json()["error"] == "A user with this phone number already exists"


def test_two_phase_login(client: TestClient, tenant):
    check = client.post("/api/login/check", json={"userPhone": "555", "companyId": "ACME"})
    assert check.status_code == 200
    assert check.json()["apiKey"] == "acme_1234"

    complete = client.post("/api/login/complete", json={
        "userPhone": "555",
        "companyId": "ACME",
        "password": PASSWORD_DIGEST,
    })
    assert complete.status_code == 200
    body = complete.json()
    assert body["tokenType"] == "bearer"
    assert body["userData"]["userRole"] == "Admin"
    assert body["userData"]["apiKey"] == "acme_1234"
    assert "_id" in body["userData"]


def test_login_failures(client: TestClient, tenant):
    check = client.post("/api/login/check", json={"userPhone": "555", "companyId": "NOPE"})
    assert check.status_code == 401

    complete = client.post("/api/login/complete", json={
        "userPhone": "555",
        "companyId": "ACME",
        "password": "0" * 40,
    })
    assert complete.status_code == 401
    assert complete.json() == {"error": "Invalid credentials"}


def test_bearer_token_scopes_requests(client: TestClient, tenant):
    token = client.post("/api/login/complete", json={
        "userPhone": "555",
        "companyId": "ACME",
        "password": PASSWORD_DIGEST,
    }).json()["token"]

    response = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["total"] == 1

    mismatch = client.get("/api/users", headers={
        "Authorization": f"Bearer {token}",
        "X-API-Key": "other_0001",
    })
    assert mismatch.status_code == 401


def test_invalid_bearer_token(client: TestClient, tenant):
    response = client.get("/api/users", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401


def test_menu_flow(client: TestClient, api_headers):
    created = client.post("/api/menu", headers=api_headers, json={
        "itemName": "Masala Dosa",
        "Category": "Mains",
        "MRP": 120,
        "isVeg": True,
    })
    assert created.status_code == 201
    item = created.json()
    assert item["itemCode"] == "1001"
    assert item["MRP"] == 120.0
    assert item["Category"] == "Mains"

    listed = client.get("/api/menu", headers=api_headers).json()
    assert [i["_id"] for i in listed] == [item["_id"]]
    assert len(client.get("/api/menu/category/Mains", headers=api_headers).json()) == 1

    exists = client.get("/api/menu/check-name", headers=api_headers, params={"name": "Masala Dosa"})
    assert exists.json() == {"exists": True}
    excluded = client.get(
        "/api/menu/check-name",
        headers=api_headers,
        params={"name": "Masala Dosa", "excludeId": item["_id"]},
    )
    assert excluded.json() == {"exists": False}
    assert client.get("/api/menu/check-code", headers=api_headers, params={"code": "1001"}).json()["exists"]

    updated = client.put(f"/api/menu/{item['_id']}", headers=api_headers, json={"MRP": "130"})
    assert updated.status_code == 200
    assert updated.json()["MRP"] == 130.0

    deleted = client.delete(f"/api/menu/{item['_id']}", headers=api_headers)
    assert deleted.status_code == 200
    assert deleted.json()["success"] is True
    assert client.get("/api/menu", headers=api_headers).json() == []


def test_menu_rejects_bad_price(client: TestClient, api_headers):
    response = client.post("/api/menu", headers=api_headers, json={"itemName": "Dosa", "MRP": -5})

    assert response.status_code == 400
    assert response.json()["error"] == "Price must be a valid number greater than 0"


def test_menu_without_api_key(client: TestClient, tenant):
    assert client.get("/api/menu").json() == []

    response = client.post("/api/menu", json={"itemName": "Dosa", "MRP": 10})
    assert response.status_code == 401
    assert response.json() == {"error": "API key is required"}


def test_api_key_in_body(client: TestClient, tenant):
    response = client.post("/api/menu", json={"itemName": "Dosa", "MRP": 10, "apiKey": tenant.api_key})

    assert response.status_code == 201
    assert response.json()["apiKey"] == tenant.api_key


def test_unknown_menu_item(client: TestClient, api_headers):
    response = client.delete(f"/api/menu/{uuid.uuid4()}", headers=api_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Menu item not found"}


def test_settings_endpoints(client: TestClient, api_headers):
    assert client.get("/api/settings/generate-code", headers=api_headers).json() == {"code": "1001"}
    assert client.get("/api/settings/generate-code", headers=api_headers).json() == {"code": "1002"}

    catalog = client.get("/api/settings/catalog", headers=api_headers).json()
    assert catalog["itemEdit"] is True

    updated = client.put("/api/settings/catalog", headers=api_headers, json={"itemDelete": True})
    assert updated.status_code == 200
    assert updated.json()["itemDelete"] is True

    roles = client.post("/api/settings/userRoles", headers=api_headers, json={"role": "Cashier"})
    assert roles.json()["roles"][-1] == "Cashier"
    duplicate = client.post("/api/settings/userRoles", headers=api_headers, json={"role": "Cashier"})
    assert duplicate.status_code == 400

    assert client.get("/api/settings/unknown", headers=api_headers).status_code == 404


def test_settings_defaults_without_api_key(client: TestClient):
    response = client.get("/api/settings/userRoles")

    assert response.status_code == 200
    assert response.json()["roles"] == ["Admin", "Manager", "Staff"]


def test_users_flow(client: TestClient, api_headers):
    created = client.post("/api/users", headers=api_headers, json={
        "userName": "Sam",
        "userPhone": "600",
        "userRole": "Staff",
        "password": PASSWORD_DIGEST,
    })
    assert created.status_code == 201
    user_id = created.json()["_id"]

    by_role = client.get("/api/users", headers=api_headers, params={"role": "Staff"}).json()
    assert [u["_id"] for u in by_role] == [user_id]

    page = client.get("/api/users", headers=api_headers, params={"pageSize": 1}).json()
    assert page["total"] == 2
    assert page["totalPages"] == 2

    updated = client.put(f"/api/users/{user_id}", headers=api_headers, json={"userEmail": "sam@acmecafe.com"})
    assert updated.json()["userEmail"] == "sam@acmecafe.com"

    deleted = client.delete(f"/api/users/{user_id}", headers=api_headers)
    assert deleted.json()["isDeleted"] is True
    assert client.get(f"/api/users/{user_id}", headers=api_headers).json()["isDeleted"] is True

    restored = client.post(f"/api/users/{user_id}/re-enable", headers=api_headers)
    assert restored.status_code == 200
    assert restored.json()["isDeleted"] is False
    assert restored.json()["reEnabledDate"] is not None

    removed = client.delete(f"/api/users/{user_id}/permanent", headers=api_headers)
    assert removed.status_code == 200
    missing = client.get(f"/api/users/{user_id}", headers=api_headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "User not found"}


def test_create_user_validation(client: TestClient, api_headers):
    response = client.post("/api/users", headers=api_headers, json={"userName": "Sam", "userPhone": "600"})

    assert response.status_code == 400
    assert response.json()["field"] == "userRole"


def test_export_users_csv(client: TestClient, api_headers):
    response = client.get("/api/users/export/csv", headers=api_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    lines = response.text.strip().split("\n")
    assert lines[0] == "Name,Phone Number,Email,Role,User Status,Created Date,Deleted Date"
    assert lines[1].startswith("Olivia Owner,555,olivia@acmecafe.com,Admin,Active,")


def test_users_require_api_key(client: TestClient, tenant):
    response = client.get("/api/users")

    assert response.status_code == 401


def test_menu_rejects_boolean_price(client: TestClient, api_headers):
    response = client.post("/api/menu", headers=api_headers, json={"itemName": "Dosa", "MRP": True})

    assert response.status_code == 400
    assert client.get("/api/menu", headers=api_headers).json() == []


def test_unknown_api_key_registers_nothing(client: TestClient, db):
    for i in range(3):
        response = client.get("/api/users", headers={"X-API-Key": f"bogus_{i}"})
        assert response.status_code == 404
        assert response.json() == {"error": "Tenant not found"}

    assert db.exec(select(TenantCollection)).all() == []
