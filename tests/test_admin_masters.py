"""
Admin Master Data Tests
Registry dispatch, per-type validation and user management
"""

import pytest

from purchase_portal.models.user import User

from conftest import TEST_PASSWORD, auth_headers


def _url(master_type, record_id=None):
    url = f"/api/admin/masters/{master_type}"
    return f"{url}/{record_id}" if record_id is not None else url


class TestAccess:

    def test_requires_admin(self, client, approver):
        response = client.get(_url("departments"), headers=auth_headers(approver))
        assert response.status_code == 403

    def test_unknown_type(self, client, admin):
        response = client.get(_url("spaceships"), headers=auth_headers(admin))

        assert response.status_code == 404
        assert response.json()["message"] == "Unknown master type: spaceships"

    def test_lists_types(self, client, admin):
        types = client.get("/api/admin/masters", headers=auth_headers(admin)).json()["types"]
        assert "approval-matrix" in types and "vendors" in types and len(types) == 9


class TestCrud:

    def test_department_lifecycle(self, client, admin):
        headers = auth_headers(admin)

        created = client.post(_url("departments"), json={"code": "OPS", "name": "Operations"}, headers=headers)
        assert created.status_code == 201
        record_id = created.json()["record"]["id"]

        updated = client.put(_url("departments", record_id), json={"cost_center": "CC-100"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["record"]["cost_center"] == "CC-100"
        assert updated.json()["record"]["name"] == "Operations"

        listed = client.get(_url("departments"), headers=headers).json()
        assert listed["total"] == 1

        deleted = client.delete(_url("departments", record_id), headers=headers)
        assert deleted.status_code == 200
        assert client.get(_url("departments"), headers=headers).json()["total"] == 0

    def test_duplicate_code_conflicts(self, client, admin):
        headers = auth_headers(admin)
        client.post(_url("locations"), json={"code": "BLR", "name": "Bangalore"}, headers=headers)

        response = client.post(_url("locations"), json={"code": "BLR", "name": "Bengaluru"}, headers=headers)
        assert response.status_code == 409

    @pytest.mark.parametrize("master_type, payload", [
        ("approval-matrix", {"department": "Ops", "location": "BLR", "level": 1, "role": "approver",
                             "min_amount": 500, "max_amount": 100}),
        ("escalation-matrix", {"site": "Campus", "location": "BLR", "approver_name": "A",
                               "approver_email": "not-an-email"}),
        ("inventory", {"item_code": "LAP-1", "name": "Laptop", "unit_of_measure": "Nos", "quantity": -1}),
        ("roles", {"name": "Missing code"}),
    ])
    def test_invalid_payloads(self, client, admin, master_type, payload):
        response = client.post(_url(master_type), json=payload, headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"] == "Validation error"
        assert response.json()["errors"]

    @pytest.mark.parametrize("master_type, create_payload, field", [
        ("departments", {"code": "OPS", "name": "Operations"}, "name"),
        ("vendors", {"vendor_code": "V-1", "name": "Acme"}, "vendor_code"),
        ("approval-matrix", {"department": "Ops", "location": "BLR", "level": 1, "role": "approver"}, "min_amount"),
    ])
    def test_null_required_field_rejected_on_update(self, client, admin, master_type, create_payload, field):
        headers = auth_headers(admin)
        record = client.post(_url(master_type), json=create_payload, headers=headers).json()["record"]

        response = client.put(_url(master_type, record["id"]), json={field: None}, headers=headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Validation error"
        listed = client.get(_url(master_type), headers=headers).json()["records"]
        assert listed[0][field] == record[field]

    def test_optional_field_can_be_cleared(self, client, admin):
        headers = auth_headers(admin)
        record = client.post(
            _url("departments"), json={"code": "OPS", "name": "Operations", "cost_center": "CC-1"}, headers=headers
        ).json()["record"]

        response = client.put(_url("departments", record["id"]), json={"cost_center": None}, headers=headers)

        assert response.status_code == 200
        assert response.json()["record"]["cost_center"] is None

    def test_role_permissions_round_trip(self, client, admin):
        response = client.post(
            _url("roles"),
            json={"code": "APR", "name": "Approver", "level": 2, "permissions": ["approve_request"]},
            headers=auth_headers(admin)
        )
        assert response.json()["record"]["permissions"] == ["approve_request"]

    def test_update_unknown_record(self, client, admin):
        response = client.put(_url("vendors", 999), json={"name": "Ghost"}, headers=auth_headers(admin))
        assert response.status_code == 404


class TestUserMaster:

    def _create_user(self, client, admin, **overrides):
        payload = {
            "employee_number": "EMP500",
            "full_name": "Created By Admin",
            "email": "created@example.com",
            "department": "Operations",
            "location": "Bangalore",
            "password": "createdpass1",
            "role": "approver",
        }
        payload.update(overrides)
        return client.post(_url("users"), json=payload, headers=auth_headers(admin))

    def test_create_user_hashes_password(self, client, db, admin):
        response = self._create_user(client, admin)

        assert response.status_code == 201
        record = response.json()["record"]
        assert record["role"] == "approver"
        assert "hashed_password" not in record
        assert "password" not in record

        user = db.query(User).filter(User.employee_number == "EMP500").first()
        assert user.hashed_password != "createdpass1"

        login = client.post("/api/auth/login", json={"employee_number": "EMP500", "password": "createdpass1"})
        assert login.status_code == 200

    def test_duplicate_employee_number(self, client, admin, requester):
        response = self._create_user(client, admin, employee_number=requester.employee_number)

        assert response.status_code == 400
        assert response.json()["message"] == "Employee number already exists"

    def test_duplicate_email(self, client, admin, requester):
        response = self._create_user(client, admin, email=requester.email)
        assert response.status_code == 400

    def test_delete_deactivates_user(self, client, db, admin, requester):
        response = client.delete(_url("users", requester.id), headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["record"]["is_active"] is False

        db.expire_all()
        assert db.query(User).filter(User.id == requester.id).first() is not None

        login = client.post(
            "/api/auth/login",
            json={"employee_number": requester.employee_number, "password": TEST_PASSWORD}
        )
        assert login.status_code == 401

    def test_admin_cannot_deactivate_self(self, client, admin):
        response = client.delete(_url("users", admin.id), headers=auth_headers(admin))
        assert response.status_code == 400

    def test_update_user_role(self, client, admin, requester):
        response = client.put(_url("users", requester.id), json={"role": "approver"}, headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["record"]["role"] == "approver"

    def test_null_user_email_rejected(self, client, admin, requester):
        response = client.put(_url("users", requester.id), json={"email": None}, headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["message"] == "Validation error"
