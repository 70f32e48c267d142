"""
Purchase Request Tests
Submission, numbering, access control, listing and details
"""

import pytest

from conftest import auth_headers, create_request, current_prefix, line_item_payload, request_payload


class TestCreatePurchaseRequest:

    def test_create_sets_initial_state(self, client, requester):
        data = create_request(client, requester)

        assert data["status"] == "submitted"
        assert data["current_approval_level"] == 1
        assert data["total_estimated_cost"] == 0
        assert data["requester_id"] == requester.id
        assert data["requisition_number"] == f"{current_prefix()}-001"

    def test_numbers_increment_per_department(self, client, requester):
        first = create_request(client, requester)
        second = create_request(client, requester)
        finance = create_request(client, requester, department="finance")

        assert first["requisition_number"].endswith("-001")
        assert second["requisition_number"].endswith("-002")
        assert finance["requisition_number"] == f"{current_prefix('FINA')}-001"

    def test_short_department_code(self, client, requester):
        data = create_request(client, requester, department="IT")
        assert data["requisition_number"] == f"{current_prefix('IT')}-001"

    def test_create_with_nested_line_items(self, client, requester):
        data = create_request(client, requester, line_items=[
            line_item_payload(quantity=2, unit_cost=500),
            line_item_payload(quantity=3, unit_cost=100, item_name="Dock"),
        ])

        assert data["total_estimated_cost"] == 1300

    def test_short_justification_rejected(self, client, requester):
        response = client.post(
            "/api/purchase-requests",
            json=request_payload(business_justification_details="too short"),
            headers=auth_headers(requester)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Validation error"

    def test_missing_title_rejected(self, client, requester):
        payload = request_payload()
        del payload["title"]

        response = client.post("/api/purchase-requests", json=payload, headers=auth_headers(requester))
        assert response.status_code == 400

    def test_requires_authentication(self, client):
        response = client.post("/api/purchase-requests", json=request_payload())
        assert response.status_code == 401


class TestViewPurchaseRequest:

    def test_owner_can_view(self, client, requester):
        created = create_request(client, requester)

        response = client.get(f"/api/purchase-requests/{created['id']}", headers=auth_headers(requester))
        assert response.status_code == 200
        assert response.json()["requisition_number"] == created["requisition_number"]

    def test_other_requester_forbidden(self, client, requester, other_requester):
        created = create_request(client, requester)

        response = client.get(f"/api/purchase-requests/{created['id']}", headers=auth_headers(other_requester))
        assert response.status_code == 403

    def test_approver_can_view(self, client, requester, approver):
        created = create_request(client, requester)

        response = client.get(f"/api/purchase-requests/{created['id']}", headers=auth_headers(approver))
        assert response.status_code == 200

    def test_not_found(self, client, requester):
        response = client.get("/api/purchase-requests/9999", headers=auth_headers(requester))

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Purchase request not found"}

    def test_details_include_children(self, client, requester, approver):
        created = create_request(client, requester, line_items=[line_item_payload(quantity=2, unit_cost=50)])
        client.post(
            f"/api/purchase-requests/{created['id']}/return",
            json={"comments": "Add a quote"},
            headers=auth_headers(approver)
        )
        client.post(f"/api/purchase-requests/{created['id']}/resubmit", headers=auth_headers(requester))

        response = client.get(f"/api/purchase-requests/{created['id']}/details", headers=auth_headers(requester))

        assert response.status_code == 200
        data = response.json()
        assert data["requester"]["id"] == requester.id
        assert len(data["line_items"]) == 1
        assert data["line_items"][0]["line_total"] == 100
        assert data["attachments"] == []
        assert [entry["action"] for entry in data["approval_history"]] == ["resubmit", "return"]
        assert data["approval_history"][1]["approver_name"] == approver.full_name


class TestListPurchaseRequests:

    def test_requester_sees_only_own(self, client, requester, other_requester):
        create_request(client, requester)
        create_request(client, other_requester)

        response = client.get("/api/purchase-requests", headers=auth_headers(requester))

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["requests"][0]["requester_id"] == requester.id

    def test_approver_sees_all(self, client, requester, other_requester, approver):
        create_request(client, requester)
        create_request(client, other_requester)

        response = client.get("/api/purchase-requests", headers=auth_headers(approver))
        assert response.json()["total"] == 2

    def test_filters_and_pagination(self, client, requester, approver):
        first = create_request(client, requester)
        create_request(client, requester)
        create_request(client, requester, department="Finance")
        client.post(f"/api/purchase-requests/{first['id']}/approve", headers=auth_headers(approver))
        headers = auth_headers(requester)

        approved = client.get("/api/purchase-requests", params={"status": "approved"}, headers=headers).json()
        finance = client.get("/api/purchase-requests", params={"department": "Finance"}, headers=headers).json()
        page = client.get("/api/purchase-requests", params={"skip": 1, "limit": 1}, headers=headers).json()

        assert approved["total"] == 1
        assert approved["requests"][0]["id"] == first["id"]
        assert finance["total"] == 1
        assert page["total"] == 3
        assert len(page["requests"]) == 1

    def test_invalid_status_filter(self, client, requester):
        response = client.get("/api/purchase-requests", params={"status": "archived"}, headers=auth_headers(requester))
        assert response.status_code == 400


class TestUpdatePurchaseRequest:

    def test_update_header_while_submitted(self, client, requester):
        created = create_request(client, requester)

        response = client.put(
            f"/api/purchase-requests/{created['id']}",
            json={"title": "Laptops and monitors"},
            headers=auth_headers(requester)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Laptops and monitors"
        assert data["requisition_number"] == created["requisition_number"]
        assert data["status"] == "submitted"

    def test_update_ignores_workflow_fields(self, client, requester):
        created = create_request(client, requester)

        response = client.put(
            f"/api/purchase-requests/{created['id']}",
            json={"status": "approved", "total_estimated_cost": 1},
            headers=auth_headers(requester)
        )

        assert response.status_code == 200
        assert response.json()["status"] == "submitted"
        assert response.json()["total_estimated_cost"] == 0

    def test_update_after_approval_conflicts(self, client, requester, approver):
        created = create_request(client, requester)
        client.post(f"/api/purchase-requests/{created['id']}/approve", headers=auth_headers(approver))

        response = client.put(
            f"/api/purchase-requests/{created['id']}",
            json={"title": "Too late"},
            headers=auth_headers(requester)
        )
        assert response.status_code == 409

    def test_other_requester_cannot_update(self, client, requester, other_requester):
        created = create_request(client, requester)

        response = client.put(
            f"/api/purchase-requests/{created['id']}",
            json={"title": "Not mine"},
            headers=auth_headers(other_requester)
        )
        assert response.status_code == 403

    @pytest.mark.parametrize("field", ["title", "request_date", "department", "business_justification_details"])
    def test_null_header_field_rejected(self, client, requester, field):
        created = create_request(client, requester)

        response = client.put(
            f"/api/purchase-requests/{created['id']}",
            json={field: None},
            headers=auth_headers(requester)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Validation error"

        unchanged = client.get(f"/api/purchase-requests/{created['id']}", headers=auth_headers(requester)).json()
        assert unchanged[field] == created[field]
