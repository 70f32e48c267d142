"""
Dashboard Tests
"""

from conftest import auth_headers, create_request, line_item_payload


def _stats(client, user):
    response = client.get("/api/dashboard/stats", headers=auth_headers(user))
    assert response.status_code == 200
    return response.json()


def test_requester_sees_own_counts(client, requester, other_requester, approver):
    mine = create_request(client, requester, line_items=[line_item_payload(quantity=2, unit_cost=500)])
    create_request(client, requester)
    create_request(client, other_requester)
    client.post(f"/api/purchase-requests/{mine['id']}/approve", headers=auth_headers(approver))

    stats = _stats(client, requester)

    assert stats["total_requests"] == 2
    assert stats["pending_requests"] == 1
    assert stats["approved_requests"] == 1
    assert stats["rejected_requests"] == 0
    assert stats["total_value"] == 1000


def test_approver_sees_all_counts(client, requester, other_requester, approver):
    first = create_request(client, requester)
    second = create_request(client, other_requester)
    create_request(client, other_requester)
    client.post(f"/api/purchase-requests/{first['id']}/reject", headers=auth_headers(approver))
    client.post(f"/api/purchase-requests/{second['id']}/return", headers=auth_headers(approver))

    stats = _stats(client, approver)

    assert stats["total_requests"] == 3
    assert stats["pending_requests"] == 1
    assert stats["rejected_requests"] == 1
    assert stats["returned_requests"] == 1
    assert stats["total_value"] == 0


def test_empty_dashboard(client, requester):
    assert _stats(client, requester) == {
        "total_requests": 0,
        "pending_requests": 0,
        "approved_requests": 0,
        "rejected_requests": 0,
        "returned_requests": 0,
        "total_value": 0,
    }
