"""
Notification Tests
In-app notifications raised by the workflow and their read state
"""

from conftest import auth_headers, create_request


class TestNotifications:

    def test_submission_notifies_requester(self, client, requester):
        pr = create_request(client, requester)

        response = client.get("/api/notifications", headers=auth_headers(requester))

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["unread_count"] == 1
        notification = data["notifications"][0]
        assert notification["title"] == "Purchase Request Submitted"
        assert notification["type"] == "success"
        assert notification["purchase_request_id"] == pr["id"]
        assert pr["requisition_number"] in notification["message"]

    def test_workflow_notifications_newest_first(self, client, requester, approver):
        pr = create_request(client, requester)
        client.post(
            f"/api/purchase-requests/{pr['id']}/return",
            json={"comments": "Missing quote"},
            headers=auth_headers(approver)
        )

        data = client.get("/api/notifications", headers=auth_headers(requester)).json()

        assert [n["title"] for n in data["notifications"]] == [
            "Purchase Request Returned",
            "Purchase Request Submitted",
        ]
        assert data["notifications"][0]["type"] == "warning"
        assert "Missing quote" in data["notifications"][0]["message"]

    def test_notifications_are_private(self, client, requester, other_requester):
        create_request(client, requester)

        data = client.get("/api/notifications", headers=auth_headers(other_requester)).json()
        assert data["total"] == 0

    def test_mark_one_read(self, client, requester):
        create_request(client, requester)
        create_request(client, requester)
        headers = auth_headers(requester)
        notification_id = client.get("/api/notifications", headers=headers).json()["notifications"][0]["id"]

        response = client.put(f"/api/notifications/{notification_id}/read", headers=headers)

        assert response.status_code == 200
        assert response.json()["is_read"] is True
        assert response.json()["read_at"] is not None
        assert client.get("/api/notifications/unread-count", headers=headers).json()["unread_count"] == 1

        unread = client.get("/api/notifications", params={"unread_only": True}, headers=headers).json()
        assert unread["total"] == 1
        assert unread["notifications"][0]["id"] != notification_id

    def test_mark_all_read(self, client, requester):
        create_request(client, requester)
        create_request(client, requester)
        headers = auth_headers(requester)

        response = client.put("/api/notifications/read-all", headers=headers)

        assert response.status_code == 200
        assert response.json()["updated"] == 2
        assert client.get("/api/notifications/unread-count", headers=headers).json()["unread_count"] == 0

    def test_cannot_mark_someone_elses_notification(self, client, requester, other_requester):
        create_request(client, requester)
        notification_id = client.get(
            "/api/notifications", headers=auth_headers(requester)
        ).json()["notifications"][0]["id"]

        response = client.put(f"/api/notifications/{notification_id}/read", headers=auth_headers(other_requester))
        assert response.status_code == 404
