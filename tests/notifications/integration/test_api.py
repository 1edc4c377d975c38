import pytest


@pytest.fixture()
def send(client, admin, auth_headers):
    def _send(recipient, **fields):
        body = {"to": recipient.id, "title": "Weekend sale", "message": "20% off all fruit", **fields}
        return client.post("/api/notifications", json=body, headers=auth_headers(admin))

    return _send


class TestSendEndpoint:
    def test_admin_sends_and_pushes(self, send, customer, admin, push):
        response = send(customer, type="product_added", data={"productId": "p-1"})

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["recipientId"] == customer.id
        assert data["senderId"] == admin.id
        assert data["senderRole"] == "admin"
        assert data["read"] is False
        assert data["data"] == {"productId": "p-1"}

        [pushed] = push.sent_to(customer.id)
        assert pushed["title"] == "Weekend sale"

    def test_customers_cannot_send(self, client, customer, auth_headers):
        response = client.post(
            "/api/notifications",
            json={"to": customer.id, "title": "Hi", "message": "Hello"},
            headers=auth_headers(customer),
        )
        assert response.status_code == 403

    def test_title_too_long(self, send, customer):
        response = send(customer, title="x" * 101)

        assert response.status_code == 400
        assert "title" in response.json()["message"]

    def test_unknown_recipient(self, client, admin, auth_headers):
        response = client.post(
            "/api/notifications",
            json={"to": "missing", "title": "Hi", "message": "Hello"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 404


class TestInboxEndpoints:
    def test_list_and_unread_count(self, client, send, customer, auth_headers):
        send(customer)
        send(customer, title="Second")
        headers = auth_headers(customer)

        listing = client.get("/api/notifications/me", headers=headers).json()["data"]
        assert listing["pagination"]["total"] == 2
        assert {n["title"] for n in listing["notifications"]} == {"Weekend sale", "Second"}

        count = client.get("/api/notifications/me/unread-count", headers=headers).json()["data"]
        assert count == {"count": 2}

    def test_mark_one_read(self, client, send, customer, auth_headers):
        notification_id = send(customer).json()["data"]["id"]
        headers = auth_headers(customer)

        response = client.patch(f"/api/notifications/{notification_id}/read", headers=headers)
        assert response.json()["data"]["read"] is True

        unread = client.get("/api/notifications/me", params={"read": "false"}, headers=headers).json()["data"]
        assert unread["notifications"] == []

    def test_mark_all_read(self, client, send, customer, auth_headers):
        send(customer)
        send(customer)

        response = client.patch("/api/notifications/me/read-all", headers=auth_headers(customer))
        assert response.json()["data"] == {"updated": 2}

    def test_someone_elses_notification(self, client, send, customer, make_user, auth_headers):
        notification_id = send(customer).json()["data"]["id"]

        response = client.patch(f"/api/notifications/{notification_id}/read", headers=auth_headers(make_user()))
        assert response.status_code == 403
