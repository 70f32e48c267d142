"""
Password Reset Tests
Forgot password OTP issue and reset, with the email service mocked
"""

from datetime import datetime, timedelta
from unittest.mock import patch

from purchase_portal.models.user import User
from purchase_portal.services.email_service import email_service


def _request_otp(client, email):
    with patch.object(email_service, "send_password_reset_otp", return_value=True) as mock_send:
        response = client.post("/api/forgot-password", json={"email": email})
    assert response.status_code == 200
    return mock_send


class TestForgotPassword:

    def test_otp_is_emailed_and_stored_hashed(self, client, db, requester):
        mock_send = _request_otp(client, requester.email)

        mock_send.assert_called_once()
        to_email, full_name, otp = mock_send.call_args[0]
        assert to_email == requester.email
        assert len(otp) == 6 and otp.isdigit()

        db.expire_all()
        user = db.query(User).filter(User.id == requester.id).first()
        assert user.reset_token is not None
        assert user.reset_token != otp
        assert user.reset_token_expires_at > datetime.utcnow() + timedelta(minutes=14)

    def test_unknown_email_gets_same_answer(self, client):
        with patch.object(email_service, "send_password_reset_otp", return_value=True) as mock_send:
            response = client.post("/api/forgot-password", json={"email": "nobody@example.com"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        mock_send.assert_not_called()


class TestResetPassword:

    def test_reset_with_valid_otp(self, client, requester):
        otp = _request_otp(client, requester.email).call_args[0][2]

        response = client.post("/api/reset-password", json={
            "email": requester.email,
            "otp": otp,
            "new_password": "resetpass99",
            "confirm_password": "resetpass99",
        })
        assert response.status_code == 200

        login = client.post(
            "/api/auth/login",
            json={"employee_number": requester.employee_number, "password": "resetpass99"}
        )
        assert login.status_code == 200

    def test_otp_is_single_use(self, client, requester):
        otp = _request_otp(client, requester.email).call_args[0][2]
        payload = {
            "email": requester.email,
            "otp": otp,
            "new_password": "resetpass99",
            "confirm_password": "resetpass99",
        }

        assert client.post("/api/reset-password", json=payload).status_code == 200
        assert client.post("/api/reset-password", json=payload).status_code == 400

    def test_wrong_otp(self, client, requester):
        otp = _request_otp(client, requester.email).call_args[0][2]
        wrong = "000000" if otp != "000000" else "111111"

        response = client.post("/api/reset-password", json={
            "email": requester.email,
            "otp": wrong,
            "new_password": "resetpass99",
            "confirm_password": "resetpass99",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid OTP. Please try again."

    def test_expired_otp(self, client, db, requester):
        otp = _request_otp(client, requester.email).call_args[0][2]

        db.expire_all()
        user = db.query(User).filter(User.id == requester.id).first()
        user.reset_token_expires_at = datetime.utcnow() - timedelta(minutes=1)
        db.commit()

        response = client.post("/api/reset-password", json={
            "email": requester.email,
            "otp": otp,
            "new_password": "resetpass99",
            "confirm_password": "resetpass99",
        })

        assert response.status_code == 400
        assert "expired" in response.json()["message"]

    def test_reset_without_request(self, client, requester):
        response = client.post("/api/reset-password", json={
            "email": requester.email,
            "otp": "123456",
            "new_password": "resetpass99",
            "confirm_password": "resetpass99",
        })
        assert response.status_code == 400
