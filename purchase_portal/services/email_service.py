"""
Email Service
Sends password reset OTPs and purchase request status emails
"""

import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from purchase_portal.config.settings import settings
from purchase_portal.utils.helpers import format_currency
from purchase_portal.utils.logger import setup_logger

logger = setup_logger()


STATUS_COLOURS = {
    "approved": "#4CAF50",
    "pending": "#2196F3",
    "rejected": "#f44336",
    "returned": "#FF9800",
    "cancelled": "#757575",
}


class EmailService:
    """Email service for portal notifications"""

    def __init__(self):
        """Initialize email service with SMTP configuration"""
        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.FROM_EMAIL or self.smtp_username
        self.from_name = settings.FROM_NAME

        # Check if email is configured
        self.is_configured = bool(self.smtp_username and self.smtp_password)

        if not self.is_configured:
            logger.warning("Email service not configured. Set SMTP credentials in .env file.")

    def send_email(self, to_email: str, subject: str, html_body: str, text_body: Optional[str] = None) -> bool:
        """
        Send email via SMTP

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_body: HTML email body
            text_body: Plain text fallback (optional)

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        if not self.is_configured:
            logger.warning(f"Email not sent to {to_email} - SMTP not configured")
            return False

        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = f"{self.from_name} <{self.from_email}>"
            msg['To'] = to_email

            if text_body:
                msg.attach(MIMEText(text_body, 'plain'))
            msg.attach(MIMEText(html_body, 'html'))

            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Email sent to {to_email}: {subject}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {str(e)}")
            return False

    def send_password_reset_otp(self, to_email: str, full_name: str, otp: str) -> bool:
        """Send the one-time password for a password reset"""
        minutes = settings.PASSWORD_RESET_OTP_MINUTES
        subject = f"Password Reset OTP - {settings.APP_NAME}"

        html_body = f"""
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2>Password Reset</h2>
        <p>Dear {full_name},</p>
        <p>You requested to reset your password. Use the OTP below to reset your password:</p>
        <div style="background: #f5f5f5; padding: 20px; text-align: center; font-size: 32px; letter-spacing: 8px;">
            <strong>{otp}</strong>
        </div>
        <p>This OTP is valid for <strong>{minutes} minutes</strong>.</p>
        <p>If you did not request a password reset, you can ignore this email.</p>
    </div>
</body>
</html>
"""

        text_body = f"""
Dear {full_name},

Your password reset OTP is: {otp}

This OTP is valid for {minutes} minutes.
If you did not request a password reset, you can ignore this email.
"""

        return self.send_email(to_email, subject, html_body, text_body)

    def send_request_status_update(
        self,
        to_email: str,
        full_name: str,
        requisition_number: str,
        status: str,
        total: float,
        comments: Optional[str] = None
    ) -> bool:
        """
        Tell the requester that their purchase request changed status

        Args:
            to_email: Requester email
            full_name: Requester name
            requisition_number: Requisition number
            status: New status
            total: Total estimated cost
            comments: Approver comments (optional)
        """
        colour = STATUS_COLOURS.get(status, "#333")
        subject = f"Purchase Request {status.title()} - {requisition_number}"
        comments_html = f"<p><strong>Comments:</strong> {comments}</p>" if comments else ""

        html_body = f"""
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: {colour};">Purchase Request {status.title()}</h2>
        <p>Dear {full_name},</p>
        <p>Your purchase request <strong>{requisition_number}</strong> is now
        <strong style="color: {colour};">{status}</strong>.</p>
        <p><strong>Total estimated cost:</strong> {format_currency(total)}</p>
        {comments_html}
    </div>
</body>
</html>
"""

        text_body = (
            f"Dear {full_name},\n\n"
            f"Your purchase request {requisition_number} is now {status}.\n"
            f"Total estimated cost: {format_currency(total)}\n"
        )
        if comments:
            text_body += f"Comments: {comments}\n"

        return self.send_email(to_email, subject, html_body, text_body)


# Create singleton instance
email_service = EmailService()
