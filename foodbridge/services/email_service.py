import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
import logging

from foodbridge.core.config import Settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(
        self,
        smtp_server: Optional[str],
        smtp_port: int,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        admin_email: Optional[str] = None,
        frontend_url: str = "http://localhost:3000",
        timeout: int = 10,
    ):
        self.smtp_server = smtp_server
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email or smtp_username
        self.admin_email = admin_email or self.from_email
        self.frontend_url = frontend_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            smtp_server=settings.smtp_server,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
            from_email=settings.from_email,
            admin_email=settings.admin_email,
            frontend_url=settings.frontend_url,
            timeout=settings.smtp_timeout,
        )

    def send_email(self, to_email: str, subject: str, body: str, html_body: Optional[str] = None,
                   reply_to: Optional[str] = None) -> bool:
        """Send one message. Returns False instead of raising when delivery fails."""
        if not self.smtp_server:
            logger.warning(f"SMTP server not configured, email to {to_email} not sent")
            return False
        try:
            if html_body:
                msg = MIMEMultipart('alternative')
                msg.attach(MIMEText(body, 'plain'))
                msg.attach(MIMEText(html_body, 'html'))
            else:
                msg = MIMEText(body)
            msg["Subject"] = subject
            msg["From"] = self.from_email
            msg["To"] = to_email
            if reply_to:
                msg["Reply-To"] = reply_to

            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                if self.smtp_username and self.smtp_password:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {str(e)}")
            return False

    def send_otp_email(self, to_email: str, code: str, ttl_minutes: int) -> bool:
        subject = "Your OTP for Registration"
        body = f"Your OTP code is {code}. It is valid for {ttl_minutes} minutes."
        return self.send_email(to_email, subject, body)

    def send_approval_email(self, to_email: str, organization_name: str, user_type: str) -> bool:
        """Tell a newly approved organization it can log in"""
        login_url = f"{self.frontend_url}/login"
        subject = "Your Registration Request has been Approved!"
        text_body = f"""
Dear {organization_name},

Your registration request has been approved as a {user_type.lower()}! You can now log in and start using our services:

{login_url}

Best Regards,
Admin Team
        """.strip()
        html_body = f"""
        <html>
            <body>
                <p>Dear <strong>{organization_name}</strong>,</p>
                <p>Your registration request has been <strong>approved</strong> as a {user_type.lower()}!</p>
                <p>You can now <a href="{login_url}">log in</a> and start using our services.</p>
                <p>Best Regards,<br><strong>Admin Team</strong></p>
            </body>
        </html>
        """
        return self.send_email(to_email, subject, text_body, html_body)

    def send_contact_notification(self, name: str, email: str, message: str) -> bool:
        if not self.admin_email:
            logger.warning("No admin email configured, contact notification not sent")
            return False
        subject = "New Contact Form Submission"
        body = f"You have received a new message from:\n\nName: {name}\nEmail: {email}\nMessage: {message}"
        return self.send_email(self.admin_email, subject, body, reply_to=email)
