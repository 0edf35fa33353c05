import logging

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig

import config

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        try:
            self.config = ConnectionConfig(
                MAIL_USERNAME=config.EMAIL_USER,
                MAIL_PASSWORD=config.EMAIL_PASSWORD,
                MAIL_FROM=config.EMAIL_FROM,
                MAIL_PORT=config.EMAIL_PORT,
                MAIL_SERVER=config.EMAIL_SERVER,
                MAIL_FROM_NAME=config.EMAIL_FROM_NAME,
                MAIL_STARTTLS=config.EMAIL_STARTTLS,
                MAIL_SSL_TLS=config.EMAIL_SSL_TLS,
                USE_CREDENTIALS=bool(config.EMAIL_USER),
                VALIDATE_CERTS=True,
                TIMEOUT=int(config.NOTIFICATION_TIMEOUT_SECONDS),
            )
            self.mailer = FastMail(self.config)
        except Exception as e:
            raise Exception(f"Failed to initialize email service: {str(e)}")

    async def send_email(self, to_email: str, subject: str, body: str, subtype: str = "html"):
        """Send a single email; delivery errors propagate to the caller."""
        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=body,
            subtype=subtype,
        )
        await self.mailer.send_message(message)
        logger.info("Email sent to %s: %s", to_email, subject)
