"""
Notifier implementations

ConsoleNotifier writes messages to the log (development).
SmtpNotifier delivers them over SMTP.
"""

import logging
from email.message import EmailMessage

import aiosmtplib

from src.app.errors import ConfigurationError
from src.app.services.notifier import INotifier

logger = logging.getLogger(__name__)


class ConsoleNotifier(INotifier):
    """Logs emails instead of sending them"""

    async def send_email(self, to: str, subject: str, body: str) -> None:
        logger.info("--- SIMULATING EMAIL SEND ---")
        logger.info(f"To: {to}")
        logger.info(f"Subject: {subject}")
        logger.info(f"Body:\n{body}")
        logger.info("--- END EMAIL SIMULATION ---")


class SmtpNotifier(INotifier):
    """Sends emails through an SMTP relay"""

    def __init__(
        self,
        hostname: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = False,
    ):
        self.hostname = hostname
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls

    async def send_email(self, to: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        await aiosmtplib.send(
            message,
            hostname=self.hostname,
            port=self.port,
            username=self.username or None,
            password=self.password or None,
            use_tls=self.use_tls,
        )
        logger.info(f"Email '{subject}' sent to {to}")


def build_notifier(config) -> INotifier:
    backend = config.NOTIFIER_BACKEND
    if backend == "smtp":
        return SmtpNotifier(
            hostname=config.SMTP_HOST,
            port=config.SMTP_PORT,
            sender=config.EMAIL_FROM,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
        )
    if backend == "console":
        return ConsoleNotifier()
    raise ConfigurationError(f"Unknown NOTIFIER_BACKEND: {backend}")
