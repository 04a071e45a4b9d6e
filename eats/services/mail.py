import asyncio
import logging
import threading
from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from eats.core.config import settings

logger = logging.getLogger("eats.mail")

# strong references to in-flight sends; the loop only keeps weak ones
_pending_sends = set()


class MailService:
    """SMTP mail delivery. Sending never raises: it reports success as a bool."""

    def __init__(self, host: str = None, port: int = None, user: str = None,
                 password: str = None, sender: str = None, use_ssl: bool = None,
                 frontend_url: str = None):
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port if port is not None else settings.SMTP_PORT
        self.user = user if user is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASS
        self.sender = sender if sender is not None else settings.SMTP_FROM
        self.use_ssl = use_ssl if use_ssl is not None else settings.SMTP_SSL
        self.frontend_url = frontend_url or settings.FRONTEND_URL

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user and self.password)

    async def send_message(self, message: EmailMessage) -> bool:
        if not self.configured:
            logger.warning(f"SMTP not configured (SMTP_HOST/SMTP_USER/SMTP_PASS); skipping mail to {message['To']}")
            return False
        use_tls = self.use_ssl or self.port == 465
        start_tls = not use_tls and self.port in (587, 25)
        logger.info(f"Sending e-mail to {message['To']} via {self.host}:{self.port} TLS={use_tls} STARTTLS={start_tls}")
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.user,
                password=self.password,
                start_tls=start_tls,
                use_tls=use_tls,
            )
        except Exception as e:
            logger.error(f"Failed to send e-mail to {message['To']}: {e}")
            return False
        logger.info(f"E-mail sent to {message['To']}.")
        return True

    def build_message(self, subject: str, to_email: str, plain: str, html: Optional[str] = None) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(plain)
        if html:
            msg.add_alternative(html, subtype="html", charset="utf-8")
        return msg

    def build_verification_email(self, to_email: str, code: str) -> EmailMessage:
        verify_url = f"{self.frontend_url}/confirm?code={code}"
        plain = (
            f"Hello {to_email},\n\nPlease confirm your account by opening the link below:\n\n{verify_url}\n\n"
            "If you did not create an account, ignore this e-mail."
        )
        html = f"""
    <html>
        <body style='font-family: Arial, sans-serif;'>
            <h2>Verify your e-mail</h2>
            <p>Hello {to_email},</p>
            <p><a href='{verify_url}'>Confirm your account</a></p>
        </body>
    </html>
    """
        return self.build_message("Verify Your Email", to_email, plain, html)

    def send_in_background(self, message: EmailMessage) -> None:
        """Fire-and-forget: callers never wait for SMTP and never see its errors."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            task = loop.create_task(self.send_message(message))
            _pending_sends.add(task)
            task.add_done_callback(_pending_sends.discard)
            return
        threading.Thread(target=asyncio.run, args=(self.send_message(message),), daemon=True).start()

    def send_verification_email(self, email: str, code: str) -> None:
        self.send_in_background(self.build_verification_email(email, code))


def get_mail_service() -> MailService:
    return MailService()
