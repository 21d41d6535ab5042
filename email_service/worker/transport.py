import logging
from email.utils import make_msgid

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection

from .exceptions import DispatchError

logger = logging.getLogger(__name__)


class SmtpTransport:
    # Outbound delivery through Django's configured email backend

    def __init__(self, backend: str = None, default_from: str = None, msgid_domain: str = None):
        self.backend = backend
        self.default_from = default_from or settings.DEFAULT_FROM_EMAIL
        self.msgid_domain = msgid_domain or getattr(settings, 'EMAIL_MESSAGE_ID_DOMAIN', None)

    def get_connection(self):
        return get_connection(backend=self.backend, fail_silently=False)

    def send(self, to: str, subject: str, html: str, text: str = None, from_email: str = None) -> str:
        """Deliver one message and return its Message-ID."""
        message_id = make_msgid(domain=self.msgid_domain)
        message = EmailMultiAlternatives(
            subject=subject,
            body=text if text is not None else html,
            from_email=from_email or self.default_from,
            to=[to],
            headers={'Message-ID': message_id},
            connection=self.get_connection(),
        )
        message.attach_alternative(html, 'text/html')

        try:
            sent = message.send(fail_silently=False)
        except Exception as e:
            logger.error(f"SMTP send failed: {e}")
            raise DispatchError(str(e) or e.__class__.__name__) from e

        if not sent:
            raise DispatchError(f"SMTP backend accepted no messages for {to}")
        return message_id

    def verify(self) -> bool:
        # Liveness check: open and close one SMTP connection
        connection = self.get_connection()
        try:
            connection.open()
            connection.close()
            return True
        except Exception as e:
            logger.error(f"Email transporter verification failed: {e}")
            return False
