import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


class EmailNotifier:
    """
    Sends one email per call and reports whether it went out.

    No retries: a failed send is reported to the caller, who decides what
    happens next.
    """

    template_name = 'emails/capsule_notification.html'

    def __init__(self, from_email=None, connection=None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self.connection = connection

    def send(self, recipient_address, subject, body):
        try:
            html_content = render_to_string(self.template_name, {
                'subject': subject,
                'paragraphs': [p for p in body.split('\n\n') if p.strip()],
            })
            email = EmailMultiAlternatives(
                subject, body, self.from_email, [recipient_address],
                connection=self.connection,
            )
            email.attach_alternative(html_content, "text/html")
            sent = email.send()
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Failed to send notification email",
                extra={"recipient": recipient_address, "subject": subject, "error": str(e)},
                exc_info=True,
            )
            return False
        return sent > 0
