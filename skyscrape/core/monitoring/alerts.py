"""Alert sinks notified when selectors stop matching the upstream markup."""

import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage

from skyscrape.config import MailConfig
from skyscrape.models import SelectorHealthReport

ALERT_SUBJECT = 'Weather API Selector Failure Alert'


def alert_message(report: SelectorHealthReport) -> str:
    """Build the operator-facing alert text for a report."""
    return (
        f'The following selectors failed validation: {", ".join(report.alert_fields)}. '
        'Please update the environment variables or fallback selectors.'
    )


class AlertSink(ABC):
    """Receives selector health alerts."""

    @abstractmethod
    def send(self, report: SelectorHealthReport) -> None:
        """Deliver an alert for an unhealthy report."""


class LoggingAlertSink(AlertSink):
    """Writes alerts to the log. Used when e-mail is not configured."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def send(self, report: SelectorHealthReport) -> None:
        self.logger.error(f'Admin Alert: {alert_message(report)}')


class EmailAlertSink(AlertSink):
    """Sends alerts to the administrator over SMTP (implicit TLS).

    Attributes:
        mail: SMTP settings and recipient
        timeout: SMTP connection timeout in seconds

    """

    def __init__(self, mail: MailConfig, timeout: float = 10.0):
        """Initialize the e-mail sink.

        Args:
            mail: SMTP settings; must be complete (``mail.enabled``)
            timeout: SMTP connection timeout in seconds. Defaults to 10.

        """
        if not mail.enabled:
            raise ValueError('EmailAlertSink requires ADMIN_EMAIL, MAIL_USER and MAIL_PASS')
        self.mail = mail
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def build_message(self, report: SelectorHealthReport) -> EmailMessage:
        """Build the alert e-mail with plain-text and HTML bodies."""
        text = alert_message(report)

        message = EmailMessage()
        message['Subject'] = ALERT_SUBJECT
        message['From'] = f'"Weather API Alert" <{self.mail.user}>'
        message['To'] = self.mail.admin_email
        message.set_content(f'{text}\nPlease check the selectors at {report.url} or update fallback selectors.')
        message.add_alternative(
            '<p><strong>Selector Validation Failed</strong></p>'
            f'<p>{text}</p>'
            f'<p>Please check the selectors at <a href="{report.url}">{report.url}</a> '
            'or update fallback selectors.</p>',
            subtype='html',
        )
        return message

    def send(self, report: SelectorHealthReport) -> None:
        self.logger.error(f'Admin Alert: {alert_message(report)}')

        message = self.build_message(report)
        context = ssl.create_default_context()
        with smtplib.SMTP_SSL(self.mail.host, self.mail.port, timeout=self.timeout, context=context) as server:
            server.login(self.mail.user or '', self.mail.password or '')
            server.send_message(message)

        self.logger.info(f'Email alert sent to {self.mail.admin_email}')


def create_alert_sink(mail: MailConfig) -> AlertSink:
    """Return an e-mail sink when mail is configured, else a logging sink."""
    if mail.enabled:
        return EmailAlertSink(mail)

    logging.getLogger(__name__).warning(
        'Email notifications disabled: set ADMIN_EMAIL, MAIL_USER and MAIL_PASS to enable them'
    )
    return LoggingAlertSink()
