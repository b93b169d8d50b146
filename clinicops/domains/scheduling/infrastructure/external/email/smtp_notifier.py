"""
SMTP delivery of online consultation links.
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from clinicops.config.settings import Settings, get_settings
from clinicops.domains.scheduling.application.ports.meeting_port import IMeetingNotifier

logger = logging.getLogger(__name__)

MEETING_SUBJECT = "Online consultation information"


class SmtpMeetingNotifier(IMeetingNotifier):
    """Sends meeting links by email. smtplib is blocking, so it runs in a worker thread."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def build_message(self, email: str, meeting_url: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = MEETING_SUBJECT
        msg["From"] = self.settings.EMAIL_FROM
        msg["To"] = email

        text = (
            "Your online consultation has been scheduled.\n\n"
            f"Join the meeting at the scheduled time using this link:\n{meeting_url}\n"
        )
        html = (
            "<p>Your online consultation has been scheduled.</p>"
            f'<p>Join the meeting at the scheduled time: <a href="{meeting_url}">{meeting_url}</a></p>'
        )
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))
        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        server = self.settings.SMTP_SERVER
        if not server:
            raise RuntimeError("SMTP_SERVER is not configured")

        with smtplib.SMTP(server, self.settings.SMTP_PORT, timeout=self.settings.SMTP_TIMEOUT_SECONDS) as smtp:
            smtp.starttls()
            if self.settings.SMTP_USERNAME and self.settings.SMTP_PASSWORD:
                smtp.login(self.settings.SMTP_USERNAME, self.settings.SMTP_PASSWORD)
            smtp.send_message(msg)

    async def send_meeting_link(self, email: str, meeting_url: str) -> None:
        await asyncio.to_thread(self._send, self.build_message(email, meeting_url))
        logger.info(f"Meeting link sent to {email}")
