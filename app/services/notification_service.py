"""
Transactional emails sent through Resend
"""

import logging
import os
from typing import Any, Dict, Optional

import resend
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", "email")

templates = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


class NotificationService:
    """Sends vote confirmations and completion notices.

    Send methods never raise: they return {"success": True, "data": ...} or
    {"success": False, "error": ...} and log failures.
    """

    def __init__(self, api_key: Optional[str] = None, sender: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.sender = sender or settings.EMAIL_FROM

    def _send(self, recipient_email: str, subject: str, html: str) -> Dict[str, Any]:
        if not self.api_key:
            logger.warning(f"RESEND_API_KEY not set; skipping email '{subject}' to {recipient_email}")
            return {"success": False, "error": "Email delivery is not configured"}

        resend.api_key = self.api_key
        try:
            response = resend.Emails.send({
                "from": self.sender,
                "to": [recipient_email],
                "subject": subject,
                "html": html,
            })
        except Exception as e:
            logger.error(f"Failed to send email '{subject}' to {recipient_email}: {e}")
            return {"success": False, "error": str(e)}

        logger.info(f"Email '{subject}' sent to {recipient_email}")
        return {"success": True, "data": response}

    def send_vote_confirmation(
        self,
        recipient_email: str,
        participant_name: str,
        event_name: str,
        date_time: str,
    ) -> Dict[str, Any]:
        html = templates.get_template("vote_confirmation.html").render(
            participant_name=participant_name,
            event_name=event_name,
            date_time=date_time,
        )
        return self._send(recipient_email, f"Vote Confirmation - {event_name}", html)

    def send_event_completion_notification(
        self,
        recipient_email: str,
        participant_name: str,
        event_name: str,
        final_date_time: Optional[str] = None,
        location: Optional[str] = None,
        details: Optional[str] = None,
    ) -> Dict[str, Any]:
        html = templates.get_template("event_completion.html").render(
            participant_name=participant_name,
            event_name=event_name,
            final_date_time=final_date_time,
            location=location,
            details=details,
        )
        return self._send(recipient_email, f"Event Completed - {event_name}", html)
