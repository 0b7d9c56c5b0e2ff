"""In-memory email channel for development and tests."""

import threading
from uuid import uuid4

from commerce.config import get_settings
from commerce.notification.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps every delivered message in ``sent_emails``.

    Checkouts on worker threads share one instance, so the outbox is guarded
    by a lock. ``configure(should_succeed=False)`` makes every send report a
    failure, which is how tests exercise the best-effort notification path.
    """

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self._lock = threading.Lock()

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, to: str, subject: str, body: str) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message = {
            "message_id": f"email-{uuid4().hex[:12]}",
            "sender": get_settings().notification_sender,
            "to": to,
            "subject": subject,
            "body": body,
        }
        with self._lock:
            self.sent_emails.append(message)
        return {"message_id": message["message_id"], "status": "sent"}

    def sent_to(self, address: str) -> list[dict]:
        with self._lock:
            return [message for message in self.sent_emails if message["to"] == address]

    def reset(self):
        with self._lock:
            self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
