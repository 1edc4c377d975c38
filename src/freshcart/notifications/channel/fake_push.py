"""Fake push adapter: keeps pushes in memory instead of a socket server.

Used by the tests and as the default channel when nothing else is
installed, so a local run logs each push rather than dropping it.
"""

from uuid import uuid4

import structlog

from freshcart.notifications.channel.push_port import PushPort, PushResult, room_for

logger = structlog.get_logger(__name__)

DEFAULT_FAILURE = "Push delivery failed"


class FakePushAdapter(PushPort):
    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.should_succeed = True
        self.failure_reason = DEFAULT_FAILURE

    def configure(self, should_succeed: bool = True, failure_reason: str = DEFAULT_FAILURE):
        """Make subsequent sends fail (or succeed again)."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, recipient_id: str, title: str, body: str, data: dict | None = None) -> PushResult:
        if not self.should_succeed:
            logger.debug("push_rejected", recipient_id=recipient_id, reason=self.failure_reason)
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        push = {
            "message_id": f"push-{uuid4().hex[:12]}",
            "room": room_for(recipient_id),
            "recipient_id": recipient_id,
            "title": title,
            "body": body,
            "data": data,
        }
        self.sent_pushes.append(push)
        logger.debug("push_recorded", room=push["room"], message_id=push["message_id"])
        return {"message_id": push["message_id"], "status": "sent"}

    def sent_to(self, recipient_id: str) -> list[dict]:
        return [push for push in self.sent_pushes if push["recipient_id"] == recipient_id]

    def reset(self):
        self.sent_pushes.clear()
        self.should_succeed = True
        self.failure_reason = DEFAULT_FAILURE
