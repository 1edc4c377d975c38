"""Push channel port: live delivery of a stored notification to a user.

Every connection a user opens joins the room ``user:<id>``; a push goes to
the whole room, so all of the user's open sessions receive it. Delivery is
best effort: the stored notification is the record, the push only a nudge.
"""

from abc import ABC, abstractmethod
from typing import Literal, NotRequired, TypedDict


class PushResult(TypedDict):
    message_id: str | None
    status: Literal["sent", "failed"]
    error: NotRequired[str]


def room_for(recipient_id: str) -> str:
    return f"user:{recipient_id}"


class PushPort(ABC):
    @abstractmethod
    def send(self, recipient_id: str, title: str, body: str, data: dict | None = None) -> PushResult:
        """Push to the recipient's room. Never raises for delivery failures."""
