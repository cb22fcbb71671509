from typing import List
from .contracts import Activity


class TurnContext:
    """Protocol for one turn: the inbound activity plus a way to reply."""

    def __init__(self, activity: Activity):
        self.activity = activity

    async def send_activity(self, text: str) -> None:
        """Send a text reply back through the transport."""
        raise NotImplementedError


class BufferedTurnContext(TurnContext):
    """Collects replies in memory; the HTTP transport returns them in its response body."""

    def __init__(self, activity: Activity):
        super().__init__(activity)
        self.replies: List[str] = []

    async def send_activity(self, text: str) -> None:
        self.replies.append(text)
