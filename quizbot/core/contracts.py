from dataclasses import dataclass, asdict, field
from typing import Any, Optional
import time
import uuid


class ActivityTypes:
    """Activity type names understood by the transport."""
    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    CONTACT_RELATION_UPDATE = "contactRelationUpdate"
    TYPING = "typing"
    END_OF_CONVERSATION = "endOfConversation"
    EVENT = "event"
    INVOKE = "invoke"
    DELETE_USER_DATA = "deleteUserData"
    MESSAGE_UPDATE = "messageUpdate"
    MESSAGE_DELETE = "messageDelete"
    INSTALLATION_UPDATE = "installationUpdate"
    MESSAGE_REACTION = "messageReaction"
    SUGGESTION = "suggestion"
    TRACE = "trace"
    HANDOFF = "handoff"


# Inbound activity (read-only for the bot)
@dataclass(frozen=True, slots=True)
class Activity:
    type: str
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("Activity requires a non-empty type")

    @property
    def is_message(self) -> bool:
        return self.type == ActivityTypes.MESSAGE


# Base Event
@dataclass(slots=True)
class Event:
    topic: str
    ts_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    corr_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def dict(self) -> dict[str, Any]:
        return asdict(self)

# Transport Events

@dataclass(slots=True)
class ActivityReceived(Event):
    topic: str = "activity.received"
    activity_type: str = ActivityTypes.MESSAGE
    text: Optional[str] = None

    def to_activity(self) -> Activity:
        return Activity(type=self.activity_type, text=self.text)

@dataclass(slots=True)
class BotReply(Event):
    topic: str = "bot.reply"
    text: str = ""

# Debugging helper
def same_trace(parent: Event, child: Event) -> Event:
    """Copy corr_id so downstream events stay in the same trace."""
    child.corr_id = parent.corr_id
    return child

def to_dict(e: Event) -> dict[str, Any]:
    """Serialize any Event to a dict for the Bus or logging."""
    return e.dict()
