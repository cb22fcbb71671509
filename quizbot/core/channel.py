import logging

from .bus import Bus
from .contracts import ActivityReceived, BotReply, same_trace, to_dict
from .router import TurnRouter
from .turn import TurnContext


class BusTurnContext(TurnContext):
    """Publishes each reply on 'bot.reply' in the same trace as the inbound event."""

    def __init__(self, bus: Bus, event: ActivityReceived):
        super().__init__(event.to_activity())
        self.bus = bus
        self.event = event

    async def send_activity(self, text: str) -> None:
        reply = BotReply(text=text)
        same_trace(self.event, reply)
        await self.bus.publish(reply.topic, to_dict(reply))


class Channel:
    """
    Listens on 'activity.received' and runs the bot; replies go out on 'bot.reply'.
    """

    def __init__(self, bus: Bus, bot: TurnRouter):
        self.bus = bus
        self.bot = bot
        self.log = logging.getLogger("channel")

    async def start(self):
        self.bus.subscribe("activity.received", self._on_activity)

    async def _on_activity(self, payload: dict):
        try:
            event = ActivityReceived(**payload)
            context = BusTurnContext(self.bus, event)
        except (TypeError, ValueError):
            self.log.warning("Channel: Malformed activity.received event, skipping")
            return

        self.log.info("Channel: Turn %s (%s)", event.corr_id, event.activity_type)
        try:
            await self.bot.on_turn(context)
        except Exception as e:
            # Bus.publish hands the error back to whoever published the activity.
            self.log.exception("Channel: Turn %s failed: %s", event.corr_id, e)
            raise
