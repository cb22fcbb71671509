import logging
from typing import Optional

from .nlu.entities import EntityParsePolicy
from .nlu.recognizer import LUIS_KEY, BotServices, Recognizer
from .processor import IntentProcessor
from .turn import TurnContext


class TurnRouter:
    """
    Single-turn bot:
      - Message activities go to the IntentProcessor (one recognizer call, one reply).
      - Any other activity type is acknowledged with "<type> event detected".
    Holds no per-conversation state, so concurrent turns need no locking.
    """

    def __init__(self, recognizer: Recognizer, entity_policy: EntityParsePolicy = EntityParsePolicy.SKIP):
        if recognizer is None:
            raise TypeError("recognizer is required")
        self.processor = IntentProcessor(recognizer, entity_policy=entity_policy)
        self.log = logging.getLogger("router")

    @classmethod
    def from_services(
        cls,
        services: BotServices,
        key: str = LUIS_KEY,
        entity_policy: EntityParsePolicy = EntityParsePolicy.SKIP,
    ) -> "TurnRouter":
        """Resolve the named recognizer once; raises ConfigurationError if it is not registered."""
        return cls(services.resolve(key), entity_policy=entity_policy)

    async def on_turn(self, context: TurnContext) -> Optional[str]:
        """
        Process one activity.

        Returns:
            The entity summary for message turns, None for every other type.
        """
        activity = context.activity
        if activity.is_message:
            return await self.processor.process(context)

        self.log.info("Router: Non-message activity: %s", activity.type)
        await context.send_activity(f"{activity.type} event detected")
        return None
