import logging

from .nlu.entities import EntityParsePolicy, extract_entity_summary
from .nlu.intents import format_top_intent, select_top_intent
from .nlu.recognizer import Recognizer
from .turn import TurnContext


class IntentProcessor:
    """
    Handles one message turn: recognize, pick the top intent, summarize entities.

    Only the top-intent line is sent back to the user. The entity summary is
    logged and returned to the caller.
    """

    def __init__(self, recognizer: Recognizer, entity_policy: EntityParsePolicy = EntityParsePolicy.SKIP):
        self.recognizer = recognizer
        self.entity_policy = EntityParsePolicy(entity_policy)
        self.log = logging.getLogger("processor")

    async def process(self, context: TurnContext) -> str:
        activity = context.activity
        self.log.info("Processor: Recognizing: '%s'", activity.text or "")
        result = await self.recognizer.recognize(activity)

        # Entities are summarized before replying so an aborted decode sends nothing.
        entity_summary = extract_entity_summary(result, policy=self.entity_policy)

        top = select_top_intent(result)
        if top is not None:
            self.log.info("Processor: Top intent %s (score: %.2f)", top.intent, top.score)
        else:
            self.log.info("Processor: No intents returned")
        await context.send_activity(format_top_intent(top))

        self.log.info("Processor: %s", entity_summary)
        return entity_summary
