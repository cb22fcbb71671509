from typing import Optional
from .types import IntentScore, RecognizerResult

NONE_INTENT = "None"
NO_INTENTS_MESSAGE = "No LUIS intents were found"


def select_top_intent(result: Optional[RecognizerResult]) -> Optional[IntentScore]:
    """
    Pick the highest scoring intent.

    Equal scores resolve to the intent the recognizer listed first.
    Returns None when there is no result or it carries no intents.
    """
    if result is None or not result.intents:
        return None
    # max() keeps the first of several equal keys
    name, score = max(result.intents.items(), key=lambda kv: kv[1])
    return IntentScore(intent=name, score=score)


def format_top_intent(top: Optional[IntentScore]) -> str:
    if top is None or top.intent == NONE_INTENT:
        return NO_INTENTS_MESSAGE
    return f"==>LUIS Top Scoring Intent: {top.intent}, Score: {top.score}\n"
