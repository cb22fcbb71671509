from dataclasses import dataclass, field
from typing import Dict

from .types import RecognizerResult
from ..contracts import Activity
from ..errors import ConfigurationError

# Name of the LUIS application binding the bot resolves at construction.
LUIS_KEY = "QuizApp"


class Recognizer:
    """Protocol for NLU recognizers - must implement recognize method."""
    async def recognize(self, activity: Activity) -> RecognizerResult:
        """Recognize intents and entities in a message activity."""
        raise NotImplementedError


@dataclass
class BotServices:
    """Named recognizer bindings loaded from configuration."""
    luis_services: Dict[str, Recognizer] = field(default_factory=dict)

    def resolve(self, key: str = LUIS_KEY) -> Recognizer:
        try:
            return self.luis_services[key]
        except KeyError:
            raise ConfigurationError(
                f"Invalid configuration: no LUIS recognizer registered under '{key}'"
            ) from None
