"""
Recognizer binding resolution at construction time.
"""
import pytest

from quizbot.core.errors import ConfigurationError
from quizbot.core.nlu.recognizer import LUIS_KEY, BotServices
from quizbot.core.nlu.rules import RulesRecognizer
from quizbot.core.router import TurnRouter


def test_luis_key():
    assert LUIS_KEY == "QuizApp"


def test_from_services_resolves_binding():
    recognizer = RulesRecognizer()
    bot = TurnRouter.from_services(BotServices(luis_services={LUIS_KEY: recognizer}))
    assert bot.processor.recognizer is recognizer


def test_from_services_missing_key_raises():
    services = BotServices(luis_services={"OtherApp": RulesRecognizer()})
    with pytest.raises(ConfigurationError, match="QuizApp"):
        TurnRouter.from_services(services)


def test_from_services_empty_table_raises():
    with pytest.raises(ConfigurationError):
        TurnRouter.from_services(BotServices())


def test_custom_key():
    recognizer = RulesRecognizer()
    bot = TurnRouter.from_services(BotServices(luis_services={"Calendar": recognizer}), key="Calendar")
    assert bot.processor.recognizer is recognizer


def test_recognizer_required():
    with pytest.raises(TypeError):
        TurnRouter(None)
