"""Exception types raised by the QuizBot core."""


class QuizBotError(Exception):
    """Base class for QuizBot errors."""


class ConfigurationError(QuizBotError):
    """Recognizer binding missing or unusable. Raised at construction time."""


class RecognizerInvocationError(QuizBotError):
    """The NLU recognizer call failed (network, auth, timeout, bad response)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PayloadParseError(QuizBotError):
    """An entity value could not be decoded into a known shape."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"cannot decode entity '{key}': {reason}")
        self.key = key
        self.reason = reason
