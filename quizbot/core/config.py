"""
Configuration management for QuizBot.

Supports environment variables and .env files for choosing the recognizer
(local rules vs remote LUIS), LUIS credentials and server settings.
"""

import os
import logging
from typing import Literal
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("config")

# Load .env file if available
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
    logger.debug("Loaded .env file from %s", env_path)
else:
    # Also try loading from current directory
    load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """
    Centralized configuration for QuizBot.

    Reads from environment variables with sensible defaults.
    """

    # Recognizer Configuration
    RECOGNIZER_MODE: Literal["local", "remote"] = os.getenv("RECOGNIZER_MODE", "local")
    LUIS_APP_ID: str = os.getenv("LUIS_APP_ID", "")
    LUIS_ENDPOINT_KEY: str = os.getenv("LUIS_ENDPOINT_KEY", "")
    LUIS_ENDPOINT: str = os.getenv("LUIS_ENDPOINT", "https://westus.api.cognitive.microsoft.com")
    LUIS_STAGING: bool = _flag("LUIS_STAGING", "false")
    LUIS_TIMEOUT: float = float(os.getenv("LUIS_TIMEOUT", "10.0"))

    # Entity payload handling
    ENTITY_PARSE_POLICY: Literal["skip", "abort"] = os.getenv("ENTITY_PARSE_POLICY", "skip")

    # Server Configuration
    SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
    SERVER_PORT: int = int(os.getenv("SERVER_PORT", "3978"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def get_recognizer(cls):
        """
        Get the recognizer selected by RECOGNIZER_MODE.

        Returns:
            Recognizer instance (RulesRecognizer or LuisRecognizer)

        Raises:
            ConfigurationError: remote mode without complete LUIS settings
        """
        if cls.RECOGNIZER_MODE == "remote":
            from quizbot.core.nlu.luis_adapter import LuisRecognizer
            logger.info(
                "Using LUIS recognizer: %s (app: %s, staging: %s, timeout: %.1fs)",
                cls.LUIS_ENDPOINT, cls.LUIS_APP_ID or "unset", cls.LUIS_STAGING, cls.LUIS_TIMEOUT
            )
            return LuisRecognizer(
                app_id=cls.LUIS_APP_ID,
                endpoint_key=cls.LUIS_ENDPOINT_KEY,
                endpoint=cls.LUIS_ENDPOINT,
                staging=cls.LUIS_STAGING,
                timeout=cls.LUIS_TIMEOUT,
            )
        else:
            from quizbot.core.nlu.rules import RulesRecognizer
            logger.info("Using local rules recognizer")
            return RulesRecognizer()

    @classmethod
    def get_services(cls):
        """Recognizer bindings keyed by application name."""
        from quizbot.core.nlu.recognizer import LUIS_KEY, BotServices
        return BotServices(luis_services={LUIS_KEY: cls.get_recognizer()})

    @classmethod
    def get_entity_policy(cls):
        from quizbot.core.errors import ConfigurationError
        from quizbot.core.nlu.entities import EntityParsePolicy
        try:
            return EntityParsePolicy(cls.ENTITY_PARSE_POLICY.lower())
        except ValueError:
            raise ConfigurationError(
                f"ENTITY_PARSE_POLICY must be 'skip' or 'abort', got '{cls.ENTITY_PARSE_POLICY}'"
            ) from None

    @classmethod
    def print_config(cls):
        """Print current configuration (useful for debugging)."""
        print("\nQuizBot Configuration:")
        print(f"  Recognizer Mode: {cls.RECOGNIZER_MODE}")
        if cls.RECOGNIZER_MODE == "remote":
            print(f"    Endpoint: {cls.LUIS_ENDPOINT}")
            print(f"    App ID: {cls.LUIS_APP_ID or '(unset)'}")
            print(f"    Endpoint Key: {'set' if cls.LUIS_ENDPOINT_KEY else '(unset)'}")
            print(f"    Staging: {cls.LUIS_STAGING}")
            print(f"    Timeout: {cls.LUIS_TIMEOUT}s")
        print(f"  Entity Parse Policy: {cls.ENTITY_PARSE_POLICY}")
        print(f"  Server: {cls.SERVER_HOST}:{cls.SERVER_PORT}")
        print(f"  Log Level: {cls.LOG_LEVEL}")
        print()
