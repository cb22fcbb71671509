"""
FastAPI HTTP server for QuizBot.

Exposes the bot's turn handler to HTTP clients: each POST to /api/messages is
one turn, and the replies the bot sent during it come back in the response.
"""

import logging
from typing import Optional, Callable, AsyncContextManager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from quizbot.core.config import Config
from quizbot.core.contracts import Activity
from quizbot.core.errors import PayloadParseError, RecognizerInvocationError
from quizbot.core.router import TurnRouter
from quizbot.core.turn import BufferedTurnContext

logger = logging.getLogger("server")


# Bot is built on first request unless one is passed to create_app
_bot: Optional[TurnRouter] = None


def get_bot() -> TurnRouter:
    """Get or create the configured bot instance."""
    global _bot
    if _bot is None:
        _bot = TurnRouter.from_services(Config.get_services(), entity_policy=Config.get_entity_policy())
    return _bot


def create_app(
    bot: Optional[TurnRouter] = None,
    lifespan: Optional[Callable[[FastAPI], AsyncContextManager]] = None,
) -> FastAPI:
    """
    Create FastAPI app with optional bot and lifespan.

    Args:
        bot: Bot to serve; defaults to one built from Config
        lifespan: Optional lifespan context manager for startup/shutdown

    Returns:
        FastAPI app instance
    """
    app_kwargs = {
        "title": "QuizBot API",
        "description": "Single-turn LUIS intent and entity bot",
        "version": "0.1.0"
    }

    if lifespan:
        app_kwargs["lifespan"] = lifespan

    app = FastAPI(**app_kwargs)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _resolve_bot() -> TurnRouter:
        return bot if bot is not None else get_bot()

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        "recognizer" is RECOGNIZER_MODE when the bot comes from Config, or the
        recognizer class name when a bot was passed to create_app.
        """
        if bot is None:
            recognizer = Config.RECOGNIZER_MODE
        else:
            recognizer = type(bot.processor.recognizer).__name__
        return {"status": "ok", "service": "quizbot", "recognizer": recognizer}

    @app.post("/api/messages")
    async def messages(request: dict):
        """
        Run one turn.

        Accepts JSON with:
        {
            "type": "message",
            "text": "book a meeting with Sam"
        }

        Returns JSON with the replies sent during the turn and, for message
        activities, the entity summary.
        """
        activity_type = request.get("type")
        if not isinstance(activity_type, str) or not activity_type.strip():
            raise HTTPException(status_code=400, detail="Activity type is required")
        text = request.get("text")
        if text is not None and not isinstance(text, str):
            raise HTTPException(status_code=400, detail="Activity text must be a string")

        context = BufferedTurnContext(Activity(type=activity_type.strip(), text=text))
        logger.info("Turn: %s (%d chars)", context.activity.type, len(text or ""))

        try:
            entity_summary = await _resolve_bot().on_turn(context)
        except RecognizerInvocationError as e:
            logger.error("Recognizer failed: %s", e)
            raise HTTPException(status_code=502, detail=f"Recognizer failed: {e}")
        except PayloadParseError as e:
            logger.error("Entity payload rejected: %s", e)
            raise HTTPException(status_code=500, detail=f"Turn failed: {e}")

        return {"replies": context.replies, "entity_summary": entity_summary}

    return app


# Default app instance (uvicorn quizbot.server:app)
app = create_app()
