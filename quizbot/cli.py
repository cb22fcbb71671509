import typer
import asyncio
import json
from quizbot.app import main as app_main

app = typer.Typer(help="QuizBot CLI")

@app.command("run")
def run_bot():
    """Run QuizBot in interactive mode."""
    asyncio.run(app_main())

@app.command("recognize")
def recognize(text: str, raw: bool = typer.Option(False, "--raw", help="Print the full recognizer result as JSON")):
    """Run TEXT through the configured recognizer and print what was understood."""
    from dataclasses import asdict
    from quizbot.core.config import Config
    from quizbot.core.contracts import Activity, ActivityTypes
    from quizbot.core.nlu.entities import extract_entity_summary
    from quizbot.core.nlu.intents import format_top_intent, select_top_intent

    recognizer = Config.get_recognizer()
    result = asyncio.run(recognizer.recognize(Activity(type=ActivityTypes.MESSAGE, text=text)))
    if raw:
        typer.echo(json.dumps(asdict(result), indent=2))
    typer.echo(format_top_intent(select_top_intent(result)).rstrip())
    typer.echo(extract_entity_summary(result, policy=Config.get_entity_policy()))

@app.command("config")
def show_config():
    """Print the current configuration."""
    from quizbot.core.config import Config
    Config.print_config()

@app.command("server")
def server(
    host: str = typer.Option(None, "--host", "-H", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to"),
):
    """Start QuizBot's HTTP endpoint (POST /api/messages)."""
    import logging
    import uvicorn
    from contextlib import asynccontextmanager
    from quizbot.core.config import Config
    from quizbot.app import build_bot
    from quizbot.server import create_app

    if host:
        Config.SERVER_HOST = host
    if port:
        Config.SERVER_PORT = port

    logging.basicConfig(level=Config.LOG_LEVEL.upper(), format="[%(levelname)s] %(name)s: %(message)s")

    # Resolve the recognizer binding before binding the socket
    bot = build_bot()

    @asynccontextmanager
    async def lifespan(app_instance):
        typer.echo(f"Starting HTTP server on {Config.SERVER_HOST}:{Config.SERVER_PORT}")
        typer.echo("API endpoints available at:")
        typer.echo("   - POST /api/messages")
        typer.echo("   - GET  /health")
        typer.echo("Press Ctrl+C to stop\n")
        yield
        typer.echo("\nStopped.")

    uvicorn.run(
        create_app(bot=bot, lifespan=lifespan),
        host=Config.SERVER_HOST,
        port=Config.SERVER_PORT,
        log_level=Config.LOG_LEVEL.lower(),
    )

if __name__ == "__main__":
    app()
