import asyncio
import logging
from typing import Optional
from quizbot.core.bus import Bus
from quizbot.core.channel import Channel
from quizbot.core.config import Config
from quizbot.core.contracts import ActivityReceived, ActivityTypes, BotReply
from quizbot.core.router import TurnRouter


def build_bot() -> TurnRouter:
    """Build the bot from configuration; fails fast if the LUIS binding is missing."""
    return TurnRouter.from_services(Config.get_services(), entity_policy=Config.get_entity_policy())


async def start_components(bus: Bus, bot: Optional[TurnRouter] = None) -> Channel:
    """Subscribe the channel and the console reply printer to the bus."""
    channel = Channel(bus, bot or build_bot())
    await channel.start()

    async def print_reply(payload: dict) -> None:
        reply = BotReply(**payload)
        print(f"bot> {reply.text.rstrip()}")

    bus.subscribe("bot.reply", print_reply)
    return channel


def parse_input(line: str) -> ActivityReceived:
    """
    Turn a REPL line into an activity event.

    "/<type>" sends a non-message activity of that type (e.g. "/conversationUpdate");
    anything else is a message.
    """
    if line.startswith("/") and len(line) > 1 and " " not in line:
        return ActivityReceived(activity_type=line[1:], text=None)
    return ActivityReceived(activity_type=ActivityTypes.MESSAGE, text=line)


async def repl(bus: Bus) -> None:
    """Tiny REPL that publishes activity.received for each line typed."""
    print("\nQuizBot Interactive Mode")
    print("Type a message to run it through the recognizer, '/<type>' for other activities, 'quit' to exit.")

    while True:
        try:
            print("\n> ", end="", flush=True)
            # input in worker thread to keep event loop responsive
            user_input = await asyncio.to_thread(input)
            user_input = user_input.strip()

            if user_input.lower() in ["quit", "exit", "q"]:
                break

            if user_input:
                event = parse_input(user_input)
                errors = await bus.publish(event.topic, event.dict())
                for err in errors:
                    print(f"bot> (turn failed: {err})")

        except KeyboardInterrupt:
            break
        except EOFError:
            break


async def main() -> None:
    logging.basicConfig(level=Config.LOG_LEVEL.upper(), format="[%(levelname)s] %(name)s: %(message)s")
    bus = Bus()
    print("Starting QuizBot...")
    Config.print_config()
    await start_components(bus)
    print("Components ready.")
    await repl(bus)
    bus.clear()
    print("Stopped.")


if __name__ == "__main__":
    asyncio.run(main())
