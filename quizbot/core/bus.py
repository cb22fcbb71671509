"""In-process async pub/sub used to carry activities and replies"""

from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List
import asyncio
import logging

Subscriber = Callable[[Dict[str, Any]], Awaitable[None]]

class Bus:
    def __init__(self):
        self._subs: Dict[str, List[Subscriber]] = defaultdict(list)
        self._log = logging.getLogger("bus")

    def subscribe(self, topic: str, fn: Subscriber) -> None:
        self._subs[topic].append(fn)
        self._log.debug("subscribe: %s -> %s (total: %d)", topic, getattr(fn, "__name__", str(fn)), len(self._subs[topic]))

    def unsubscribe(self, topic: str, fn: Subscriber) -> None:
        subs = self._subs.get(topic)
        if subs and fn in subs:
            subs.remove(fn)

    def subscribers(self, topic: str) -> int:
        return len(self._subs.get(topic, []))

    async def publish(self, topic: str, payload: Dict[str, Any]) -> List[BaseException]:
        """
        Deliver payload to every subscriber of topic and wait for them to finish.

        Subscriber failures are logged and returned, never raised, so one bad
        handler cannot stop delivery to the others.
        """
        subscribers = list(self._subs.get(topic, []))
        self._log.debug("publish: %s -> %d subscribers %s", topic, len(subscribers), list(payload.keys()))
        if not subscribers:
            self._log.warning("publish: no subscribers for topic %s", topic)
            return []

        tasks = [asyncio.create_task(fn(payload)) for fn in subscribers]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        errors: List[BaseException] = []
        for fn, result in zip(subscribers, results):
            if isinstance(result, BaseException):
                self._log.error("publish: subscriber %s on %s raised: %s", getattr(fn, "__name__", str(fn)), topic, result, exc_info=result)
                errors.append(result)
        return errors

    def clear(self):
        self._subs.clear()
