"""
LUIS recognizer that queries a published LUIS v2 application over HTTP.

Endpoint Expected:
    GET {endpoint}/luis/v2.0/apps/{app_id}?q=<text>&verbose=true&staging=<bool>&log=<bool>
    Header: Ocp-Apim-Subscription-Key: <endpoint key>

    Response:
        {
            "query": "...",
            "alteredQuery": "...",                       (optional)
            "topScoringIntent": {"intent": "...", "score": 0.9},
            "intents": [{"intent": "...", "score": 0.9}, ...],
            "entities": [{"entity": "...", "type": "...", "startIndex": 0,
                          "endIndex": 3, "score": 0.8, "resolution": {...}}],
            "compositeEntities": [...],                  (optional)
            "sentimentAnalysis": {"label": "...", "score": 0.5}  (optional)
        }

The JSON is mapped into a RecognizerResult: intents keep LUIS ordering and
entities are grouped by normalized type name, with per-occurrence metadata
under "$instance".
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .recognizer import Recognizer
from .types import RecognizerResult
from ..contracts import Activity
from ..errors import ConfigurationError, RecognizerInvocationError

logger = logging.getLogger("luis")

INSTANCE_KEY = "$instance"


def normalize_entity_name(entity_type: str) -> str:
    """'builtin.datetimeV2.date' -> 'datetimeV2_date', 'Meeting Room' -> 'Meeting_Room'."""
    name = entity_type
    if name.startswith("builtin."):
        name = name[len("builtin."):]
    return name.replace(".", "_").replace(" ", "_")


def _entity_value(entity: Dict[str, Any]) -> Any:
    resolution = entity.get("resolution")
    if isinstance(resolution, dict):
        values = resolution.get("values")
        if isinstance(values, list) and values:
            return values[0]
        if "value" in resolution:
            return resolution["value"]
    return entity.get("entity", "")


def _entity_instance(entity: Dict[str, Any]) -> Dict[str, Any]:
    instance = {
        "startIndex": entity.get("startIndex"),
        # LUIS reports an inclusive end index
        "endIndex": entity.get("endIndex", -1) + 1,
        "text": entity.get("entity", ""),
        "type": entity.get("type", ""),
    }
    if "score" in entity:
        instance["score"] = entity["score"]
    return instance


def _score(value: Any) -> float:
    """Keep JSON numbers as LUIS sent them (1 stays 1, not 1.0)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"score is not a number: {value!r}")
    return value


def _map_luis_response(data: Dict[str, Any]) -> RecognizerResult:
    intents: Dict[str, float] = {}
    for item in data.get("intents") or []:
        intents[item["intent"]] = _score(item.get("score", 0.0))
    top = data.get("topScoringIntent")
    if not intents and top:
        intents[top["intent"]] = _score(top.get("score", 0.0))

    entities: Dict[str, Any] = {}
    instances: Dict[str, list] = {}
    for entity in data.get("entities") or []:
        name = normalize_entity_name(entity.get("type", ""))
        entities.setdefault(name, []).append(_entity_value(entity))
        instances.setdefault(name, []).append(_entity_instance(entity))

    for composite in data.get("compositeEntities") or []:
        parent = normalize_entity_name(composite.get("parentType", ""))
        children: Dict[str, list] = {}
        for child in composite.get("children") or []:
            children.setdefault(normalize_entity_name(child.get("type", "")), []).append(child.get("value"))
        entities.setdefault(parent, []).append(children)

    if instances:
        entities[INSTANCE_KEY] = instances

    properties: Dict[str, Any] = {}
    if data.get("sentimentAnalysis"):
        properties["sentiment"] = data["sentimentAnalysis"]

    return RecognizerResult(
        text=data.get("query", ""),
        altered_text=data.get("alteredQuery"),
        intents=intents,
        entities=entities,
        properties=properties,
    )


def parse_luis_response(data: Dict[str, Any]) -> RecognizerResult:
    """
    Map a LUIS v2 JSON response onto RecognizerResult.

    Raises:
        RecognizerInvocationError: the body is not a LUIS response object,
            or one of its intents/entities has the wrong shape
    """
    if not isinstance(data, dict):
        raise RecognizerInvocationError(f"unexpected LUIS response: {type(data).__name__}")
    try:
        return _map_luis_response(data)
    except (TypeError, AttributeError, KeyError, ValueError) as e:
        logger.error("Malformed LUIS response: %s", e)
        raise RecognizerInvocationError(f"malformed LUIS response: {e}") from e


async def recognize_text_async(
    text: str,
    app_id: str,
    endpoint_key: str,
    endpoint: str,
    staging: bool = False,
    timeout: float = 10.0,
) -> RecognizerResult:
    """
    Send one utterance to LUIS and return the mapped result.

    Args:
        text: Utterance to recognize
        app_id: LUIS application id
        endpoint_key: Subscription key for the LUIS endpoint
        endpoint: Base URL (e.g., "https://westus.api.cognitive.microsoft.com")
        staging: Query the staging slot instead of production
        timeout: Request timeout in seconds

    Returns:
        RecognizerResult

    Raises:
        RecognizerInvocationError: On timeout, HTTP error status, network error
            or an undecodable body
    """
    api_url = f"{endpoint.rstrip('/')}/luis/v2.0/apps/{app_id}"
    params = {
        "q": text,
        "verbose": "true",
        "staging": "true" if staging else "false",
        "log": "true",
    }
    headers = {"Ocp-Apim-Subscription-Key": endpoint_key}

    logger.info("Querying LUIS app %s (%d chars)", app_id, len(text))

    async with httpx.AsyncClient(timeout=timeout) as client:
        try:
            response = await client.get(api_url, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.error("LUIS request timed out after %.1fs", timeout)
            raise RecognizerInvocationError(f"LUIS request timed out after {timeout}s") from e
        except httpx.HTTPStatusError as e:
            logger.error("LUIS error: %s %s", e.response.status_code, e.response.text)
            raise RecognizerInvocationError(
                f"LUIS returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("LUIS network error: %s", e)
            raise RecognizerInvocationError(f"LUIS network error: {e}") from e
        except ValueError as e:
            logger.error("LUIS returned a non-JSON body")
            raise RecognizerInvocationError("LUIS returned a non-JSON body") from e

    result = parse_luis_response(data)
    logger.debug("LUIS intents: %s", list(result.intents))
    return result


class LuisRecognizer(Recognizer):
    """
    Recognizer backed by a published LUIS application.

    Usage:
        recognizer = LuisRecognizer(app_id="...", endpoint_key="...",
                                    endpoint="https://westus.api.cognitive.microsoft.com")
        result = await recognizer.recognize(Activity(type="message", text="book a meeting"))
    """

    def __init__(
        self,
        app_id: Optional[str],
        endpoint_key: Optional[str],
        endpoint: Optional[str],
        staging: bool = False,
        timeout: float = 10.0,
    ):
        missing = [name for name, value in (
            ("LUIS_APP_ID", app_id),
            ("LUIS_ENDPOINT_KEY", endpoint_key),
            ("LUIS_ENDPOINT", endpoint),
        ) if not value]
        if missing:
            raise ConfigurationError(f"LUIS recognizer missing settings: {', '.join(missing)}")
        if not endpoint.startswith(("http://", "https://")):
            endpoint = "https://" + endpoint

        self.app_id = app_id
        self.endpoint_key = endpoint_key
        self.endpoint = endpoint.rstrip("/")
        self.staging = staging
        self.timeout = timeout

    async def recognize(self, activity: Activity) -> RecognizerResult:
        text = (activity.text or "").strip()
        if not text:
            logger.debug("empty utterance, skipping LUIS call")
            return RecognizerResult(text="")
        return await recognize_text_async(
            text,
            self.app_id,
            self.endpoint_key,
            self.endpoint,
            staging=self.staging,
            timeout=self.timeout,
        )
