"""
Tests for the LUIS recognizer adapter.
"""
import pytest
from unittest.mock import AsyncMock, patch
import httpx

from quizbot.core.contracts import Activity
from quizbot.core.errors import ConfigurationError, RecognizerInvocationError
from quizbot.core.nlu.entities import extract_entity_summary
from quizbot.core.nlu.intents import format_top_intent, select_top_intent
from quizbot.core.nlu.luis_adapter import LuisRecognizer, normalize_entity_name, parse_luis_response

pytestmark = pytest.mark.asyncio

ENDPOINT = "https://westus.api.cognitive.microsoft.com"

LUIS_BODY = {
    "query": "book a meeting with sam tomorrow",
    "topScoringIntent": {"intent": "Calendar.Add", "score": 0.92},
    "intents": [
        {"intent": "Calendar.Add", "score": 0.92},
        {"intent": "None", "score": 0.05},
    ],
    "entities": [
        {"entity": "meeting", "type": "Meeting", "startIndex": 7, "endIndex": 13, "score": 0.81},
        {
            "entity": "tomorrow",
            "type": "builtin.datetimeV2.date",
            "startIndex": 24,
            "endIndex": 31,
            "resolution": {"values": [{"type": "date", "value": "2026-10-17"}]},
        },
    ],
    "sentimentAnalysis": {"label": "neutral", "score": 0.5},
}


def _recognizer(**kwargs):
    return LuisRecognizer(app_id="app-id", endpoint_key="key", endpoint=ENDPOINT, **kwargs)


def _response(status, **kwargs):
    return httpx.Response(status, request=httpx.Request("GET", ENDPOINT), **kwargs)


async def test_luis_recognizer_success():
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = _response(200, json=LUIS_BODY)

        result = await _recognizer().recognize(Activity(type="message", text="book a meeting with sam tomorrow"))

        assert mock_get.call_count == 1
        args, kwargs = mock_get.call_args
        assert args[0] == f"{ENDPOINT}/luis/v2.0/apps/app-id"
        assert kwargs["params"]["q"] == "book a meeting with sam tomorrow"
        assert kwargs["params"]["staging"] == "false"
        assert kwargs["headers"]["Ocp-Apim-Subscription-Key"] == "key"

    assert result.text == "book a meeting with sam tomorrow"
    assert list(result.intents) == ["Calendar.Add", "None"]
    assert result.intents["Calendar.Add"] == 0.92
    assert result.entities["Meeting"] == ["meeting"]
    assert result.entities["datetimeV2_date"] == [{"type": "date", "value": "2026-10-17"}]
    assert result.entities["$instance"]["Meeting"][0] == {
        "startIndex": 7, "endIndex": 14, "text": "meeting", "type": "Meeting", "score": 0.81,
    }
    assert result.properties["sentiment"]["label"] == "neutral"


async def test_empty_text_skips_http_call():
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        result = await _recognizer().recognize(Activity(type="message", text="   "))
        assert not mock_get.called
    assert result.intents == {}


async def test_http_error_status_wrapped():
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = _response(401, json={"error": "bad key"})
        with pytest.raises(RecognizerInvocationError) as exc:
            await _recognizer().recognize(Activity(type="message", text="hi"))
    assert exc.value.status_code == 401
    assert isinstance(exc.value.__cause__, httpx.HTTPStatusError)


async def test_timeout_wrapped():
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.side_effect = httpx.ReadTimeout("slow")
        with pytest.raises(RecognizerInvocationError, match="timed out"):
            await _recognizer(timeout=0.5).recognize(Activity(type="message", text="hi"))


async def test_network_error_wrapped():
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.side_effect = httpx.ConnectError("refused")
        with pytest.raises(RecognizerInvocationError, match="network"):
            await _recognizer().recognize(Activity(type="message", text="hi"))


async def test_non_json_body_wrapped():
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = _response(200, text="<html>")
        with pytest.raises(RecognizerInvocationError):
            await _recognizer().recognize(Activity(type="message", text="hi"))


async def test_missing_settings_rejected():
    with pytest.raises(ConfigurationError, match="LUIS_APP_ID"):
        LuisRecognizer(app_id="", endpoint_key="key", endpoint=ENDPOINT)
    with pytest.raises(ConfigurationError, match="LUIS_ENDPOINT_KEY"):
        LuisRecognizer(app_id="app", endpoint_key=None, endpoint=ENDPOINT)


async def test_endpoint_scheme_added():
    recognizer = LuisRecognizer(app_id="app", endpoint_key="key", endpoint="westus.api.cognitive.microsoft.com/")
    assert recognizer.endpoint == "https://westus.api.cognitive.microsoft.com"


async def test_top_scoring_intent_only():
    result = parse_luis_response({"query": "hi", "topScoringIntent": {"intent": "Greeting", "score": 0.7}})
    assert result.intents == {"Greeting": 0.7}
    assert result.entities == {}


async def test_composite_entities():
    body = {
        "query": "q",
        "intents": [],
        "entities": [],
        "compositeEntities": [{
            "parentType": "Meeting Details",
            "value": "team sync at noon",
            "children": [{"type": "Topic", "value": "team sync"}, {"type": "builtin.datetimeV2.time", "value": "noon"}],
        }],
    }
    result = parse_luis_response(body)
    assert result.entities["Meeting_Details"] == [{"Topic": ["team sync"], "datetimeV2_time": ["noon"]}]


async def test_normalize_entity_name():
    assert normalize_entity_name("builtin.number") == "number"
    assert normalize_entity_name("Meeting Room") == "Meeting_Room"
    assert normalize_entity_name("Calendar.Subject") == "Calendar_Subject"


@pytest.mark.parametrize("body", [
    {"query": "hi", "intents": [{"intent": "Greeting", "score": None}]},
    {"query": "hi", "intents": [{"score": 0.4}]},
    {"query": "hi", "intents": [], "entities": ["oops"]},
    {"query": "hi", "intents": [], "entities": [
        {"entity": "meeting", "type": "Meeting", "startIndex": 7, "endIndex": None},
    ]},
])
async def test_malformed_body_wrapped(body):
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = _response(200, json=body)
        with pytest.raises(RecognizerInvocationError, match="malformed"):
            await _recognizer().recognize(Activity(type="message", text="hi"))


async def test_integer_scores_kept():
    body = {"query": "q", "intents": [{"intent": "Calendar.Add", "score": 1}]}
    result = parse_luis_response(body)
    assert result.intents == {"Calendar.Add": 1}
    top = format_top_intent(select_top_intent(result))
    assert top == "==>LUIS Top Scoring Intent: Calendar.Add, Score: 1\n"


async def test_luis_entities_reach_appointment_schema():
    # App defines entity types named "text" and "Appointment"; their
    # per-occurrence metadata under "$instance" carries type and score.
    body = {
        "query": "book the dentist appointment",
        "intents": [{"intent": "Calendar.Add", "score": 0.9}],
        "entities": [
            {"entity": "dentist", "type": "text", "startIndex": 9, "endIndex": 15, "score": 0.6},
            {"entity": "appointment", "type": "Appointment", "startIndex": 17, "endIndex": 27, "score": 0.8},
        ],
    }
    result = parse_luis_response(body)

    assert result.entities["$instance"]["Appointment"][0]["type"] == "Appointment"
    # the top-level "text"/"Appointment" lists are skipped; "$instance" matches
    assert extract_entity_summary(result) == "Entity: Appointment, Score: 0.8."
