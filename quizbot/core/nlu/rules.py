import re
from .recognizer import Recognizer
from .types import RecognizerResult
from ..contracts import Activity

_ADD = re.compile(r"\b(book|schedule|add|create|set up)\b.*\b(appointment|meeting|call)\b", re.I)
_FIND = re.compile(r"\b(when|what|show|find|list)\b.*\b(appointment|meeting|calendar|schedule)\b", re.I)
_CANCEL = re.compile(r"\b(cancel|delete|remove)\b.*\b(appointment|meeting)\b", re.I)
_QUIZ = re.compile(r"\b(quiz|question|test me|trivia)\b", re.I)
_HELLO = re.compile(r"\b(hi|hello|hey|thanks|bye)\b", re.I)

_APPOINTMENT = re.compile(r"\b(appointment|call)\b", re.I)
_MEETING = re.compile(r"\b(meeting|sync|standup|review)\b", re.I)

def _entities(text: str) -> dict:
    """Build entity values in the shapes the entity scan understands."""
    ent: dict = {}
    m = _APPOINTMENT.search(text)
    if m:
        ent["appointment"] = {
            "text": m.group(0),
            "Appointment": [{"type": m.group(1).lower(), "score": 0.8}],
        }
    m = _MEETING.search(text)
    if m:
        ent["meeting"] = {
            "noida": m.group(0),
            "Meeting": [{"type": m.group(1).lower(), "score": 0.7}],
        }
    return ent

class RulesRecognizer(Recognizer):
    """Offline regex recognizer; every rule that fires contributes an intent score."""

    async def recognize(self, activity: Activity) -> RecognizerResult:
        t = (activity.text or "").strip()
        intents: dict[str, float] = {}
        if _CANCEL.search(t): intents["Calendar.Delete"] = 0.85
        if _ADD.search(t):    intents["Calendar.Add"] = 0.8
        if _FIND.search(t):   intents["Calendar.Find"] = 0.75
        if _QUIZ.search(t):   intents["Quiz.Start"] = 0.7
        if _HELLO.search(t):  intents["Greeting"] = 0.5
        intents["None"] = 0.1
        return RecognizerResult(text=t, intents=intents, entities=_entities(t))
