from dataclasses import dataclass, field
from typing import Dict, Any, Optional

@dataclass(slots=True)
class IntentScore:
    intent: str
    score: float

@dataclass(slots=True)
class RecognizerResult:
    text: str = ""
    altered_text: Optional[str] = None
    # intent name -> score, in the recognizer's own order
    intents: Dict[str, float] = field(default_factory=dict)
    # entity key -> opaque JSON-like value
    entities: Dict[str, Any] = field(default_factory=dict)
    properties: Dict[str, Any] = field(default_factory=dict)
