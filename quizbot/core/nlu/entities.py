"""
Entity payload decoding and the entity summary scan.

The recognizer hands back entities as an ordered mapping of key -> loose JSON.
Two shapes are recognized:

    {"text": ..., "Appointment": [{"type": str, "score": number}, ...]}
    {"noida": ..., "Meeting":     [{"type": str, "score": number}, ...]}

Both markers may appear on the same value; the Appointment match is reported
before the Meeting match. Values carrying neither marker decode to
UnknownEntity. Malformed values come back as EntityDecodeFailure so the caller
decides whether to skip them or abort the turn.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from .types import RecognizerResult
from ..errors import PayloadParseError

logger = logging.getLogger("entities")

NO_ENTITIES_MESSAGE = "No entities found in LUIS response"

APPOINTMENT_MARKER = "text"
APPOINTMENT_LIST = "Appointment"
MEETING_MARKER = "noida"
MEETING_LIST = "Meeting"


@dataclass(frozen=True, slots=True)
class AppointmentEntity:
    type: str
    score: float


@dataclass(frozen=True, slots=True)
class MeetingEntity:
    type: str
    score: float


@dataclass(frozen=True, slots=True)
class UnknownEntity:
    key: str


@dataclass(frozen=True, slots=True)
class EntityDecodeFailure:
    key: str
    reason: str


EntityMatch = Union[AppointmentEntity, MeetingEntity]
DecodedEntity = Union[AppointmentEntity, MeetingEntity, UnknownEntity]


class EntityParsePolicy(str, enum.Enum):
    SKIP = "skip"
    ABORT = "abort"


def _first_match(key: str, value: Mapping[str, Any], list_name: str) -> Union[Tuple[str, float], None, EntityDecodeFailure]:
    """Return (type, score) of the first element of value[list_name], None if the list is absent or empty."""
    items = value.get(list_name)
    if items is None:
        return None
    if not isinstance(items, list):
        return EntityDecodeFailure(key, f"'{list_name}' is not a list")
    if not items:
        return None

    first = items[0]
    if not isinstance(first, Mapping):
        return EntityDecodeFailure(key, f"'{list_name}[0]' is not an object")
    ent_type = first.get("type")
    score = first.get("score")
    if not isinstance(ent_type, str):
        return EntityDecodeFailure(key, f"'{list_name}[0].type' missing or not a string")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return EntityDecodeFailure(key, f"'{list_name}[0].score' missing or not a number")
    return ent_type, score


def decode_entity(key: str, value: Any) -> Union[Tuple[DecodedEntity, ...], EntityDecodeFailure]:
    """
    Decode one entity value into its known variants.

    Args:
        key: entity key in the recognizer payload (used for reporting only)
        value: the raw value

    Returns:
        A tuple of matches (Appointment first, then Meeting), a single
        UnknownEntity when no known marker or list element is present, or an
        EntityDecodeFailure.
    """
    if not isinstance(value, Mapping):
        return EntityDecodeFailure(key, f"expected an object, got {type(value).__name__}")

    matches: list[DecodedEntity] = []
    if APPOINTMENT_MARKER in value:
        found = _first_match(key, value, APPOINTMENT_LIST)
        if isinstance(found, EntityDecodeFailure):
            return found
        if found is not None:
            matches.append(AppointmentEntity(*found))
    if MEETING_MARKER in value:
        found = _first_match(key, value, MEETING_LIST)
        if isinstance(found, EntityDecodeFailure):
            return found
        if found is not None:
            matches.append(MeetingEntity(*found))

    if not matches:
        return (UnknownEntity(key),)
    return tuple(matches)


def format_entity(match: EntityMatch) -> str:
    return f"Entity: {match.type}, Score: {match.score}."


def extract_entity_summary(
    result: Optional[RecognizerResult],
    policy: EntityParsePolicy = EntityParsePolicy.SKIP,
) -> str:
    """
    Scan every entity entry in order and describe the last known match.

    Later matches overwrite earlier ones; the scan never stops early.

    Raises:
        PayloadParseError: an entry failed to decode and policy is ABORT
    """
    # accepts the plain strings "skip" and "abort" too
    policy = EntityParsePolicy(policy)
    summary = ""
    entities = result.entities if result is not None else {}

    for key, value in entities.items():
        decoded = decode_entity(key, value)
        if isinstance(decoded, EntityDecodeFailure):
            if policy is EntityParsePolicy.ABORT:
                raise PayloadParseError(decoded.key, decoded.reason)
            logger.warning("skipping entity '%s': %s", decoded.key, decoded.reason)
            continue

        for variant in decoded:
            match variant:
                case AppointmentEntity() | MeetingEntity():
                    summary = format_entity(variant)
                case UnknownEntity(key=unknown_key):
                    logger.debug("entity '%s' has no known schema", unknown_key)

    return summary or NO_ENTITIES_MESSAGE
