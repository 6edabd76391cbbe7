"""
Apple Shortcut payload normalization.

Shortcuts in the wild post step counts in several shapes. Each shape has an
extractor; they are tried in the order of PAYLOAD_SHAPES and the first one
that matches wins, so an ambiguous body resolves to the earliest shape.
"""
import json
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional

from quest_api.core.exceptions import ValidationError
from quest_api.journey.constants import MAX_DAILY_STEPS
from quest_api.utils.dates import try_parse_date, utc_yesterday

ACCEPTED_SHAPES_HINT = (
    'Send step count as: a number, {"steps": 1234}, {"step_count": 1234, "recorded_date": "YYYY-MM-DD"}, '
    '{"step": {"step_count": 1234, "recorded_date": "YYYY-MM-DD"}}, or a plain-text number'
)

_DIGITS = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class ParsedPayload:
    step_count: Any  # validated by parse_webhook_payload
    recorded_date: Optional[str]
    shape: str


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _bare_number(payload: Any) -> Optional[ParsedPayload]:
    if _is_number(payload):
        return ParsedPayload(payload, None, "number")
    return None


def _steps_object(payload: Any) -> Optional[ParsedPayload]:
    if isinstance(payload, dict) and _is_number(payload.get("steps")):
        return ParsedPayload(payload["steps"], None, "steps")
    return None


def _step_count_object(payload: Any) -> Optional[ParsedPayload]:
    if isinstance(payload, dict) and _is_number(payload.get("step_count")):
        return ParsedPayload(payload["step_count"], payload.get("recorded_date"), "step_count")
    return None


def _nested_step_object(payload: Any) -> Optional[ParsedPayload]:
    if isinstance(payload, dict) and isinstance(payload.get("step"), dict):
        step = payload["step"]
        return ParsedPayload(step.get("step_count"), step.get("recorded_date"), "step")
    return None


def _numeric_string(payload: Any) -> Optional[ParsedPayload]:
    if not isinstance(payload, str):
        return None
    text = payload.strip()
    if not _DIGITS.match(text):
        return None
    return ParsedPayload(int(text), None, "text")


PAYLOAD_SHAPES: list[Callable[[Any], Optional[ParsedPayload]]] = [
    _bare_number,
    _steps_object,
    _step_count_object,
    _nested_step_object,
    _numeric_string,
]


@dataclass(frozen=True)
class WebhookSteps:
    step_count: int
    recorded_date: date
    shape: str


def parse_webhook_payload(payload: Any, now: Optional[datetime] = None) -> WebhookSteps:
    """
    Map any accepted payload shape to (step_count, recorded_date).

    A missing or malformed recorded_date falls back to yesterday (UTC)
    instead of failing the request.
    """
    parsed = None
    for extract in PAYLOAD_SHAPES:
        parsed = extract(payload)
        if parsed is not None:
            break

    if parsed is None:
        raise ValidationError("Invalid request body", hint=ACCEPTED_SHAPES_HINT)

    count = parsed.step_count
    if not _is_number(count) or count <= 0 or (isinstance(count, float) and not count.is_integer()):
        raise ValidationError("Valid step_count is required (positive whole number)", hint=ACCEPTED_SHAPES_HINT)
    if count > MAX_DAILY_STEPS:
        raise ValidationError(f"step_count cannot exceed {MAX_DAILY_STEPS} per day", hint=ACCEPTED_SHAPES_HINT)

    recorded = try_parse_date(parsed.recorded_date) or utc_yesterday(now)
    return WebhookSteps(step_count=int(count), recorded_date=recorded, shape=parsed.shape)


def decode_webhook_body(raw: bytes, content_type: Optional[str]) -> Any:
    """
    Turn the raw request body into the value the shape extractors see.
    JSON bodies must parse; anything else is tried as JSON, then kept as text.
    """
    text = raw.decode("utf-8", errors="replace").strip()
    if not text:
        return None

    if content_type and "json" in content_type.lower():
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            raise ValidationError("Malformed JSON body", hint=ACCEPTED_SHAPES_HINT)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
