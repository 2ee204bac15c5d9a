"""Parser for extracting intents from model output."""

import json
import logging
import math
import re
from typing import Any

from intentbridge.providers.models import Intent

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


class IntentParseError(ValueError):
    """Model output did not contain a JSON object."""

    pass


def extract_json_object(content: str) -> dict[str, Any]:
    """Find and decode the JSON object in a model reply.

    Accepts bare JSON, a fenced ```json block, or a JSON object surrounded
    by prose.

    Args:
        content: Raw model output

    Returns:
        The decoded object

    Raises:
        IntentParseError: If no JSON object can be decoded
    """
    text = content.strip()
    candidates = [text]

    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value

    raise IntentParseError(f"No JSON object in model output: {text[:100]!r}")


def _coerce_confidence(value: Any) -> float:
    # Falsy values (missing, 0, null) take the default
    if not value:
        return 0.5
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.5
    # json.loads accepts NaN and Infinity
    if not math.isfinite(confidence):
        return 0.5
    return min(max(confidence, 0.0), 1.0)


def parse_intent(content: str) -> Intent:
    """Parse model output into an Intent.

    Missing or malformed fields are replaced with defaults:
    action "unknown", entities {}, confidence 0.5.

    Raises:
        IntentParseError: If the output holds no JSON object
    """
    raw = extract_json_object(content)

    action = raw.get("action")
    if not isinstance(action, str) or not action.strip():
        action = Intent.UNKNOWN_ACTION

    entities = raw.get("entities")
    if not isinstance(entities, dict):
        if entities is not None:
            logger.warning(f"Ignoring non-object entities: {entities!r}")
        entities = {}

    return Intent(
        action=action.strip(),
        entities=entities,
        confidence=_coerce_confidence(raw.get("confidence")),
    )
