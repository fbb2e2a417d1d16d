"""Response validator — Gemini envelope → embedded JSON text → MealAnalysis."""
import json
import logging
from typing import Any

from src.constants import MSG_ENVELOPE_NO_TEXT, MSG_PAYLOAD_REJECTED
from src.meal import MealAnalysis, MealValidationError
from src.vision.errors import MalformedEnvelopeError, MalformedPayloadError

logger = logging.getLogger(__name__)


def extract_payload_text(content: bytes) -> str:
    """Return candidates[0].content.parts[0].text from a generateContent response."""
    try:
        envelope: Any = json.loads(content)
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedEnvelopeError() from exc

    match envelope:
        case {"candidates": [{"content": {"parts": [{"text": str() as text}, *_]}}, *_]}:
            return text
        case _:
            logger.debug(MSG_ENVELOPE_NO_TEXT, content)
            raise MalformedEnvelopeError()


def parse_meal_analysis(text: str) -> MealAnalysis:
    try:
        data = json.loads(text.encode("utf-8"))
    except (UnicodeError, ValueError) as exc:
        raise MalformedPayloadError() from exc

    try:
        return MealAnalysis.from_dict(data)
    except MealValidationError as exc:
        logger.warning(MSG_PAYLOAD_REJECTED, exc)
        raise MalformedPayloadError() from exc


def parse_response(content: bytes) -> MealAnalysis:
    return parse_meal_analysis(extract_payload_text(content))
