"""
Response normalization for /api/generate replies.

Depending on its configuration the local service answers with a single JSON
object, with newline-delimited JSON objects (streaming), or in degraded cases
with plain text. normalize() recovers the generated text from any of these
shapes by trying an ordered chain of strategies. Each strategy returns the
recovered text, or None to hand over to the next one.
"""

import json
import logging
from typing import Callable, List, Optional

from pydantic import ValidationError

from .errors import EmptyResponse
from .types import GenerateChunk

logger = logging.getLogger(__name__)

Strategy = Callable[[str], Optional[str]]

_MODEL_MARKER = '{"model":'
_RESPONSE_MARKER = '"response":'


def _parse_chunk(text: str) -> Optional[GenerateChunk]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(data, dict) or "response" not in data:
        return None
    if data["response"] is None:
        # null response carries no text
        data = {**data, "response": ""}
    try:
        return GenerateChunk.model_validate(data)
    except ValidationError:
        return None


def parse_single_object(body: str) -> Optional[str]:
    """Whole body is one JSON object carrying a `response` field."""
    chunk = _parse_chunk(body)
    if chunk is None:
        return None
    return chunk.response.strip()


def looks_like_stream(body: str) -> bool:
    return body.count(_MODEL_MARKER) > 1 and body.count(_RESPONSE_MARKER) > 1


def parse_stream(body: str) -> Optional[str]:
    """Concatenate the `response` of every parseable NDJSON line, in order."""
    if not looks_like_stream(body):
        return None

    fragments: List[str] = []
    for line in body.split("\n"):
        line = line.strip()
        if not line:
            continue
        chunk = _parse_chunk(line)
        if chunk is None:
            logger.warning("Skipping unparseable stream line: %s", line[:50])
            continue
        fragments.append(chunk.response)

    combined = "".join(fragments)
    if not combined:
        return None
    return combined.strip()


def parse_plain_text(body: str) -> Optional[str]:
    return body.strip()


STRATEGIES: List[Strategy] = [
    parse_single_object,
    parse_stream,
    parse_plain_text,
]


def normalize(body: str) -> str:
    """
    Extract the generated text from a raw /api/generate body.

    Args:
        body: Raw HTTP response text

    Returns:
        Trimmed generated text

    Raises:
        EmptyResponse: No text could be recovered
    """
    for strategy in STRATEGIES:
        text = strategy(body or "")
        if text is None:
            continue
        if not text:
            # A strategy that matched but produced nothing settles the outcome
            break
        logger.debug("Response normalized by %s (%d chars)", strategy.__name__, len(text))
        return text

    raise EmptyResponse()
