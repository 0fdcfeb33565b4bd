"""
Response normalization for Gemini replies.

Gemini answers in free text, sometimes wrapping JSON in Markdown fences, and
reports the web pages it searched as grounding chunks. The helpers here turn
both into plain Python values and never raise.
"""

import json
import logging
import re
from typing import Any, List, Optional

from sports_hub.models import ContentSource

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "Unknown Source"

# ``` or ```json ... ```; a language tag must be followed by whitespace
_FENCE_RE = re.compile(r"^```(?:[\w+-]+(?=\s))?\s*(.*?)\s*```$", re.DOTALL)


def response_text(response: Any) -> str:
    """Returns the reply text, or an empty string when there is none."""
    try:
        text = getattr(response, "text", None)
    except ValueError:
        # The SDK raises when the reply holds only non-text parts
        return ""
    return text if isinstance(text, str) else ""


def extract_sources(response: Any) -> List[ContentSource]:
    """Collects the web sources Gemini cited, in order, skipping ones without a URI."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None) or ""
        if not uri:
            continue
        title = getattr(web, "title", None) or uri or UNKNOWN_SOURCE
        sources.append(ContentSource(uri=uri, title=title))
    return sources


def strip_code_fence(text: str) -> str:
    """Removes a surrounding Markdown code fence, if present."""
    cleaned = text.strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        cleaned = match.group(1).strip()
    return cleaned


def parse_json_response(text: Optional[str]) -> Any:
    """Safely parses JSON from LLM output, handling markdown blocks.

    Returns None when the text is not valid JSON.
    """
    if not text:
        return None
    cleaned = strip_code_fence(text)
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, ValueError) as e:
        logger.error("Failed to parse JSON from Gemini reply: %s", e)
        logger.debug("Unparsable reply: %s", text)
        return None
