"""
parser.py — Turn YouTube timed-text XML into TranscriptSnippet objects.

The payload is scanned with regular expressions rather than an XML parser.
YouTube serves loosely structured markup (stray entities, inline formatting
tags, the occasional attribute reordering) that a strict parser rejects, and
the only thing we need out of it is each <text start=".." dur="..">
element's timing and body.
"""

from __future__ import annotations

import html
import re

from yt_transcript_mcp.errors import TranscriptParseFailedError
from yt_transcript_mcp.models import TranscriptSnippet

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Inline tags kept when preserve_formatting=True.
FORMATTING_TAGS = (
    "strong",
    "em",
    "b",
    "i",
    "mark",
    "small",
    "del",
    "ins",
    "sub",
    "sup",
)

# Body of a <text> element: anything up to the closing tag, but never across
# another <text ...> opener.  Self-closing <text .../> elements never match
# because the opening tag must not end in "/>".
_BODY = r"((?:(?!</?text\b).)*?)"

# Strict form: start then dur, as YouTube normally emits them.
_TEXT_PATTERN = re.compile(
    r'<text\s+start="([^"]+)"\s+dur="([^"]+)"[^>]*?(?<!/)>' + _BODY + r"</text>",
    re.DOTALL,
)

# Looser form, tried when the strict one yields nothing: other attributes may
# precede start or sit between start and dur.
_LOOSE_TEXT_PATTERN = re.compile(
    r'<text\b[^>]*?\sstart="([^"]+)"[^>]*?\sdur="([^"]+)"[^>]*?(?<!/)>' + _BODY + r"</text>",
    re.DOTALL,
)

_ALL_TAGS = re.compile(r"<[^>]*>")

# Any entity except &amp;, which decode_entities() handles in a single pass.
_ENTITY_PATTERN = re.compile(r"&(?!amp;)(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")


def _html_regex(preserve_formatting: bool) -> re.Pattern[str]:
    """Regex matching the tags to strip for the given mode."""
    if not preserve_formatting:
        return _ALL_TAGS
    formats = "|".join(FORMATTING_TAGS)
    return re.compile(rf"</?(?!/?(?:{formats})\b)[^>]*>", re.IGNORECASE)


def decode_entities(text: str) -> str:
    """
    Decode HTML entities in a raw <text> body.

    Bodies are escaped twice (once for XML, once for HTML, e.g. "&amp;#39;"),
    so "&amp;" is decoded first and every other entity is then decoded from
    the result.  "&amp;" itself is only decoded once: "&amp;amp;" becomes
    "&amp;", not "&".  Non-breaking spaces become plain spaces.
    """
    text = text.replace("&amp;", "&")
    text = _ENTITY_PATTERN.sub(lambda m: html.unescape(m.group(0)), text)
    return text.replace("\xa0", " ")


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class TranscriptParser:
    """
    Parses timed-text XML into snippets.

    Args:
        preserve_formatting: Keep the inline tags in FORMATTING_TAGS (e.g.
            <b>, <i>) in snippet text.  All other tags are always stripped.
    """

    def __init__(self, preserve_formatting: bool = False) -> None:
        self.preserve_formatting = preserve_formatting
        self._html_regex = _html_regex(preserve_formatting)

    def parse(self, xml_text: str, video_id: str) -> list[TranscriptSnippet]:
        """
        Extract snippets in document order.

        Returns an empty list when the payload has no <text> elements.

        Raises:
            TranscriptParseFailedError: An element's timing could not be read.
        """
        try:
            snippets = self._scan(_TEXT_PATTERN, xml_text)
            if not snippets:
                snippets = self._scan(_LOOSE_TEXT_PATTERN, xml_text)
        except (ValueError, TypeError) as exc:
            raise TranscriptParseFailedError(video_id, exc) from exc
        return snippets

    def _scan(self, pattern: re.Pattern[str], xml_text: str) -> list[TranscriptSnippet]:
        snippets: list[TranscriptSnippet] = []
        for match in pattern.finditer(xml_text):
            start, duration, body = match.groups()
            text = self._html_regex.sub("", decode_entities(body)).strip()
            if not text:
                continue
            snippets.append(
                TranscriptSnippet(text=text, start=float(start), duration=float(duration))
            )
        return snippets
