"""
extractor.py — Core transcript extraction logic.

This is the heart of yt-transcript-mcp.  It composes the Innertube client,
the playability check, the track catalog and the XML parser into a clean,
high-level interface for:

    1. Parsing YouTube URLs / IDs   → parse_video_id()
    2. Listing available tracks     → TranscriptFetcher.list_transcripts()
    3. Fetching a parsed transcript → TranscriptFetcher.fetch_transcript()
    4. Formatting output            → format_text(), format_timestamped(),
                                      format_json(), format_tracks()
    5. One-call convenience         → extract()

Only single-video extraction is supported (no playlists).  All network
calls are async and sequential within one request.
"""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Sequence

import httpx

from yt_transcript_mcp.catalog import build_tracks, select_transcript
from yt_transcript_mcp.errors import InvalidVideoIdError, TranscriptsDisabledError
from yt_transcript_mcp.innertube import (
    CLIENT_PROFILES,
    ClientProfile,
    InnertubeClient,
    assert_playability,
)
from yt_transcript_mcp.models import FetchedTranscript, TranscriptTrack
from yt_transcript_mcp.parser import TranscriptParser

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# A bare video ID is exactly 11 characters from the base64url alphabet.
_BARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

# The ID must be followed by a delimiter or the end of the string.
_ID = r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"

# Tried in this order; the first match wins.
_URL_PATTERNS: list[re.Pattern[str]] = [
    # Standard watch URL, "v" anywhere in the query string
    re.compile(r"youtube\.com/watch\?(?:[^#]*?[&?])?v=" + _ID),
    # Short share URL
    re.compile(r"youtu\.be/" + _ID),
    # Embedded player
    re.compile(r"youtube(?:-nocookie)?\.com/embed/" + _ID),
    # Legacy /v/ and /e/ paths
    re.compile(r"youtube\.com/v/" + _ID),
    re.compile(r"youtube\.com/e/" + _ID),
    # Shorts and live permalinks
    re.compile(r"youtube\.com/(?:shorts|live)/" + _ID),
]

DEFAULT_LANGUAGES = ["en"]

# Applied to clients the fetcher creates itself.
_REQUEST_TIMEOUT_SECS = 30.0


# ---------------------------------------------------------------------------
# URL / ID parsing
# ---------------------------------------------------------------------------

def parse_video_id(url_or_id: str) -> str:
    """
    Extract a YouTube video ID from a URL string, or validate a raw 11-char ID.

    Accepts watch, youtu.be, embed, /v/, /e/, shorts and live URLs as well as
    a bare 11-character ID.  Extraction stops at the first character that
    cannot be part of an ID, so trailing "&t=30s" style parameters are
    ignored.

    Raises:
        InvalidVideoIdError: If the string doesn't match any known format.
    """
    url_or_id = url_or_id.strip()

    if _BARE_ID_PATTERN.match(url_or_id):
        return url_or_id

    for pattern in _URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group(1)

    raise InvalidVideoIdError(url_or_id)


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------

class TranscriptFetcher:
    """
    Lists and fetches transcripts for single videos.

    Each call is independent.  When no `http_client` is given, a fresh
    httpx.AsyncClient is opened and closed per call; an injected client is
    used as-is and left open.

    Args:
        http_client: Optional shared httpx.AsyncClient.
        profiles:    Innertube client profiles, in fallback order.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        profiles: tuple[ClientProfile, ...] = CLIENT_PROFILES,
    ) -> None:
        self._http_client = http_client
        self._profiles = profiles

    @asynccontextmanager
    async def _innertube(self) -> AsyncIterator[InnertubeClient]:
        if self._http_client is not None:
            yield InnertubeClient(self._http_client, self._profiles)
            return
        async with httpx.AsyncClient(
            timeout=_REQUEST_TIMEOUT_SECS,
            follow_redirects=True,
        ) as http:
            yield InnertubeClient(http, self._profiles)

    async def _list(self, innertube: InnertubeClient, video_id: str) -> list[TranscriptTrack]:
        player_data = await innertube.fetch_player_data(video_id)
        assert_playability(player_data.get("playabilityStatus"), video_id)
        return build_tracks(player_data, video_id)

    async def list_transcripts(self, url_or_id: str) -> list[TranscriptTrack]:
        """
        List every caption track available for a video.

        Raises:
            TranscriptError: (or subclass) on any failure.
        """
        video_id = parse_video_id(url_or_id)
        async with self._innertube() as innertube:
            return await self._list(innertube, video_id)

    async def fetch_transcript(
        self,
        url_or_id: str,
        languages: Sequence[str] | None = None,
        preserve_formatting: bool = False,
    ) -> FetchedTranscript:
        """
        Fetch and parse the best-matching transcript for a video.

        Args:
            url_or_id:           A YouTube URL or raw video ID.
            languages:           Language codes in descending priority.
                                 Defaults to ["en"].
            preserve_formatting: Keep inline <b>, <i>, ... tags in the text.

        Raises:
            TranscriptsDisabledError: The video has no caption tracks.
            NoTranscriptFoundError:   None in the requested languages.
            TranscriptError:          (or subclass) on any other failure.
        """
        langs = list(languages) if languages else DEFAULT_LANGUAGES
        video_id = parse_video_id(url_or_id)

        async with self._innertube() as innertube:
            tracks = await self._list(innertube, video_id)
            if not tracks:
                raise TranscriptsDisabledError(video_id)

            track = select_transcript(tracks, langs, video_id)
            xml_text = await innertube.fetch_transcript_xml(track.url, video_id)

        snippets = TranscriptParser(preserve_formatting).parse(xml_text, video_id)
        return FetchedTranscript(
            video_id=video_id,
            language=track.language,
            language_code=track.language_code,
            is_generated=track.is_generated,
            snippets=tuple(snippets),
        )


async def list_transcripts(url_or_id: str) -> list[TranscriptTrack]:
    """Module-level shortcut for TranscriptFetcher().list_transcripts()."""
    return await TranscriptFetcher().list_transcripts(url_or_id)


async def get_transcript(
    url_or_id: str,
    languages: Sequence[str] | None = None,
    preserve_formatting: bool = False,
) -> FetchedTranscript:
    """Module-level shortcut for TranscriptFetcher().fetch_transcript()."""
    return await TranscriptFetcher().fetch_transcript(
        url_or_id,
        languages=languages,
        preserve_formatting=preserve_formatting,
    )


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_timestamp(seconds: float) -> str:
    """
    Convert a float timestamp (in seconds) to M:SS, or H:MM:SS past an hour.

    >>> format_timestamp(92.5)
    '1:32'
    >>> format_timestamp(3725)
    '1:02:05'
    """
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    mins, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def format_text(transcript: Iterable, separator: str = "\n") -> str:
    """
    Join snippet texts, one line per snippet by default.

    The simplest output format: just the spoken words, no timestamps.
    """
    return separator.join(snippet.text for snippet in transcript)


def format_timestamped(transcript: Iterable) -> str:
    """One "[M:SS] text" line per snippet."""
    return "\n".join(
        f"[{format_timestamp(snippet.start)}] {snippet.text}" for snippet in transcript
    )


def format_json(transcript: FetchedTranscript) -> dict:
    """
    Build a JSON-serialisable dict with track info and timed segments.

    Each segment has: text, start, duration.
    """
    segments = transcript.to_raw_data()
    return {
        "video_id": transcript.video_id,
        "language": transcript.language,
        "language_code": transcript.language_code,
        "is_generated": transcript.is_generated,
        "segment_count": len(segments),
        "segments": segments,
    }


def format_tracks(tracks: Sequence[TranscriptTrack]) -> str:
    """
    Describe each available track on its own line.

    e.g. "- English (en) [manual], translatable"
    """
    lines = []
    for track in tracks:
        kind = "auto-generated" if track.is_generated else "manual"
        line = f"- {track.language} ({track.language_code}) [{kind}]"
        if track.is_translatable:
            line += ", translatable"
        lines.append(line)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# High-level convenience function (main public API)
# ---------------------------------------------------------------------------

_FORMATS = ("text", "timestamped", "json")


async def extract(
    url_or_id: str,
    languages: Sequence[str] | None = None,
    fmt: str = "text",
    *,
    preserve_formatting: bool = False,
) -> str | dict:
    """
    One-call interface: parse URL → fetch transcript → format output.

    Args:
        url_or_id:           A YouTube URL or raw video ID.
        languages:           Optional language priority list (e.g. ["de", "en"]).
        fmt:                 "text" for plain lines, "timestamped" for
                             "[M:SS] text" lines, "json" for a dict.
        preserve_formatting: Keep inline formatting tags in snippet text.

    Returns:
        A string (fmt="text"/"timestamped") or a dict (fmt="json").

    Raises:
        ValueError:      If fmt is not a known format.
        TranscriptError: (or subclass) on any extraction failure.
    """
    if fmt not in _FORMATS:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {', '.join(_FORMATS)}")

    transcript = await get_transcript(
        url_or_id,
        languages=languages,
        preserve_formatting=preserve_formatting,
    )

    if fmt == "json":
        return format_json(transcript)
    if fmt == "timestamped":
        return format_timestamped(transcript)
    return format_text(transcript)
