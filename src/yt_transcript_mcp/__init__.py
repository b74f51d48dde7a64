"""
yt_transcript_mcp — Fetch YouTube transcripts and serve them as MCP tools.

Public API:
    TranscriptFetcher       List tracks / fetch a parsed transcript (async).
    list_transcripts()      Shortcut: caption tracks for a URL or ID.
    get_transcript()        Shortcut: parsed transcript for a URL or ID.
    extract()               One-call interface (URL → formatted output).
    parse_video_id()        Parse a YouTube URL or validate a bare video ID.
    TranscriptParser        Timed-text XML → snippets.

Exception hierarchy (all importable from this package):
    TranscriptError                  Base exception for all transcript errors.
    ├── TranscriptsDisabledError     Video has no caption tracks.
    ├── NoTranscriptFoundError       None in the requested languages.
    ├── VideoUnavailableError        Video deleted, private or missing.
    ├── InvalidVideoIdError          Input isn't a recognisable URL / ID.
    ├── RequestBlockedError          Rate-limited or bot check.
    ├── RequestFailedError           Other HTTP / network failure.
    ├── DataUnparsableError          Upstream page / JSON shape changed.
    ├── AgeRestrictedError           Sign-in required for age check.
    ├── VideoUnplayableError         Any other playability failure.
    └── TranscriptParseFailedError   Timed-text XML could not be parsed.

Usage:
    import asyncio
    from yt_transcript_mcp import get_transcript

    transcript = asyncio.run(get_transcript("https://youtu.be/dQw4w9WgXcQ"))
    for snippet in transcript:
        print(snippet.start, snippet.text)
"""

from yt_transcript_mcp.errors import (
    AgeRestrictedError,
    DataUnparsableError,
    ErrorKind,
    InvalidVideoIdError,
    NoTranscriptFoundError,
    RequestBlockedError,
    RequestFailedError,
    TranscriptError,
    TranscriptParseFailedError,
    TranscriptsDisabledError,
    VideoUnavailableError,
    VideoUnplayableError,
    describe_error,
)
from yt_transcript_mcp.extractor import (
    TranscriptFetcher,
    extract,
    get_transcript,
    list_transcripts,
    parse_video_id,
)
from yt_transcript_mcp.models import (
    FetchedTranscript,
    TranscriptSnippet,
    TranscriptTrack,
    TranslationLanguage,
)
from yt_transcript_mcp.parser import TranscriptParser

__all__ = [
    "TranscriptFetcher",
    "extract",
    "get_transcript",
    "list_transcripts",
    "parse_video_id",
    "TranscriptParser",
    "FetchedTranscript",
    "TranscriptSnippet",
    "TranscriptTrack",
    "TranslationLanguage",
    "ErrorKind",
    "describe_error",
    "TranscriptError",
    "TranscriptsDisabledError",
    "NoTranscriptFoundError",
    "VideoUnavailableError",
    "InvalidVideoIdError",
    "RequestBlockedError",
    "RequestFailedError",
    "DataUnparsableError",
    "AgeRestrictedError",
    "VideoUnplayableError",
    "TranscriptParseFailedError",
]
