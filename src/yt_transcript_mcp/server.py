"""
server.py — MCP server exposing transcript retrieval as tools.

Creates the shared `FastMCP` server named ``youtube-transcript`` and
registers two tools:

* ``get-transcript`` – transcript text for a video, with or without
  ``[M:SS]`` timestamps.
* ``get-transcript-languages`` – the caption tracks available for a video.

Both tools return plain text.  Any TranscriptError is re-raised as a
``ToolError`` carrying the error's message, which FastMCP reports to the
client as an error result; no exception type information crosses the
boundary.

Run with ``yt-transcript serve`` or ``python -m yt_transcript_mcp``.  A host
application's configuration should specify something akin to::

    "command": "yt-transcript",
    "args": ["serve"]
"""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from yt_transcript_mcp.errors import TranscriptError
from yt_transcript_mcp.extractor import (
    DEFAULT_LANGUAGES,
    TranscriptFetcher,
    format_text,
    format_timestamped,
    format_tracks,
)
from yt_transcript_mcp.innertube import WATCH_URL

SERVER_NAME = "youtube-transcript"

mcp = FastMCP(SERVER_NAME)


@mcp.tool(
    name="get-transcript",
    description=(
        "Retrieve the transcript of a YouTube video. Accepts various YouTube URL "
        "formats or a bare video ID and returns the full transcript, with "
        "timestamps by default."
    ),
)
async def get_transcript_tool(
    url: str,
    lang: Optional[str] = None,
    include_timestamps: bool = True,
) -> str:
    """Fetch one transcript and render it as text.

    Args:
        url: YouTube video URL (e.g. https://www.youtube.com/watch?v=VIDEO_ID
            or https://youtu.be/VIDEO_ID) or an 11-character video ID.
        lang: Language code for the transcript (e.g. 'en', 'es'). Default: 'en'.
        include_timestamps: Prefix each line with its [M:SS] start time.
            Without timestamps the text is joined into a single paragraph.
    """
    languages = [lang] if lang else DEFAULT_LANGUAGES
    try:
        transcript = await TranscriptFetcher().fetch_transcript(url, languages=languages)
    except TranscriptError as exc:
        raise ToolError(exc.message) from exc

    if include_timestamps:
        body = format_timestamped(transcript)
    else:
        body = format_text(transcript, separator=" ")

    language = f"{transcript.language} ({transcript.language_code})"
    if transcript.is_generated:
        language += ", auto-generated"

    return "\n".join([
        f"YouTube Transcript for Video: {transcript.video_id}",
        f"URL: {WATCH_URL}{transcript.video_id}",
        f"Language: {language}",
        "",
        body,
    ])


@mcp.tool(
    name="get-transcript-languages",
    description="List all available transcript languages for a YouTube video.",
)
async def get_transcript_languages_tool(url: str) -> str:
    """List the caption tracks of a video.

    Args:
        url: YouTube video URL or 11-character video ID.
    """
    fetcher = TranscriptFetcher()
    try:
        tracks = await fetcher.list_transcripts(url)
    except TranscriptError as exc:
        raise ToolError(exc.message) from exc

    if not tracks:
        return f"No transcripts are available for this video: {url}"

    video_id = tracks[0].video_id
    return "\n".join([
        f"Available transcripts for video: {video_id}",
        f"URL: {WATCH_URL}{video_id}",
        "",
        format_tracks(tracks),
        "",
        "Use the get-transcript tool with the 'lang' parameter to fetch a "
        "specific language.",
    ])


def run() -> None:
    """Serve over stdio until the client disconnects."""
    mcp.run()
