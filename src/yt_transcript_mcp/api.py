"""
api.py — FastAPI REST API for yt-transcript-mcp.

The same two operations as the MCP tools, over plain HTTP.

Endpoints:
    GET /transcript/{video_id}   — Fetch a transcript (text, timestamped or JSON).
    GET /languages/{video_id}    — List the caption tracks available for a video.
    GET /health                  — Simple health-check for load balancers / monitoring.

Run with:
    uv run uvicorn yt_transcript_mcp.api:app

The global exception handler catches any TranscriptError and converts it to
the appropriate HTTP response using the status code stored on the exception.
"""

from __future__ import annotations

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from yt_transcript_mcp.errors import TranscriptError
from yt_transcript_mcp.extractor import extract, list_transcripts

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Transcript API",
    description="Fetch YouTube video transcripts as plain text, timestamped "
                "lines or structured JSON, and list available caption tracks.",
    version="0.1.0",
)


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """
    Translate any TranscriptError (or subclass) into an HTTP error response.

    The http_status on the exception drives the response code, so endpoint
    code only ever raises the library exception.
    """
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message, "kind": exc.kind.value},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

# response_model=None: the response class depends on the format param.
@app.get("/transcript/{video_id}", response_model=None)
async def get_transcript(
    video_id: str,
    format: str = Query(
        default="text",
        description="Output format: 'text' for plain transcript, 'timestamped' for "
                    "[M:SS]-prefixed lines, 'json' for structured data with timestamps.",
        pattern="^(text|timestamped|json)$",
    ),
    lang: str = Query(
        default="",
        description="Comma-separated language codes in priority order (e.g. 'de,en'). "
                    "Empty defaults to English.",
    ),
    preserve_formatting: bool = Query(
        default=False,
        description="Keep inline formatting tags such as <b> and <i> in the text.",
    ),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single YouTube video.

    **video_id** is the 11-character YouTube video identifier
    (e.g. `dQw4w9WgXcQ`).
    """
    languages: list[str] | None = None
    if lang:
        languages = [code.strip() for code in lang.split(",") if code.strip()]

    result = await extract(
        video_id,
        languages=languages,
        fmt=format,
        preserve_formatting=preserve_formatting,
    )

    if isinstance(result, dict):
        return JSONResponse(content=result)
    return PlainTextResponse(content=result)


@app.get("/languages/{video_id}")
async def get_languages(video_id: str) -> JSONResponse:
    """
    List the caption tracks available for a video.

    Each entry has the display language, its code, whether it was
    auto-generated and the languages it can be translated into.
    """
    tracks = await list_transcripts(video_id)
    return JSONResponse(content={
        "video_id": video_id,
        "transcripts": [track.to_dict() for track in tracks],
    })


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------

@app.get("/health")
async def health() -> dict:
    """Minimal health-check endpoint returning {"status": "ok"}."""
    return {"status": "ok"}
