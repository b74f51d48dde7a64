"""
errors.py — Closed exception taxonomy for yt-transcript-mcp.

Every exception carries the `video_id` it concerns, an `ErrorKind`
discriminator and an `http_status` attribute so the FastAPI error handler
can translate library-level errors directly into the correct HTTP response
code without a separate mapping table.

Message text is built by `describe_error()`, a pure function of the error's
kind and fields.  The constructors call it once; nothing else formats
messages.

Hierarchy:
    TranscriptError (base)
    ├── TranscriptsDisabledError      (404)
    ├── NoTranscriptFoundError        (404)
    ├── VideoUnavailableError         (404)
    ├── InvalidVideoIdError           (400)
    ├── RequestBlockedError           (429)
    ├── RequestFailedError            (502)
    ├── DataUnparsableError           (502)
    ├── AgeRestrictedError            (403)
    ├── VideoUnplayableError          (403)
    └── TranscriptParseFailedError    (502)
"""

from __future__ import annotations

import enum

WATCH_URL = "https://www.youtube.com/watch?v="


class ErrorKind(str, enum.Enum):
    """Discriminator for every member of the taxonomy."""

    TRANSCRIPTS_DISABLED = "transcripts_disabled"
    NO_TRANSCRIPT_FOUND = "no_transcript_found"
    VIDEO_UNAVAILABLE = "video_unavailable"
    INVALID_VIDEO_ID = "invalid_video_id"
    REQUEST_BLOCKED = "request_blocked"
    REQUEST_FAILED = "request_failed"
    DATA_UNPARSABLE = "data_unparsable"
    AGE_RESTRICTED = "age_restricted"
    VIDEO_UNPLAYABLE = "video_unplayable"
    TRANSCRIPT_PARSE_FAILED = "transcript_parse_failed"


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for all transcript-acquisition errors.

    Attributes:
        video_id:    The video (or raw input, for InvalidVideoIdError) the
                     failure concerns.
        message:     Human-readable description, from describe_error().
        http_status: Suggested HTTP status code for the API layer.
    """

    kind: ErrorKind
    http_status: int = 500

    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        self.message = describe_error(self)
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Specific error cases
# ---------------------------------------------------------------------------

class TranscriptsDisabledError(TranscriptError):
    """The video has no caption tracks at all."""

    kind = ErrorKind.TRANSCRIPTS_DISABLED
    http_status = 404


class NoTranscriptFoundError(TranscriptError):
    """
    Transcripts exist, but none in any of the requested languages.

    `available_languages` lists the language code of every track, in track
    order, duplicates included.
    """

    kind = ErrorKind.NO_TRANSCRIPT_FOUND
    http_status = 404

    def __init__(
        self,
        video_id: str,
        requested_languages: list[str],
        available_languages: list[str],
    ) -> None:
        self.requested_languages = list(requested_languages)
        self.available_languages = list(available_languages)
        super().__init__(video_id)


class VideoUnavailableError(TranscriptError):
    """The video was deleted, is private, or never existed."""

    kind = ErrorKind.VIDEO_UNAVAILABLE
    http_status = 404


class InvalidVideoIdError(TranscriptError):
    """The input could not be resolved to a video ID, or was a mangled URL."""

    kind = ErrorKind.INVALID_VIDEO_ID
    http_status = 400


class RequestBlockedError(TranscriptError):
    """YouTube rate-limited the request or served a bot check."""

    kind = ErrorKind.REQUEST_BLOCKED
    http_status = 429


class RequestFailedError(TranscriptError):
    """
    Any other non-2xx response or a network failure.

    `status_code` is 0 when no HTTP response was received at all.
    """

    kind = ErrorKind.REQUEST_FAILED
    http_status = 502

    def __init__(self, video_id: str, status_code: int, status_text: str) -> None:
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(video_id)


class DataUnparsableError(TranscriptError):
    """The watch page or player response no longer has the expected shape."""

    kind = ErrorKind.DATA_UNPARSABLE
    http_status = 502


class AgeRestrictedError(TranscriptError):
    """The video requires a signed-in, age-verified account."""

    kind = ErrorKind.AGE_RESTRICTED
    http_status = 403


class VideoUnplayableError(TranscriptError):
    """Catch-all for any other non-OK playability status."""

    kind = ErrorKind.VIDEO_UNPLAYABLE
    http_status = 403

    def __init__(
        self,
        video_id: str,
        reason: str | None,
        sub_reasons: list[str] | None = None,
    ) -> None:
        self.reason = reason
        self.sub_reasons = list(sub_reasons or [])
        super().__init__(video_id)


class TranscriptParseFailedError(TranscriptError):
    """The timed-text payload could not be turned into snippets."""

    kind = ErrorKind.TRANSCRIPT_PARSE_FAILED
    http_status = 502

    def __init__(self, video_id: str, cause: Exception) -> None:
        self.cause = cause
        super().__init__(video_id)


# ---------------------------------------------------------------------------
# Message formatting
# ---------------------------------------------------------------------------

def describe_error(error: TranscriptError) -> str:
    """
    Build the human-readable message for a taxonomy member.

    Only reads the error's kind and payload fields, so it can be used on any
    instance regardless of where it was raised.
    """
    url = f"{WATCH_URL}{error.video_id}"
    kind = getattr(error, "kind", None)

    if kind is ErrorKind.TRANSCRIPTS_DISABLED:
        return (
            f"Transcripts are disabled for video: {url}\n\n"
            "The video owner has disabled subtitles/captions for this video."
        )
    if kind is ErrorKind.NO_TRANSCRIPT_FOUND:
        available = ", ".join(error.available_languages) or "None"
        return (
            f"No transcripts found for video: {url}\n\n"
            f"Requested languages: {', '.join(error.requested_languages)}\n"
            f"Available languages: {available}"
        )
    if kind is ErrorKind.VIDEO_UNAVAILABLE:
        return (
            f"The video is no longer available: {url}\n\n"
            "It may have been deleted, made private, or is otherwise inaccessible."
        )
    if kind is ErrorKind.INVALID_VIDEO_ID:
        return (
            f"Invalid video ID: {error.video_id}\n\n"
            "Provide a YouTube URL or an 11-character video ID, "
            'e.g. "dQw4w9WgXcQ".'
        )
    if kind is ErrorKind.REQUEST_BLOCKED:
        return (
            f"Request to YouTube was blocked for video: {url}\n\n"
            "This usually happens when:\n"
            "1. Too many requests come from your IP address\n"
            "2. Your IP belongs to a cloud provider (AWS, GCP, Azure, etc.)\n"
            "3. YouTube's bot detection was triggered\n\n"
            "Try again later or use a different network."
        )
    if kind is ErrorKind.REQUEST_FAILED:
        return (
            f"YouTube request failed for video: {url}\n\n"
            f"HTTP {error.status_code}: {error.status_text}"
        )
    if kind is ErrorKind.DATA_UNPARSABLE:
        return (
            f"Could not parse YouTube data for video: {url}\n\n"
            "YouTube may have changed their page structure."
        )
    if kind is ErrorKind.AGE_RESTRICTED:
        return (
            f"Video is age-restricted: {url}\n\n"
            "Age-restricted videos require authentication, which is not supported."
        )
    if kind is ErrorKind.VIDEO_UNPLAYABLE:
        text = f"Video is unplayable: {url}\n\nReason: {error.reason or 'No reason specified'}"
        if error.sub_reasons:
            details = "\n".join(f"  - {sub}" for sub in error.sub_reasons)
            text += f"\n\nAdditional details:\n{details}"
        return text
    if kind is ErrorKind.TRANSCRIPT_PARSE_FAILED:
        return (
            f"Failed to parse transcript XML for video: {url}\n\n"
            f"Error: {error.cause}"
        )
    return f"Transcript error for video: {url}"
