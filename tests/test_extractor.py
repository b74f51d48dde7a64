"""
test_extractor.py — Unit and pipeline tests for the core extraction module.

Unit tests (fast, no network):
    - URL / ID parsing for every supported format
    - format_text(), format_timestamped(), format_json(), format_tracks()
    - Error cases for malformed input

Pipeline tests run TranscriptFetcher end to end against FakeYouTube.

Integration tests (need network, marked with @pytest.mark.integration):
    - Fetching a transcript from a real YouTube video
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from fakes import VIDEO_ID, FakeYouTube, caption_track, player_response
from yt_transcript_mcp.errors import (
    InvalidVideoIdError,
    NoTranscriptFoundError,
    RequestBlockedError,
    RequestFailedError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_transcript_mcp.extractor import (
    TranscriptFetcher,
    extract,
    format_json,
    format_text,
    format_timestamp,
    format_timestamped,
    format_tracks,
    parse_video_id,
)
from yt_transcript_mcp.models import FetchedTranscript, TranscriptSnippet, TranscriptTrack


def _make_transcript(snippets_data: list[dict], is_generated: bool = False) -> FetchedTranscript:
    return FetchedTranscript(
        video_id=VIDEO_ID,
        language="English",
        language_code="en",
        is_generated=is_generated,
        snippets=tuple(TranscriptSnippet(**s) for s in snippets_data),
    )


# ---------------------------------------------------------------------------
# parse_video_id — URL parsing
# ---------------------------------------------------------------------------

class TestParseVideoId:
    """Tests for parse_video_id covering every URL format + bare IDs."""

    def test_standard_watch_url(self) -> None:
        assert parse_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_watch_url_with_trailing_params(self) -> None:
        """Parameters after & are ignored."""
        assert parse_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=30s") == "dQw4w9WgXcQ"

    def test_watch_url_v_not_first(self) -> None:
        """The v parameter can appear after other query parameters."""
        url = "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ&list=PLx"
        assert parse_video_id(url) == "dQw4w9WgXcQ"

    def test_short_url(self) -> None:
        assert parse_video_id("https://youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_short_url_with_query(self) -> None:
        assert parse_video_id("https://youtu.be/dQw4w9WgXcQ?si=abc123") == "dQw4w9WgXcQ"

    def test_embed_url(self) -> None:
        assert parse_video_id("https://www.youtube.com/embed/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_legacy_v_and_e_urls(self) -> None:
        assert parse_video_id("https://www.youtube.com/v/dQw4w9WgXcQ?version=3") == "dQw4w9WgXcQ"
        assert parse_video_id("https://www.youtube.com/e/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_shorts_url(self) -> None:
        assert parse_video_id("https://www.youtube.com/shorts/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_mobile_url(self) -> None:
        assert parse_video_id("https://m.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    @pytest.mark.parametrize("video_id", ["dQw4w9WgXcQ", "Ab_Cd-Ef_12", "___________", "-----------"])
    def test_bare_id_returned_unchanged(self, video_id: str) -> None:
        assert parse_video_id(video_id) == video_id

    def test_bare_id_with_whitespace(self) -> None:
        assert parse_video_id("  dQw4w9WgXcQ  ") == "dQw4w9WgXcQ"

    def test_http_without_www(self) -> None:
        assert parse_video_id("http://youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_invalid_url_raises(self) -> None:
        with pytest.raises(InvalidVideoIdError) as exc_info:
            parse_video_id("not a url")
        assert exc_info.value.video_id == "not a url"

    def test_empty_string_raises(self) -> None:
        with pytest.raises(InvalidVideoIdError):
            parse_video_id("")

    def test_wrong_length_id_raises(self) -> None:
        with pytest.raises(InvalidVideoIdError):
            parse_video_id("dQw4w9WgXc")
        with pytest.raises(InvalidVideoIdError):
            parse_video_id("https://www.youtube.com/watch?v=short")


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

class TestFormatting:
    """Tests for the text, timestamped, JSON and track-list formatters."""

    DATA = [
        {"text": "Hello world", "start": 0.0, "duration": 1.5},
        {"text": "Second line", "start": 61.5, "duration": 2.0},
    ]

    def test_format_text_joins_lines(self) -> None:
        assert format_text(_make_transcript(self.DATA)) == "Hello world\nSecond line"

    def test_format_text_custom_separator(self) -> None:
        assert format_text(_make_transcript(self.DATA), separator=" ") == "Hello world Second line"

    def test_format_text_empty(self) -> None:
        assert format_text(_make_transcript([])) == ""

    def test_format_timestamped(self) -> None:
        assert format_timestamped(_make_transcript(self.DATA)) == (
            "[0:00] Hello world\n[1:01] Second line"
        )

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "0:00"), (9.9, "0:09"), (92.5, "1:32"), (3599, "59:59"), (3725, "1:02:05")],
    )
    def test_format_timestamp(self, seconds: float, expected: str) -> None:
        assert format_timestamp(seconds) == expected

    def test_format_json_structure(self) -> None:
        result = format_json(_make_transcript(self.DATA, is_generated=True))
        assert result == {
            "video_id": VIDEO_ID,
            "language": "English",
            "language_code": "en",
            "is_generated": True,
            "segment_count": 2,
            "segments": self.DATA,
        }

    def test_format_tracks(self) -> None:
        tracks = [
            TranscriptTrack(VIDEO_ID, "u1", "English", "en", False, is_translatable=True),
            TranscriptTrack(VIDEO_ID, "u2", "French (auto-generated)", "fr", True),
        ]
        assert format_tracks(tracks) == (
            "- English (en) [manual], translatable\n"
            "- French (auto-generated) (fr) [auto-generated]"
        )


# ---------------------------------------------------------------------------
# TranscriptFetcher — full pipeline against the fake upstream
# ---------------------------------------------------------------------------

class TestTranscriptFetcher:
    """End-to-end tests with FakeYouTube."""

    def test_list_transcripts(self, youtube: FakeYouTube) -> None:
        fetcher = TranscriptFetcher(http_client=youtube.client())
        tracks = asyncio.run(fetcher.list_transcripts(f"https://youtu.be/{VIDEO_ID}"))
        assert [t.language for t in tracks] == ["English (auto-generated)", "English", "French"]

    def test_list_transcripts_is_repeatable(self, youtube: FakeYouTube) -> None:
        fetcher = TranscriptFetcher(http_client=youtube.client())
        first = asyncio.run(fetcher.list_transcripts(VIDEO_ID))
        second = asyncio.run(fetcher.list_transcripts(VIDEO_ID))
        assert first == second

    def test_fetch_transcript_defaults_to_manual_english(self, youtube: FakeYouTube) -> None:
        fetcher = TranscriptFetcher(http_client=youtube.client())
        transcript = asyncio.run(fetcher.fetch_transcript(VIDEO_ID))

        assert transcript.video_id == VIDEO_ID
        assert transcript.language == "English"
        assert transcript.language_code == "en"
        assert transcript.is_generated is False
        assert transcript.to_raw_data() == [
            {"text": "Hey there", "start": 0.0, "duration": 1.54},
            {"text": "how are you & yours", "start": 1.54, "duration": 4.16},
        ]
        xml_request = youtube.requests[-1]
        assert xml_request.url.params["lang"] == "en"
        assert "fmt" not in xml_request.url.params

    def test_fetch_transcript_language_priority(self, youtube: FakeYouTube) -> None:
        fetcher = TranscriptFetcher(http_client=youtube.client())
        transcript = asyncio.run(fetcher.fetch_transcript(VIDEO_ID, languages=["de", "fr"]))
        assert transcript.language_code == "fr"

    def test_fetch_transcript_preserve_formatting(self, youtube: FakeYouTube) -> None:
        youtube.xml = '<transcript><text start="0" dur="1">&lt;i&gt;hi&lt;/i&gt;</text></transcript>'
        fetcher = TranscriptFetcher(http_client=youtube.client())
        plain = asyncio.run(fetcher.fetch_transcript(VIDEO_ID))
        kept = asyncio.run(fetcher.fetch_transcript(VIDEO_ID, preserve_formatting=True))
        assert plain.snippets[0].text == "hi"
        assert kept.snippets[0].text == "<i>hi</i>"

    def test_no_matching_language(self, youtube: FakeYouTube) -> None:
        fetcher = TranscriptFetcher(http_client=youtube.client())
        with pytest.raises(NoTranscriptFoundError) as exc_info:
            asyncio.run(fetcher.fetch_transcript(VIDEO_ID, languages=["ja"]))
        assert exc_info.value.available_languages == ["en", "en", "fr"]

    def test_empty_track_list_is_disabled(self, youtube: FakeYouTube) -> None:
        youtube.default_player = player_response([])
        fetcher = TranscriptFetcher(http_client=youtube.client())
        assert asyncio.run(fetcher.list_transcripts(VIDEO_ID)) == []
        with pytest.raises(TranscriptsDisabledError):
            asyncio.run(fetcher.fetch_transcript(VIDEO_ID))

    def test_no_captions_block_is_disabled(self, youtube: FakeYouTube) -> None:
        youtube.default_player = player_response(None)
        fetcher = TranscriptFetcher(http_client=youtube.client())
        with pytest.raises(TranscriptsDisabledError):
            asyncio.run(fetcher.list_transcripts(VIDEO_ID))

    def test_unavailable_video(self, youtube: FakeYouTube) -> None:
        youtube.default_player = player_response(
            [caption_track("en", "English")],
            status="ERROR",
            reason="This video is unavailable",
        )
        fetcher = TranscriptFetcher(http_client=youtube.client())
        with pytest.raises(VideoUnavailableError):
            asyncio.run(fetcher.fetch_transcript(VIDEO_ID))
        assert not any(r.url.path == "/api/timedtext" for r in youtube.requests)

    def test_xml_blocked(self, youtube: FakeYouTube) -> None:
        youtube.xml_status = 429
        fetcher = TranscriptFetcher(http_client=youtube.client())
        with pytest.raises(RequestBlockedError):
            asyncio.run(fetcher.fetch_transcript(VIDEO_ID))

    def test_xml_failed(self, youtube: FakeYouTube) -> None:
        youtube.xml_status = 500
        fetcher = TranscriptFetcher(http_client=youtube.client())
        with pytest.raises(RequestFailedError):
            asyncio.run(fetcher.fetch_transcript(VIDEO_ID))

    def test_invalid_input_makes_no_requests(self, youtube: FakeYouTube) -> None:
        fetcher = TranscriptFetcher(http_client=youtube.client())
        with pytest.raises(InvalidVideoIdError):
            asyncio.run(fetcher.fetch_transcript("not a url"))
        assert youtube.requests == []


# ---------------------------------------------------------------------------
# extract() — high-level convenience wrapper
# ---------------------------------------------------------------------------

class TestExtract:
    """Tests for extract() with get_transcript mocked."""

    def _patched(self):
        transcript = _make_transcript([
            {"text": "Hello", "start": 0.0, "duration": 1.0},
            {"text": "World", "start": 75.0, "duration": 1.5},
        ])
        return patch(
            "yt_transcript_mcp.extractor.get_transcript",
            new_callable=AsyncMock,
            return_value=transcript,
        )

    def test_text_format(self) -> None:
        with self._patched() as mock_get:
            assert asyncio.run(extract(VIDEO_ID)) == "Hello\nWorld"
        mock_get.assert_awaited_once_with(VIDEO_ID, languages=None, preserve_formatting=False)

    def test_timestamped_format(self) -> None:
        with self._patched():
            assert asyncio.run(extract(VIDEO_ID, fmt="timestamped")) == "[0:00] Hello\n[1:15] World"

    def test_json_format(self) -> None:
        with self._patched() as mock_get:
            result = asyncio.run(extract(VIDEO_ID, ["de", "en"], fmt="json", preserve_formatting=True))
        assert result["segment_count"] == 2
        mock_get.assert_awaited_once_with(VIDEO_ID, languages=["de", "en"], preserve_formatting=True)

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown format"):
            asyncio.run(extract(VIDEO_ID, fmt="srt"))


# ---------------------------------------------------------------------------
# Integration — real network
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestIntegration:
    """Hits YouTube for real; deselected by default."""

    def test_fetch_real_video(self) -> None:
        transcript = asyncio.run(TranscriptFetcher().fetch_transcript("jNQXAC9IVRw"))
        assert len(transcript) > 0
        assert transcript.language_code == "en"
