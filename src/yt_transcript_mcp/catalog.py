"""
catalog.py — Build and choose from a video's list of caption tracks.

build_tracks() reads the `captions` block of a player response (already
checked by assert_playability) into TranscriptTrack objects.
select_transcript() picks one of them for an ordered list of preferred
language codes.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from yt_transcript_mcp.errors import (
    DataUnparsableError,
    NoTranscriptFoundError,
    TranscriptsDisabledError,
)
from yt_transcript_mcp.models import TranscriptTrack, TranslationLanguage

# Appended to baseUrl by some clients; without it YouTube serves plain XML.
_SRV3_FORMAT = "&fmt=srv3"


def _text_of(name: object, fallback: str) -> str:
    """Read a {"runs": [{"text"}]} or {"simpleText"} label, else fallback."""
    if not isinstance(name, dict):
        return fallback
    runs = name.get("runs")
    if isinstance(runs, list) and runs and isinstance(runs[0], dict):
        text = runs[0].get("text")
        if isinstance(text, str) and text:
            return text
    simple = name.get("simpleText")
    return simple if isinstance(simple, str) and simple else fallback


def _dict_entries(value: object) -> list[dict]:
    """The dict items of a JSON list; anything else reads as empty."""
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def _translation_languages(captions: dict) -> tuple[TranslationLanguage, ...]:
    languages = []
    for entry in _dict_entries(captions.get("translationLanguages")):
        code = entry.get("languageCode")
        if not isinstance(code, str) or not code:
            continue
        languages.append(
            TranslationLanguage(
                language=_text_of(entry.get("languageName"), code),
                language_code=code,
            )
        )
    return tuple(languages)


def build_tracks(player_data: dict, video_id: str) -> list[TranscriptTrack]:
    """
    List the caption tracks in a player response, in upstream order.

    Translation targets come from the response-level list and are attached,
    unchanged, to every translatable track.  Entries that are not JSON
    objects are skipped.

    Raises:
        TranscriptsDisabledError: The response has no caption tracks block.
        DataUnparsableError:      captionTracks is present but not a list.
    """
    captions = player_data.get("captions")
    captions = captions.get("playerCaptionsTracklistRenderer") if isinstance(captions, dict) else None
    if not isinstance(captions, dict) or "captionTracks" not in captions:
        raise TranscriptsDisabledError(video_id)

    raw_tracks = captions["captionTracks"]
    if raw_tracks is not None and not isinstance(raw_tracks, list):
        raise DataUnparsableError(video_id)

    translation_languages = _translation_languages(captions)

    tracks = []
    for raw in _dict_entries(raw_tracks):
        code = raw.get("languageCode")
        if not isinstance(code, str):
            code = ""
        base_url = raw.get("baseUrl")
        if not isinstance(base_url, str):
            base_url = ""
        is_translatable = bool(raw.get("isTranslatable"))
        tracks.append(
            TranscriptTrack(
                video_id=video_id,
                url=base_url.replace(_SRV3_FORMAT, ""),
                language=_text_of(raw.get("name"), code),
                language_code=code,
                is_generated=raw.get("kind") == "asr",
                is_translatable=is_translatable,
                translation_languages=translation_languages if is_translatable else (),
            )
        )
    return tracks


def _find(tracks: Iterable[TranscriptTrack], code: str, generated: bool) -> TranscriptTrack | None:
    for track in tracks:
        if track.language_code == code and track.is_generated == generated:
            return track
    return None


def select_transcript(
    tracks: Sequence[TranscriptTrack],
    languages: Sequence[str],
    video_id: str,
) -> TranscriptTrack:
    """
    Pick the track for the first language in `languages` that has one.

    Within each language a manually created track wins over an
    auto-generated one.  Languages are never skipped to reach a manual
    track: ["en", "fr"] with only a generated "en" and a manual "fr"
    returns the generated "en".

    Raises:
        NoTranscriptFoundError: No track matches any requested language.
    """
    for code in languages:
        track = _find(tracks, code, generated=False) or _find(tracks, code, generated=True)
        if track is not None:
            return track
    raise NoTranscriptFoundError(
        video_id,
        list(languages),
        [t.language_code for t in tracks],
    )
