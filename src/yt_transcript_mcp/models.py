"""
models.py — Immutable data structures passed between pipeline stages.

All of these are created and discarded within a single request; frozen=True
makes instances hashable and prevents accidental mutation after creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class TranslationLanguage:
    """A language YouTube offers to machine-translate a track into."""
    language: str
    language_code: str


@dataclass(frozen=True)
class TranscriptTrack:
    """
    One caption track listed for a video.

    Attributes:
        video_id:              The 11-character YouTube video identifier.
        url:                   Timed-text URL serving this track as XML.
        language:              Display name, e.g. "English (auto-generated)".
        language_code:         BCP-47-ish code, e.g. "en" or "pt-BR".
        is_generated:          True for speech-recognition (ASR) tracks.
        is_translatable:       Whether YouTube can translate this track.
        translation_languages: Translation targets; empty unless translatable.
    """
    video_id: str
    url: str
    language: str
    language_code: str
    is_generated: bool
    is_translatable: bool = False
    translation_languages: tuple[TranslationLanguage, ...] = ()

    def to_dict(self) -> dict:
        return {
            "language": self.language,
            "language_code": self.language_code,
            "is_generated": self.is_generated,
            "is_translatable": self.is_translatable,
            "translation_languages": [
                {"language": tl.language, "language_code": tl.language_code}
                for tl in self.translation_languages
            ],
        }


@dataclass(frozen=True)
class TranscriptSnippet:
    """One caption line: decoded text plus its timing in seconds."""
    text: str
    start: float
    duration: float


@dataclass(frozen=True)
class FetchedTranscript:
    """
    The parsed transcript of one track.

    Iterating yields the snippets in chronological order, so formatters can
    treat this like a list of snippets.
    """
    video_id: str
    language: str
    language_code: str
    is_generated: bool
    snippets: tuple[TranscriptSnippet, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[TranscriptSnippet]:
        return iter(self.snippets)

    def __len__(self) -> int:
        return len(self.snippets)

    def to_raw_data(self) -> list[dict]:
        return [
            {"text": s.text, "start": s.start, "duration": s.duration}
            for s in self.snippets
        ]
