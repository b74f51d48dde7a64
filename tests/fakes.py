"""
fakes.py — An in-process fake of YouTube's endpoints.

FakeYouTube answers the three upstream calls (watch page, Innertube player,
timed-text XML) through httpx.MockTransport, so the whole pipeline runs
without network access.  Tests tweak its attributes to simulate failures.
"""

from __future__ import annotations

import json

import httpx

VIDEO_ID = "dQw4w9WgXcQ"
API_KEY = "AIzaSyFakeKey_123-abc"
TIMEDTEXT_BASE = "https://www.youtube.com/api/timedtext?v=dQw4w9WgXcQ"

WATCH_HTML = (
    "<html><script>var ytcfg = {"
    f'"INNERTUBE_API_KEY":"{API_KEY}","INNERTUBE_CLIENT_NAME":"WEB"'
    "};</script></html>"
)

SAMPLE_XML = (
    '<?xml version="1.0" encoding="utf-8" ?><transcript>'
    '<text start="0.0" dur="1.54">Hey there</text>'
    '<text start="1.54" dur="4.16">how are you &amp; yours</text>'
    '<text start="5.7" dur="2.0">   </text>'
    "</transcript>"
)


def caption_track(
    code: str,
    name: str,
    *,
    asr: bool = False,
    translatable: bool = True,
) -> dict:
    """One entry of playerCaptionsTracklistRenderer.captionTracks."""
    track = {
        "baseUrl": f"{TIMEDTEXT_BASE}&lang={code}&fmt=srv3",
        "name": {"runs": [{"text": name}]},
        "languageCode": code,
        "isTranslatable": translatable,
    }
    if asr:
        track["kind"] = "asr"
    return track


def player_response(tracks: list[dict] | None = None, **playability) -> dict:
    """A minimal Innertube player response with the given caption tracks."""
    data: dict = {"playabilityStatus": playability or {"status": "OK"}}
    if tracks is not None:
        data["captions"] = {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": tracks,
                "translationLanguages": [
                    {"languageCode": "de", "languageName": {"runs": [{"text": "German"}]}},
                    {"languageCode": "es", "languageName": {"simpleText": "Spanish"}},
                ],
            }
        }
    return data


DEFAULT_TRACKS = [
    caption_track("en", "English (auto-generated)", asr=True),
    caption_track("en", "English"),
    caption_track("fr", "French", translatable=False),
]


class FakeYouTube:
    """
    Programmable stand-in for the upstream HTTP surface.

    Attributes:
        html_status / html:  Watch page response.
        player:              clientName → (status, body).  Clients that are
                             not listed answer 200 with `default_player`.
        xml_status / xml:    Timed-text response.
        requests:            Every httpx.Request received, in order.
    """

    def __init__(self) -> None:
        self.html_status = 200
        self.html = WATCH_HTML
        self.default_player = player_response(DEFAULT_TRACKS)
        self.player: dict[str, tuple[int, object]] = {}
        self.xml_status = 200
        self.xml = SAMPLE_XML
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/watch":
            return httpx.Response(self.html_status, text=self.html)

        if path == "/youtubei/v1/player":
            body = json.loads(request.content)
            client_name = body["context"]["client"]["clientName"]
            status, payload = self.player.get(client_name, (200, self.default_player))
            if isinstance(payload, str):
                return httpx.Response(status, text=payload)
            return httpx.Response(status, json=payload)

        if path == "/api/timedtext":
            return httpx.Response(self.xml_status, text=self.xml)

        return httpx.Response(404, text="unexpected path")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def player_clients(self) -> list[str]:
        """clientName of each player POST, in order."""
        return [
            json.loads(r.content)["context"]["client"]["clientName"]
            for r in self.requests
            if r.url.path == "/youtubei/v1/player"
        ]
