"""
innertube.py — Raw calls to YouTube's watch page and Innertube player API.

The flow for one video is:

    1. GET the watch page HTML          → fetch_video_html()
    2. Scrape INNERTUBE_API_KEY from it → extract_api_key()
    3. POST to /youtubei/v1/player once per ClientProfile, in order, until
       one succeeds                     → fetch_player_data()
    4. Check playabilityStatus          → assert_playability()

The timed-text XML for a chosen track is fetched with fetch_transcript_xml(),
which applies the same 429 / non-2xx mapping.

None of these endpoints are documented.  Field access on the returned JSON
is guarded everywhere; see catalog.py for the captions block.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass

import httpx

from yt_transcript_mcp.errors import (
    AgeRestrictedError,
    DataUnparsableError,
    InvalidVideoIdError,
    RequestBlockedError,
    RequestFailedError,
    TranscriptError,
    VideoUnavailableError,
    VideoUnplayableError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

WATCH_URL = "https://www.youtube.com/watch?v="
INNERTUBE_PLAYER_URL = "https://www.youtube.com/youtubei/v1/player?key="

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_4) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/85.0.4183.83 Safari/537.36"
)
ACCEPT_LANGUAGE = "en-US,en;q=0.9"

_API_KEY_PATTERN = re.compile(r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"')
_CAPTCHA_MARKER = 'class="g-recaptcha"'

# Exact upstream reason strings that map to specific errors.
_REASON_BOT_CHECK = "Sign in to confirm you're not a bot"
_REASON_AGE_RESTRICTED = "This video may be inappropriate for some users."
_REASON_UNAVAILABLE = "This video is unavailable"


class PlayabilityStatus(str, enum.Enum):
    OK = "OK"
    ERROR = "ERROR"
    LOGIN_REQUIRED = "LOGIN_REQUIRED"


# ---------------------------------------------------------------------------
# Client profiles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClientProfile:
    """
    A simulated device/browser identity sent in the Innertube context.

    Attributes:
        name:           Short label used in logs ("ANDROID", "WEB", ...).
        client_name:    Value of context.client.clientName.
        client_version: Value of context.client.clientVersion.
        extra:          Additional context.client fields (platform metadata),
                        as (key, value) pairs.
    """
    name: str
    client_name: str
    client_version: str
    extra: tuple[tuple[str, object], ...] = ()

    def context(self) -> dict:
        client = {"clientName": self.client_name, "clientVersion": self.client_version}
        client.update(self.extra)
        return {"client": client}


# Fallback order: mobile app, then desktop web, then embedded TV player.
CLIENT_PROFILES: tuple[ClientProfile, ...] = (
    ClientProfile("ANDROID", "ANDROID", "19.09.37", (("androidSdkVersion", 30),)),
    ClientProfile("WEB", "WEB", "2.20250103.01.00"),
    ClientProfile("TV_EMBEDDED", "TVHTML5_SIMPLY_EMBEDDED_PLAYER", "2.0"),
)


# ---------------------------------------------------------------------------
# Playability
# ---------------------------------------------------------------------------

def _child(node: object, key: str) -> dict:
    """node[key] when both are dicts, else an empty dict."""
    value = node.get(key) if isinstance(node, dict) else None
    return value if isinstance(value, dict) else {}


def _sub_reasons(playability: dict) -> list[str]:
    renderer = _child(_child(playability, "errorScreen"), "playerErrorMessageRenderer")
    runs = _child(renderer, "subreason").get("runs")
    if not isinstance(runs, list):
        return []
    return [
        run["text"] for run in runs
        if isinstance(run, dict) and isinstance(run.get("text"), str)
    ]


def assert_playability(playability: dict | None, video_id: str) -> None:
    """
    Raise the error matching a player response's playabilityStatus block.

    A missing block and status OK both pass.  `video_id` is checked for a
    URL shape: YouTube reports a mangled URL with the same reason string as
    a missing video, and only the input tells the two apart.

    Raises:
        RequestBlockedError, AgeRestrictedError, InvalidVideoIdError,
        VideoUnavailableError, VideoUnplayableError
        DataUnparsableError: The block is present but not a JSON object.
    """
    if not playability:
        return
    if not isinstance(playability, dict):
        raise DataUnparsableError(video_id)

    status = playability.get("status")
    reason = playability.get("reason")
    if not isinstance(reason, str):
        reason = None

    if status == PlayabilityStatus.OK:
        return

    if status == PlayabilityStatus.LOGIN_REQUIRED:
        if reason == _REASON_BOT_CHECK:
            raise RequestBlockedError(video_id)
        if reason == _REASON_AGE_RESTRICTED:
            raise AgeRestrictedError(video_id)

    if status == PlayabilityStatus.ERROR and reason == _REASON_UNAVAILABLE:
        if video_id.startswith(("http://", "https://")):
            raise InvalidVideoIdError(video_id)
        raise VideoUnavailableError(video_id)

    raise VideoUnplayableError(video_id, reason, _sub_reasons(playability))


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

def extract_api_key(html: str, video_id: str) -> str:
    """
    Scrape the Innertube API key embedded in a watch page.

    Raises:
        RequestBlockedError: The page is a reCAPTCHA challenge.
        DataUnparsableError: The key is missing for any other reason.
    """
    match = _API_KEY_PATTERN.search(html)
    if match:
        return match.group(1)
    if _CAPTCHA_MARKER in html:
        raise RequestBlockedError(video_id)
    raise DataUnparsableError(video_id)


def _raise_for_status(response: httpx.Response, video_id: str) -> None:
    if response.status_code == 429:
        raise RequestBlockedError(video_id)
    if not response.is_success:
        raise RequestFailedError(video_id, response.status_code, response.reason_phrase)


class InnertubeClient:
    """
    Performs the network calls for one request.

    Args:
        http:     An open httpx.AsyncClient.  Its lifecycle belongs to the
                  caller.
        profiles: Client profiles to try, in order.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        profiles: tuple[ClientProfile, ...] = CLIENT_PROFILES,
    ) -> None:
        self.http = http
        self.profiles = profiles

    async def fetch_video_html(self, video_id: str) -> str:
        try:
            response = await self.http.get(
                f"{WATCH_URL}{video_id}",
                headers={"User-Agent": USER_AGENT, "Accept-Language": ACCEPT_LANGUAGE},
            )
        except httpx.HTTPError as exc:
            raise RequestFailedError(video_id, 0, str(exc)) from exc
        _raise_for_status(response, video_id)
        return response.text

    async def fetch_player_data(self, video_id: str) -> dict:
        """
        Fetch the player response, falling back across client profiles.

        Stops at the first profile that answers with 2xx JSON.  When every
        profile fails, the error from the last one is raised.

        Raises:
            RequestBlockedError, RequestFailedError, DataUnparsableError
        """
        html = await self.fetch_video_html(video_id)
        api_key = extract_api_key(html, video_id)

        last_error: TranscriptError | None = None
        for profile in self.profiles:
            try:
                data = await self._fetch_with_profile(video_id, api_key, profile)
            except TranscriptError as exc:
                logger.debug("%s client failed for %s: %s", profile.name, video_id, exc.kind.value)
                last_error = exc
                continue
            logger.debug("%s client succeeded for %s", profile.name, video_id)
            return data

        if last_error is None:
            raise DataUnparsableError(video_id)
        logger.warning("All Innertube clients failed for %s", video_id)
        raise last_error

    async def _fetch_with_profile(self, video_id: str, api_key: str, profile: ClientProfile) -> dict:
        logger.debug("Trying %s client for video %s", profile.name, video_id)
        try:
            response = await self.http.post(
                f"{INNERTUBE_PLAYER_URL}{api_key}",
                json={"context": profile.context(), "videoId": video_id},
                headers={"User-Agent": USER_AGENT},
            )
        except httpx.HTTPError as exc:
            raise RequestFailedError(video_id, 0, str(exc)) from exc

        logger.debug("%s response status: %s", profile.name, response.status_code)
        _raise_for_status(response, video_id)

        try:
            data = response.json()
        except ValueError as exc:
            raise DataUnparsableError(video_id) from exc
        if not isinstance(data, dict):
            raise DataUnparsableError(video_id)
        return data

    async def fetch_transcript_xml(self, url: str, video_id: str) -> str:
        logger.debug("Fetching transcript XML from %s", url[:100])
        try:
            response = await self.http.get(
                url,
                headers={"User-Agent": USER_AGENT, "Accept-Language": ACCEPT_LANGUAGE},
            )
        except httpx.HTTPError as exc:
            raise RequestFailedError(video_id, 0, str(exc)) from exc
        _raise_for_status(response, video_id)
        logger.debug("Received transcript XML, length %d", len(response.text))
        return response.text
