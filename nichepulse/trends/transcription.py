"""
Speech-to-text for spoken hooks.

DeepgramTranscriber sends a public media URL to Deepgram's prerecorded
endpoint. VideoUrlResolver turns a FilteredVideo into such a URL: the
vendor's play URL when the item carries one, otherwise the tiktok-scraper2
no-watermark lookup.
"""

from typing import Any, NamedTuple, Optional
import logging

import httpx

from .aggregation.tiktok import DEFAULT_TIKTOK_HOST, dig, first_truthy, tiktok_video_url
from .models import FilteredVideo, Platform
from ..utils.validation import first_url, validate_url


logger = logging.getLogger(__name__)

DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"


class Transcript(NamedTuple):
    text: str
    confidence: float = 0.0


def _first_alternative(data: Any) -> dict:
    channels = dig(data, "results", "channels")
    if not isinstance(channels, list) or not channels:
        return {}
    alternatives = dig(channels[0], "alternatives")
    if not isinstance(alternatives, list) or not alternatives or not isinstance(alternatives[0], dict):
        return {}
    return alternatives[0]


class DeepgramTranscriber:
    """
    Client for Deepgram's prerecorded transcription API.

    Failures are logged and return None; an empty transcript (music-only
    videos) is returned as Transcript("").
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "nova-2",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def transcribe(self, media_url: str) -> Optional[Transcript]:
        """
        Transcribe the audio track of a hosted video.

        Args:
            media_url: URL Deepgram can download

        Returns:
            Transcript, or None if the request failed
        """
        if not self.api_key:
            logger.error("DEEPGRAM_API_KEY is not set")
            return None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    DEEPGRAM_LISTEN_URL,
                    params={"model": self.model, "smart_format": "true", "punctuate": "true"},
                    headers={"Authorization": f"Token {self.api_key}"},
                    json={"url": media_url},
                )
            except httpx.HTTPError as e:
                logger.error(f"Deepgram request failed: {e}")
                return None

        if response.status_code != 200:
            logger.error(f"Deepgram error {response.status_code}: {response.text[:200]}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Deepgram returned invalid JSON: {e}")
            return None

        alternative = _first_alternative(data)
        text = alternative.get("transcript") if isinstance(alternative.get("transcript"), str) else ""
        confidence = alternative.get("confidence")
        if not text:
            logger.info(f"Empty transcript ({dig(data, 'metadata', 'duration')}s), likely no speech")

        return Transcript(text, confidence if isinstance(confidence, (int, float)) else 0.0)


class VideoUrlResolver:
    """
    Finds a downloadable file URL for a video.
    """

    def __init__(
        self,
        api_key: Optional[str],
        host: str = DEFAULT_TIKTOK_HOST,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.host = host
        self.timeout = timeout
        self.transport = transport

    async def resolve(self, video: FilteredVideo) -> Optional[str]:
        if video.play_url and validate_url(video.play_url):
            return video.play_url

        if video.platform != Platform.TIKTOK or not self.api_key:
            return None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"https://{self.host}/video/no_watermark",
                    params={"video_url": tiktok_video_url(video.author, video.id)},
                    headers={"x-rapidapi-host": self.host, "x-rapidapi-key": self.api_key},
                )
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"No-watermark lookup failed for {video.id}: {e}")
                return None

        url = first_url(first_truthy(
            dig(data, "no_watermark"),
            dig(data, "video", "play_addr", "url_list"),
            dig(data, "data", "play"),
            dig(data, "nw_url"),
            dig(data, "video_url"),
            dig(data, "downloadAddr"),
            dig(data, "play"),
        ))
        if not validate_url(url):
            logger.info(f"No downloadable URL for {video.id}")
            return None
        return url
