"""Thumbnail downloader producing base64 data URIs for vision prompts."""

import base64
import logging
from typing import Optional

import httpx

from ..utils.validation import validate_url


logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024


class MediaDownloader:
    """
    Downloads images and encodes them as `data:` URIs.

    A single GET per URL, no retry. Failures and bodies larger than
    `max_bytes` return None so callers can skip the item.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        )

    async def download(self, url: str) -> Optional[str]:
        """
        Fetch an image and return it as a data URI.

        Args:
            url: Image URL (http or https)

        Returns:
            "data:<type>;base64,<payload>" or None on any failure
        """
        if not validate_url(url):
            logger.warning(f"Skipping invalid media URL: {url!r}")
            return None

        async with self._client() as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                logger.warning(f"Media download failed for {url}: {e}")
                return None

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning(f"Media download returned {response.status_code} for {url}")
            return None

        if len(response.content) > self.max_bytes:
            logger.warning(f"Media at {url} is {len(response.content)} bytes, over the {self.max_bytes} byte cap")
            return None

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type:
            content_type = DEFAULT_CONTENT_TYPE

        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"
