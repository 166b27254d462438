"""
Image preloading for PromptPix.

An image URL is only handed to the display once the resource behind it has
been fetched in full, so the UI never shows a broken or half-loaded image.
"""

import base64
import binascii
import logging
from typing import Optional
from urllib.parse import unquote_to_bytes

import httpx

logger = logging.getLogger(__name__)


class PreloadError(Exception):
    """The image resource could not be loaded."""
    pass


def decode_data_url(url: str) -> tuple[str, bytes]:
    """Decode a ``data:`` URL into (mime_type, payload)."""
    header, sep, payload = url.partition(",")
    if not sep:
        raise PreloadError("Malformed data URL")

    meta = header[len("data:"):].split(";")
    mime_type = meta[0] or "text/plain"

    if "base64" in meta[1:]:
        try:
            return mime_type, base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise PreloadError(f"Invalid base64 image data: {e}") from e
    return mime_type, unquote_to_bytes(payload)


class ImagePreloader:
    """Fetches image resources ahead of display."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the preloader.

        Args:
            timeout: Fetch timeout in seconds (None waits indefinitely)
            client: Pre-built client, mainly for tests
        """
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def load(self, url: str) -> bytes:
        """
        Load an image resource completely.

        Args:
            url: http(s) or data: URL of the image

        Returns:
            The image bytes

        Raises:
            PreloadError: If the resource is missing, not an image, or empty
        """
        if url.startswith("data:"):
            mime_type, data = decode_data_url(url)
        else:
            try:
                response = await self._client.get(url)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise PreloadError(f"Request failed: {e}") from e

            if not response.is_success:
                raise PreloadError(f"Image fetch error {response.status_code}")

            mime_type = response.headers.get("content-type", "").split(";")[0].strip()
            data = response.content

        if not mime_type.startswith("image/"):
            raise PreloadError(f"Not an image: {mime_type or 'unknown content type'}")
        if not data:
            raise PreloadError("Image is empty")

        logger.debug("Preloaded %s (%d bytes)", url[:80], len(data))
        return data

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
