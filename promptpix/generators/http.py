"""
HTTP image generator for PromptPix.

Posts the prompt to an image-generation endpoint and reads back a JSON body
of the form ``{"success": bool, "imageUrl": str, "error": str}``.
"""

import logging
from typing import Optional

import httpx

from . import ImageGenerator
from ..models import GenerationResult

logger = logging.getLogger(__name__)

ERROR_BODY_LIMIT = 200


class GenerationError(Exception):
    """The generation endpoint could not be reached or answered badly."""
    pass


class HttpImageGenerator(ImageGenerator):
    """
    Image generator backed by a single HTTP endpoint.

    Exactly one request is made per call. There is no retry and, unless a
    timeout is configured, no time limit.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the HTTP generator.

        Args:
            endpoint: URL that accepts the generation POST
            api_key: Optional bearer token sent with every request
            timeout: Request timeout in seconds (None waits indefinitely)
            client: Pre-built client, mainly for tests
        """
        if not endpoint:
            raise ValueError(
                "Generation endpoint not provided. Set PROMPTPIX_ENDPOINT "
                "or run 'promptpix setup --endpoint URL'."
            )
        self.endpoint = endpoint
        self.api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def generate(self, prompt: str) -> GenerationResult:
        logger.debug("POST %s (%d chars)", self.endpoint, len(prompt))

        try:
            response = await self._client.post(
                self.endpoint,
                json={"text": prompt},
                headers=self._headers(),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise GenerationError(f"Request failed: {e}") from e

        if not response.is_success:
            raise GenerationError(
                f"Generation endpoint error {response.status_code}: {response.text[:ERROR_BODY_LIMIT]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError("Generation endpoint returned invalid JSON") from e

        if not isinstance(data, dict):
            raise GenerationError("Generation endpoint returned an unexpected payload")

        return GenerationResult.from_dict(data)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
