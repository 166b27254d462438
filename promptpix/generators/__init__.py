"""
Image generators for PromptPix.
"""

from abc import ABC, abstractmethod

from promptpix.models import GenerationResult


class ImageGenerator(ABC):
    """Abstract base class for image generators."""

    @abstractmethod
    async def generate(self, prompt: str) -> GenerationResult:
        """Generate an image from a prompt.

        Args:
            prompt: The prompt text exactly as the user typed it

        Returns:
            GenerationResult with the image URL on success
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the generator."""


# Lazy import to keep httpx out of the import path until needed
def get_http_generator():
    from .http import HttpImageGenerator
    return HttpImageGenerator
