"""
Data models for PromptPix.
"""

from dataclasses import dataclass
from typing import Optional, Union


DEFAULT_ERROR_MESSAGE = "Failed to generate image"
MISSING_IMAGE_MESSAGE = "No image URL received"


@dataclass
class GenerationResult:
    """Outcome reported by an image generator.

    A result only counts as usable when ``success`` is true AND
    ``image_url`` is set; anything else is a failure.
    """

    success: bool
    image_url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "GenerationResult":
        return cls(
            success=data.get("success") is True,
            image_url=data.get("imageUrl") or data.get("image_url"),
            error=data.get("error") or data.get("errorMessage"),
        )

    def to_dict(self) -> dict:
        data = {"success": self.success}
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def ok(cls, image_url: str) -> "GenerationResult":
        return cls(success=True, image_url=image_url)

    @classmethod
    def failed(cls, error: Optional[str] = None) -> "GenerationResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class Idle:
    """Nothing in flight and nothing to show."""


@dataclass(frozen=True)
class Loading:
    """A generator call is outstanding."""


@dataclass(frozen=True)
class Error:
    """The last submission failed."""

    message: str


@dataclass(frozen=True)
class Ready:
    """A preloaded image is on display."""

    image_url: str


UIState = Union[Idle, Loading, Error, Ready]


@dataclass(frozen=True)
class FormState:
    """Snapshot of everything the presentation layer needs."""

    prompt: str = ""
    status: UIState = Idle()

    @property
    def is_loading(self) -> bool:
        return isinstance(self.status, Loading)

    @property
    def has_prompt(self) -> bool:
        return bool(self.prompt.strip())

    @property
    def can_submit(self) -> bool:
        return self.has_prompt and not self.is_loading

    @property
    def error_message(self) -> Optional[str]:
        if isinstance(self.status, Error):
            return self.status.message
        return None

    @property
    def image_url(self) -> Optional[str]:
        if isinstance(self.status, Ready):
            return self.status.image_url
        return None
