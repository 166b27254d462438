"""
PromptPix - a terminal form that turns a text prompt into a generated image.

Type a prompt, submit it to an image-generation endpoint, and the image is
shown once it has finished loading.
"""

from pathlib import Path

# Read version from VERSION file (single source of truth)
_version_file = Path(__file__).parent.parent / "VERSION"
if _version_file.exists():
    __version__ = _version_file.read_text().strip()
else:
    __version__ = "0.1.0"  # Fallback for development

from promptpix.models import GenerationResult, Idle, Loading, Error, Ready, FormState
from promptpix.controller import GenerationController
from promptpix.config import Config

__all__ = [
    "__version__",
    "GenerationResult",
    "Idle",
    "Loading",
    "Error",
    "Ready",
    "FormState",
    "GenerationController",
    "Config",
]
