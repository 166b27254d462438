"""Presentation rules for the image generator form."""

from dataclasses import dataclass
from typing import Optional

from .models import FormState

TITLE = "Image Generator"
PLACEHOLDER = "Describe the image you want to generate..."
IMAGE_ALT = "Generated artwork"
BUTTON_LABEL = "Generate"
BUTTON_LABEL_BUSY = "Generating..."


@dataclass(frozen=True)
class FormView:
    """What the form should look like for a given FormState."""

    prompt: str
    show_spinner: bool
    error_message: Optional[str]
    image_url: Optional[str]
    input_disabled: bool
    submit_disabled: bool
    button_label: str

    @property
    def show_error(self) -> bool:
        return self.error_message is not None

    @property
    def show_image(self) -> bool:
        return self.image_url is not None


def render(state: FormState) -> FormView:
    """Derive the view from controller state. Pure; no flags are stored."""
    loading = state.is_loading
    return FormView(
        prompt=state.prompt,
        show_spinner=loading,
        error_message=state.error_message,
        image_url=state.image_url,
        input_disabled=loading,
        submit_disabled=loading or not state.has_prompt,
        button_label=BUTTON_LABEL_BUSY if loading else BUTTON_LABEL,
    )
