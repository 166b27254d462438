"""TUI application for the image generator form.

The app is a thin shell around GenerationController: every state change is
passed through presentation.render() and the resulting FormView is applied
to the widgets. Nothing about loading, errors or disabled controls is
tracked here.

CRITICAL: Do NOT import Rich console or use console.print() in TUI code.
Rich and Textual cannot mix - terminal state will be corrupted.
"""
from typing import Optional

from textual import work
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, LoadingIndicator, Static

from ..controller import GenerationController, GenerateFn, PreloadFn
from ..models import FormState
from ..presentation import BUTTON_LABEL, PLACEHOLDER, TITLE, FormView, render
from .widgets import ErrorBanner, ImagePanel


class ImageGeneratorTUI(App[Optional[str]]):
    """Prompt form that generates an image and shows it once loaded.

    Returns the URL of the last image displayed (or None) when it exits.
    """

    CSS = """
    Screen {
        layout: vertical;
    }

    #main {
        height: 1fr;
        align-horizontal: center;
    }

    #title {
        width: 100%;
        text-align: center;
        text-style: bold;
        padding: 1 0;
    }

    #spinner {
        height: 3;
    }

    #error {
        width: 100%;
        padding: 0 2;
    }

    #image {
        width: 100%;
        padding: 1 2;
        border: round $primary;
    }

    #form {
        height: auto;
        dock: bottom;
        padding: 0 1;
    }

    #prompt {
        width: 1fr;
    }
    """

    BINDINGS = [("escape", "quit", "Quit")]

    def __init__(
        self,
        generate: GenerateFn,
        preload: PreloadFn,
        await_preload: bool = False,
    ):
        """Initialize ImageGeneratorTUI.

        Args:
            generate: Async callable that turns a prompt into a GenerationResult
            preload: Async callable that completes once an image URL is loaded
            await_preload: Keep the spinner up until the image has loaded
        """
        super().__init__()
        self.controller = GenerationController(
            generate,
            preload,
            on_change=self._on_state_change,
            await_preload=await_preload,
        )
        self.last_image_url: Optional[str] = None
        self._form_ready = False

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        with Vertical(id="main"):
            yield Static(TITLE, id="title")
            yield LoadingIndicator(id="spinner")
            yield ErrorBanner(id="error")
            yield ImagePanel(id="image")
        with Horizontal(id="form"):
            yield Input(placeholder=PLACEHOLDER, id="prompt")
            yield Button(BUTTON_LABEL, id="generate", variant="success")

    def on_mount(self) -> None:
        self._form_ready = True
        self._apply_view(render(self.controller.state))
        self.query_one("#prompt", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "prompt":
            self.controller.set_prompt(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.action_submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "generate":
            self.action_submit()

    def action_submit(self) -> None:
        """Start a submission unless the form is disabled."""
        if self.controller.can_submit:
            self.run_submission()

    @work(exclusive=True, group="submit")
    async def run_submission(self) -> None:
        """Run one submission on the app's event loop."""
        await self.controller.submit()
        if not self.controller.closed:
            self.query_one("#prompt", Input).focus()

    async def action_quit(self) -> None:
        self.controller.close()
        self.exit(self.last_image_url)

    def on_unmount(self) -> None:
        self.controller.close()

    def _on_state_change(self, state: FormState) -> None:
        if state.image_url is not None:
            self.last_image_url = state.image_url
        if self._form_ready:
            self._apply_view(render(state))

    def _apply_view(self, view: FormView) -> None:
        self.query_one("#spinner", LoadingIndicator).display = view.show_spinner
        error = self.query_one("#error", ErrorBanner)
        error.message = view.error_message
        error.display = view.show_error

        image = self.query_one("#image", ImagePanel)
        image.image_url = view.image_url
        image.display = view.show_image

        # The controller only ever changes the prompt by clearing it
        prompt_input = self.query_one("#prompt", Input)
        if not view.prompt and prompt_input.value:
            prompt_input.value = ""
        prompt_input.disabled = view.input_disabled

        button = self.query_one("#generate", Button)
        button.label = view.button_label
        button.disabled = view.submit_disabled
