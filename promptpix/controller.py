"""
Request lifecycle controller for the image generator form.

Owns the prompt text and the form status, calls the generator once per
submission, and publishes the image only after it has been preloaded.

Everything runs on a single asyncio event loop. The preload is scheduled as
a fire-and-forget task; its completion is applied only while the controller
is still alive and no newer submission has started.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from .models import (
    DEFAULT_ERROR_MESSAGE,
    MISSING_IMAGE_MESSAGE,
    Error,
    FormState,
    GenerationResult,
    Idle,
    Loading,
    Ready,
    UIState,
)

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str], Awaitable[GenerationResult]]
PreloadFn = Callable[[str], Awaitable[Any]]
ChangeListener = Callable[[FormState], None]


class GenerationController:
    """State machine behind the prompt form.

    States are ``Idle``, ``Loading``, ``Error(message)`` and
    ``Ready(image_url)``. Usage:

        controller = GenerationController(generator.generate, preloader.load)
        controller.set_prompt("a red fox")
        await controller.submit()
        await controller.wait_for_preloads()
        controller.image_url  # "https://..."
    """

    def __init__(
        self,
        generate: GenerateFn,
        preload: PreloadFn,
        on_change: Optional[ChangeListener] = None,
        await_preload: bool = False,
    ):
        """
        Initialize the controller.

        Args:
            generate: Async callable turning a prompt into a GenerationResult
            preload: Async callable that completes once the image is loaded
            on_change: Called with a FormState after every change
            await_preload: Keep Loading until the preload finishes instead of
                publishing the image in the background
        """
        self._generate = generate
        self._preload = preload
        self._on_change = on_change
        self.await_preload = await_preload

        self._prompt = ""
        self._status: UIState = Idle()
        self._submission = 0
        self._closed = False
        self._preloads: set[asyncio.Task] = set()

    # -- state ------------------------------------------------------------

    @property
    def state(self) -> FormState:
        return FormState(prompt=self._prompt, status=self._status)

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def status(self) -> UIState:
        return self._status

    @property
    def is_loading(self) -> bool:
        return isinstance(self._status, Loading)

    @property
    def can_submit(self) -> bool:
        return self.state.can_submit

    @property
    def error_message(self) -> Optional[str]:
        return self.state.error_message

    @property
    def image_url(self) -> Optional[str]:
        return self.state.image_url

    @property
    def closed(self) -> bool:
        return self._closed

    def set_prompt(self, text: str) -> None:
        """Replace the prompt text (called on every keystroke)."""
        if text == self._prompt:
            return
        self._prompt = text
        self._notify()

    def _transition(self, status: UIState) -> None:
        logger.debug("%s -> %s", type(self._status).__name__, type(status).__name__)
        self._status = status
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None and not self._closed:
            self._on_change(self.state)

    # -- submission -------------------------------------------------------

    async def submit(self) -> bool:
        """
        Submit the current prompt.

        Returns:
            True if the generator was called, False if the prompt is blank,
            a request is already in flight, or the controller is closed.
        """
        if self._closed or not self.can_submit:
            return False

        self._submission += 1
        token = self._submission
        prompt = self._prompt

        # Clears any previous error and image
        self._transition(Loading())

        outcome: UIState = Idle()
        try:
            result = await self._generate(prompt)

            if not result.success:
                raise RuntimeError(result.error or DEFAULT_ERROR_MESSAGE)
            if not result.image_url:
                raise RuntimeError(MISSING_IMAGE_MESSAGE)

            if self.await_preload:
                outcome = await self._load_image(result.image_url)
            else:
                self._schedule_preload(result.image_url, token)

            self._prompt = ""
        except Exception as e:
            logger.error("Error: %s", e)
            outcome = Error(str(e) or DEFAULT_ERROR_MESSAGE)
        finally:
            if not self._closed and token == self._submission:
                self._transition(outcome)

        return True

    # -- preload ----------------------------------------------------------

    async def _load_image(self, url: str) -> UIState:
        """Preload inline; a failed load leaves nothing on display."""
        try:
            await self._preload(url)
        except Exception as e:
            logger.warning("Image preload failed for %s: %s", url, e)
            return Idle()
        return Ready(url)

    def _schedule_preload(self, url: str, token: int) -> None:
        task = asyncio.get_running_loop().create_task(self._run_preload(url, token))
        self._preloads.add(task)
        task.add_done_callback(self._preloads.discard)

    async def _run_preload(self, url: str, token: int) -> None:
        try:
            await self._preload(url)
        except Exception as e:
            logger.warning("Image preload failed for %s: %s", url, e)
            return
        self._on_image_loaded(url, token)

    def _on_image_loaded(self, url: str, token: int) -> None:
        if self._closed:
            logger.debug("Ignoring preload of %s: controller closed", url)
            return
        if token != self._submission:
            logger.debug("Ignoring stale preload of %s", url)
            return
        self._transition(Ready(url))

    async def wait_for_preloads(self) -> None:
        """Wait until every scheduled preload has finished."""
        pending = [task for task in self._preloads if not task.done()]
        while pending:
            await asyncio.gather(*pending, return_exceptions=True)
            pending = [task for task in self._preloads if not task.done()]

    def close(self) -> None:
        """Detach the controller; pending preloads are cancelled and ignored."""
        self._closed = True
        for task in list(self._preloads):
            task.cancel()
