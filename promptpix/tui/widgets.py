"""Custom TUI widgets for the image generator form."""
from typing import Optional

from rich.markup import escape
from textual.reactive import reactive
from textual.widgets import Static

from ..presentation import IMAGE_ALT


def describe_url(url: str, max_length: int = 120) -> str:
    """Shorten an image URL for display; data URLs are summarised."""
    if url.startswith("data:"):
        header = url.split(",", 1)[0]
        return f"{header},... ({len(url)} chars)"
    if len(url) > max_length:
        return url[: max_length - 3] + "..."
    return url


class ErrorBanner(Static):
    """Error message shown in place of the image."""

    message: reactive[Optional[str]] = reactive(None)

    def render(self) -> str:
        if self.message is None:
            return ""
        return f"[red]✗[/red] {escape(self.message)}"


class ImagePanel(Static):
    """Displays the generated image reference once it has been preloaded."""

    image_url: reactive[Optional[str]] = reactive(None)

    def render(self) -> str:
        if self.image_url is None:
            return ""
        return f"[b]{IMAGE_ALT}[/b]\n[cyan]{escape(describe_url(self.image_url))}[/cyan]"
