"""
CLI for PromptPix.

`promptpix ui` opens the interactive form; `promptpix generate` runs a single
submission headless and prints the outcome.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from promptpix import __version__
from promptpix.config import Config, GLOBAL_CONFIG_FILE
from promptpix.controller import GenerationController
from promptpix.generators import get_http_generator
from promptpix.models import Error, FormState, Ready
from promptpix.preload import ImagePreloader

console = Console()


def load_config(config_path: Optional[str]) -> Config:
    """Load config and refuse to continue if the endpoint is unusable."""
    config = Config.load(Path(config_path) if config_path else None)
    issues = config.validate()
    if issues:
        raise click.ClickException("; ".join(issues))
    return config


def build_clients(config: Config):
    """Create the generator and preloader for a config. Must run inside a loop."""
    HttpImageGenerator = get_http_generator()
    generator = HttpImageGenerator(
        config.endpoint.url,
        api_key=config.endpoint.api_key or None,
        timeout=config.endpoint.timeout,
    )
    preloader = ImagePreloader(timeout=config.endpoint.timeout)
    return generator, preloader


async def generate_once(config: Config, prompt: str, await_preload: bool) -> FormState:
    """Submit one prompt and wait for the image to finish preloading."""
    generator, preloader = build_clients(config)
    async with generator, preloader:
        controller = GenerationController(
            generator.generate,
            preloader.load,
            await_preload=await_preload,
        )
        controller.set_prompt(prompt)
        if not await controller.submit():
            raise click.ClickException("Prompt is empty")
        await controller.wait_for_preloads()
        state = controller.state
        controller.close()
        return state


async def run_ui(config: Config, await_preload: bool) -> Optional[str]:
    """Run the TUI with clients that live exactly as long as the app."""
    from promptpix.tui import ImageGeneratorTUI

    generator, preloader = build_clients(config)
    async with generator, preloader:
        app = ImageGeneratorTUI(generator.generate, preloader.load, await_preload=await_preload)
        try:
            return await app.run_async()
        finally:
            app.controller.close()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """PromptPix - Generate an image from a text prompt."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--config", "config_path", type=click.Path(), help="Config file path")
@click.option("--await-preload/--no-await-preload", default=None,
              help="Keep the spinner up until the image has loaded")
def ui(config_path: Optional[str], await_preload: Optional[bool]):
    """Open the interactive image generator form."""
    config = load_config(config_path)
    if await_preload is None:
        await_preload = config.defaults.await_preload

    # Logging to the terminal would corrupt the Textual display
    logging.getLogger().setLevel(logging.CRITICAL)

    image_url = asyncio.run(run_ui(config, await_preload))

    if image_url:
        console.print(f"[bold cyan]Last image:[/bold cyan] {image_url}")


@main.command()
@click.argument("prompt", nargs=-1, required=True)
@click.option("--config", "config_path", type=click.Path(), help="Config file path")
@click.option("--await-preload/--no-await-preload", default=None,
              help="Treat the preload as part of the request")
def generate(prompt: tuple, config_path: Optional[str], await_preload: Optional[bool]):
    """Generate one image from PROMPT and print its URL."""
    config = load_config(config_path)
    if await_preload is None:
        await_preload = config.defaults.await_preload

    prompt_text = " ".join(prompt)

    with console.status("Generating...", spinner="dots"):
        state = asyncio.run(generate_once(config, prompt_text, await_preload))

    status = state.status
    if isinstance(status, Ready):
        console.print(Panel.fit(
            f"[green]Generated artwork[/green]\n\n{status.image_url}",
            title="Image Generator",
        ))
    elif isinstance(status, Error):
        console.print(f"[red]Error:[/red] {status.message}")
        sys.exit(1)
    else:
        console.print("[yellow]Image was generated but could not be loaded[/yellow]")
        sys.exit(1)


@main.command()
@click.option("--endpoint", "endpoint_url", help="Image generation endpoint URL")
@click.option("--api-key", "api_key", help="Bearer token for the endpoint")
@click.option("--timeout", type=float, help="Request timeout in seconds (default: none)")
@click.option("--await-preload/--no-await-preload", default=None,
              help="Keep the spinner up until the image has loaded")
@click.option("--config", "config_path", type=click.Path(), help="Config file path")
def setup(endpoint_url: Optional[str], api_key: Optional[str], timeout: Optional[float],
          await_preload: Optional[bool], config_path: Optional[str]):
    """Write endpoint settings to the config file."""
    path = Path(config_path) if config_path else GLOBAL_CONFIG_FILE
    config = Config.load(path)

    if endpoint_url:
        config.endpoint.url = endpoint_url
    if api_key:
        config.endpoint.api_key = api_key
    if timeout is not None:
        config.endpoint.timeout = timeout
    if await_preload is not None:
        config.defaults.await_preload = await_preload

    config.save(path)
    console.print(f"[green]Saved configuration to {path}[/green]")

    for issue in config.validate():
        console.print(f"[yellow]Warning:[/yellow] {issue}")


@main.command("check-config")
@click.option("--config", "config_path", type=click.Path(), help="Config file path")
def check_config(config_path: Optional[str]):
    """Check that the generation endpoint is configured."""
    config = Config.load(Path(config_path) if config_path else None)
    issues = config.validate()

    if issues:
        console.print("[yellow]Configuration issues:[/yellow]")
        for issue in issues:
            console.print(f"  [red]✗[/red] {issue}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Endpoint: {config.endpoint.url}")
    console.print(f"[green]✓[/green] API key: {'set' if config.endpoint.api_key else 'not set'}")
    console.print(f"[green]✓[/green] Await preload: {config.defaults.await_preload}")


if __name__ == "__main__":
    main()
