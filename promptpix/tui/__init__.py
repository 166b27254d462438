"""Textual TUI for the image generator form.

CRITICAL: Rich and Textual cannot mix in the same command execution.
Use Rich console.print() ONLY before or after TUI execution, never during.
"""
from .apps import ImageGeneratorTUI

__all__ = ["ImageGeneratorTUI"]
