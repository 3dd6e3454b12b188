"""review-orchestra: installer and helpers for a conversational PR review agent."""

from review_orchestra.config import __version__
from review_orchestra.main import cli_main

__all__ = ["__version__", "cli_main"]
