"""
CLI module for text cleaning.

Provides command-line tools for cleaning files and opening share links.
"""

from textify.cli.clean import main as clean_main

__all__ = ["clean_main"]
