"""Command-line interface module for XML Round-trip Validator.

This module provides the CLI tool that validates a document from disk and
reports round-trip findings as text or JSON.
"""

from .main import main

__all__ = ["main"]
