"""Command-line interface module for MJML import.

This module provides the ``mjml-import`` tool for converting MJML files to
Block JSON, inspecting repairs, and validating files.
"""

from .main import main

__all__ = ["main"]
