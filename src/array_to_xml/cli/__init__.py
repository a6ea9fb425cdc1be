"""Command-line interface module for array-to-xml.

This module provides CLI tools for converting JSON documents to XML and for
checking that they convert cleanly.
"""

from .main import main

__all__ = ["main"]
