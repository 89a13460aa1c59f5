"""Command-line interface for the storefront."""
from .main import cli, main

__all__ = ["cli", "main"]
