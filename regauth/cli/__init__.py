"""
CLI package for regauth.
"""

from regauth.cli.commands import cli, main

__all__ = ["cli", "main"]
