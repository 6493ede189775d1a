#!/usr/bin/env python3
"""
CLI entry point for radiocore.cli module.

This allows running: python -m radiocore.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()
