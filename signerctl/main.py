#!/usr/bin/env python3
"""
Main entry point for the Typer-based signerctl CLI.

This delegates to the UI layer in signerctl.ui.cli to keep the
console script mapping stable.
"""

from signerctl.ui.cli import run as signerctl


if __name__ == "__main__":
    signerctl()
