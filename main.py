#!/usr/bin/env python3
"""
pacebench - CLI Entry Point

Usage:
    python main.py run benchmarks.py
    python main.py list benchmarks.py
    python main.py list-reporters
"""

from pacebench.cli import cli


if __name__ == "__main__":
    cli()
