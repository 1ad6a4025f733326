"""
Entry point for running session_continuity as a module.

Allows running as: python -m session_continuity
"""

from session_continuity.cli import cli_main

if __name__ == "__main__":
    cli_main()
