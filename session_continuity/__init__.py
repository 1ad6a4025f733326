"""
Session Continuity - SessionStart context for Claude Code.

Finds the latest continuity ledger and handoff in a project and assembles
the context injected when a session starts, resumes, is cleared or compacted.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
