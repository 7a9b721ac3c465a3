"""
LLM-driven Monopoly player.

Turn orchestration between a Monopoly engine and a remote decision oracle.
"""

__version__ = "0.1.0"
