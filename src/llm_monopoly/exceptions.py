"""
Custom exception hierarchy for the Monopoly turn core.

Provides typed errors that can be handled consistently across
the engine adapter, the dispatcher, and the decision clients.
"""


class MonopolyError(Exception):
    """Base exception for all game-related errors."""


class ValidationError(MonopolyError):
    """Input validation failed."""


class LLMError(MonopolyError):
    """LLM agent communication failed."""


class DecisionError(LLMError):
    """A decision request did not produce a usable action."""


class OracleTransportError(DecisionError):
    """Network or upstream failure while waiting for a decision."""


class MalformedResponseError(DecisionError):
    """The decision response was missing or could not be parsed."""


class UnknownActionError(DecisionError):
    """The decision named an action outside the catalogue."""

    def __init__(self, name: str):
        super().__init__(f"Unknown action: {name!r}")
        self.name = name


class DecisionInFlightError(DecisionError):
    """A second decision was requested while one is still outstanding."""
