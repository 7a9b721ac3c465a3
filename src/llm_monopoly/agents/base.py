"""Base class for all decision clients."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, AbstractSet, Sequence

if TYPE_CHECKING:
    from llm_monopoly.agents.tools import ToolSpec
    from llm_monopoly.turn.actions import Action, ActionName
    from llm_monopoly.turn.snapshot import GameStateSnapshot


class DecisionClient(ABC):
    """
    Abstract base class for decision clients.

    A decision client turns a snapshot and the current legal-action set
    into exactly one proposed action. It never touches the engine.
    """

    @abstractmethod
    async def request_decision(
        self,
        snapshot: "GameStateSnapshot",
        legal_actions: AbstractSet["ActionName"],
        catalogue: Sequence["ToolSpec"],
    ) -> "Action":
        """
        Choose an action.

        Args:
            snapshot: Frozen view of the game for the deciding actor.
            legal_actions: Actions permitted right now.
            catalogue: Tool descriptions, one per action name.

        Returns:
            The proposed action.

        Raises:
            DecisionError: on transport failure, a malformed response, or an
                action name outside the catalogue.
        """

    async def aclose(self) -> None:
        """Release any held resources."""
