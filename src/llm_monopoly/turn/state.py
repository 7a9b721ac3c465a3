"""
Immutable view of engine state.

`EngineState` is the only input to the legal-action resolver. It is
captured fresh from the engine before every resolve and dispatch and
is never mutated afterwards.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from llm_monopoly.game.game import GameState
from llm_monopoly.game.spaces import PropertySpace


@dataclass(frozen=True)
class SquareState:
    """One board square as seen by the turn core."""

    index: int
    name: str
    kind: str
    price: int
    group: Optional[str] = None
    owner: Optional[int] = None
    mortgaged: bool = False
    buildings: int = 0
    building_cost: int = 0
    mortgage_value: int = 0
    unmortgage_cost: int = 0
    rent: int = 0

    @property
    def purchasable(self) -> bool:
        return self.price > 0 and self.owner is None


@dataclass(frozen=True)
class ActorState:
    """Per-actor holdings."""

    index: int
    name: str
    cash: int
    position: int
    in_jail: bool = False
    jail_attempts: int = 0
    jail_cards: int = 0
    bankrupt: bool = False


@dataclass(frozen=True)
class AuctionState:
    square_index: int
    current_bid: int
    high_bidder: Optional[int]
    bidders: Tuple[int, ...]


@dataclass(frozen=True)
class TradeState:
    trade_id: int
    proposer: int
    recipient: int
    offered_squares: Tuple[int, ...]
    requested_squares: Tuple[int, ...]
    offered_money: int
    requested_money: int


@dataclass(frozen=True)
class EngineState:
    """
    Snapshot of everything legality depends on.

    Attributes:
        actor: Index of the actor the state was captured for.
        turn_actor: Index of the actor whose turn it is.
        dice_rolled: Whether the turn actor has rolled this turn.
        doubles_count: Consecutive doubles rolled this turn.
        landing_unresolved: The turn actor stands on an unowned square not yet bought or declined.
    """

    actor: int
    turn_actor: int
    dice_rolled: bool
    doubles_count: int
    last_roll: Optional[Tuple[int, int]]
    landing_unresolved: bool
    jail_fine: int
    max_jail_attempts: int
    squares: Tuple[SquareState, ...]
    actors: Tuple[ActorState, ...]
    auction: Optional[AuctionState] = None
    pending_trade: Optional[TradeState] = None
    game_over: bool = False

    def actor_state(self, index: Optional[int] = None) -> ActorState:
        index = self.actor if index is None else index
        for actor in self.actors:
            if actor.index == index:
                return actor
        raise KeyError(index)

    @property
    def me(self) -> ActorState:
        return self.actor_state(self.actor)

    @property
    def is_my_turn(self) -> bool:
        return self.actor == self.turn_actor

    @property
    def in_jail(self) -> bool:
        return self.me.in_jail

    @property
    def current_square(self) -> SquareState:
        return self.squares[self.me.position]

    def owned_by(self, index: int) -> Tuple[SquareState, ...]:
        return tuple(square for square in self.squares if square.owner == index)


def capture_engine_state(game: GameState, actor_id: int) -> EngineState:
    """Read the engine into an immutable `EngineState` for one actor."""
    current = game.get_current_player()
    me = game.players[actor_id]

    squares = []
    for space in game.board.spaces:
        ownership = game.property_ownership.get(space.position)
        if ownership is None:
            squares.append(
                SquareState(space.position, space.name, space.space_type.value, space.price)
            )
            continue
        squares.append(
            SquareState(
                index=space.position,
                name=space.name,
                kind=space.space_type.value,
                price=space.price,
                group=space.group,
                owner=ownership.owner_id,
                mortgaged=ownership.is_mortgaged,
                buildings=ownership.houses,
                building_cost=space.house_cost if isinstance(space, PropertySpace) else 0,
                mortgage_value=space.mortgage_value,
                unmortgage_cost=game.unmortgage_cost(space.position),
                rent=game.calculate_rent(space.position),
            )
        )

    actors = tuple(
        ActorState(
            index=p.player_id,
            name=p.name,
            cash=p.cash,
            position=p.position,
            in_jail=p.in_jail,
            jail_attempts=p.jail_turns,
            jail_cards=p.get_out_of_jail_cards,
            bankrupt=p.is_bankrupt,
        )
        for p in sorted(game.players.values(), key=lambda p: p.player_id)
    )

    auction = None
    if game.active_auction is not None and not game.active_auction.is_complete:
        a = game.active_auction
        auction = AuctionState(
            square_index=a.property_position,
            current_bid=a.current_bid,
            high_bidder=a.high_bidder,
            bidders=tuple(sorted(a.active_bidders)),
        )

    pending_trade = None
    trade = game.trade_manager.pending_for(actor_id)
    if trade is not None:
        pending_trade = TradeState(
            trade_id=trade.trade_id,
            proposer=trade.proposer_id,
            recipient=trade.recipient_id,
            offered_squares=tuple(sorted(trade.proposer_offer.properties)),
            requested_squares=tuple(sorted(trade.recipient_offer.properties)),
            offered_money=trade.proposer_offer.cash,
            requested_money=trade.recipient_offer.cash,
        )

    return EngineState(
        actor=actor_id,
        turn_actor=current.player_id,
        dice_rolled=game.dice_rolled,
        doubles_count=current.consecutive_doubles,
        last_roll=game.last_dice_roll,
        landing_unresolved=game.purchase_pending and me.player_id == current.player_id,
        jail_fine=game.config.jail_fine,
        max_jail_attempts=game.config.max_jail_turns,
        squares=tuple(squares),
        actors=actors,
        auction=auction,
        pending_trade=pending_trade,
        game_over=game.game_over,
    )
