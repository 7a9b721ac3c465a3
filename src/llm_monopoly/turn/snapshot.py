"""
Serializable game-state snapshots handed to decision clients.

A snapshot is a frozen projection of `EngineState` plus derived views:
holdings grouped by colour group, monopolies, total asset value, and the
most recent turn history. It is built fresh for every decision.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from llm_monopoly.game.board import GROUP_ORDER
from llm_monopoly.game.spaces import RAILROAD_GROUP, UTILITY_GROUP
from llm_monopoly.turn.history import DEFAULT_EXPOSED, TurnHistoryEntry
from llm_monopoly.turn.state import ActorState, EngineState, SquareState

NON_BUILDABLE_GROUPS = (RAILROAD_GROUP, UTILITY_GROUP)


class SnapshotModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class SquareView(SnapshotModel):
    index: int
    name: str
    kind: str
    price: int
    group: Optional[str] = None
    owner: Optional[int] = None
    owner_name: Optional[str] = None
    mortgaged: bool = False
    buildings: int = 0
    building_cost: int = 0
    mortgage_value: int = 0
    unmortgage_cost: int = 0
    rent: int = 0

    @property
    def has_hotel(self) -> bool:
        return self.buildings == 5


class ActorView(SnapshotModel):
    index: int
    name: str
    cash: int
    position: int
    position_name: str
    in_jail: bool
    jail_attempts: int
    jail_cards: int
    bankrupt: bool = False
    properties_by_group: Dict[str, Tuple[SquareView, ...]] = Field(default_factory=dict)
    mortgaged: Tuple[SquareView, ...] = ()
    buildable_groups: Tuple[str, ...] = ()
    total_asset_value: int = 0


class MonopolyView(SnapshotModel):
    group: str
    squares: Tuple[int, ...]
    owner: int
    owner_name: str


class HistoryView(SnapshotModel):
    actor_index: int
    actor_name: str
    actions: Tuple[str, ...]
    timestamp: datetime


class AuctionView(SnapshotModel):
    square: SquareView
    current_bid: int
    high_bidder: Optional[int]
    bidders: Tuple[int, ...]


class TradeView(SnapshotModel):
    trade_id: int
    proposer: int
    proposer_name: str
    offered_squares: Tuple[SquareView, ...]
    requested_squares: Tuple[SquareView, ...]
    offered_money: int
    requested_money: int


class GameStateSnapshot(SnapshotModel):
    """Everything a decision client needs to choose an action."""

    me: ActorView
    others: Tuple[ActorView, ...]
    turn_actor: int
    is_my_turn: bool
    current_square: SquareView
    dice_rolled: bool
    last_roll: Optional[Tuple[int, int]] = None
    doubles_count: int = 0
    jail_fine: int
    max_jail_attempts: int
    monopolies: Tuple[MonopolyView, ...] = ()
    history: Tuple[HistoryView, ...] = ()
    auction: Optional[AuctionView] = None
    pending_trade: Optional[TradeView] = None


def find_monopolies(state: EngineState) -> List[MonopolyView]:
    """Groups whose every square is held by one actor."""
    names = {actor.index: actor.name for actor in state.actors}
    squares_by_group: Dict[str, List[SquareState]] = {}
    for square in state.squares:
        if square.group is not None:
            squares_by_group.setdefault(square.group, []).append(square)

    monopolies = []
    for group in GROUP_ORDER:
        squares = squares_by_group.get(group, [])
        owners = {square.owner for square in squares}
        if len(owners) != 1 or None in owners:
            continue
        owner = owners.pop()
        monopolies.append(
            MonopolyView(
                group=group,
                squares=tuple(square.index for square in squares),
                owner=owner,
                owner_name=names.get(owner, str(owner)),
            )
        )
    return monopolies


def total_asset_value(actor: ActorState, squares: Sequence[SquareState]) -> int:
    """Cash plus unmortgaged prices, mortgage values, and building value."""
    total = actor.cash
    for square in squares:
        if square.owner != actor.index:
            continue
        if square.mortgaged:
            total += square.mortgage_value
        else:
            total += square.price + square.buildings * square.building_cost
    return total


def _square_view(square: SquareState, names: Dict[int, str]) -> SquareView:
    return SquareView(
        index=square.index,
        name=square.name,
        kind=square.kind,
        price=square.price,
        group=square.group,
        owner=square.owner,
        owner_name=names.get(square.owner) if square.owner is not None else None,
        mortgaged=square.mortgaged,
        buildings=square.buildings,
        building_cost=square.building_cost,
        mortgage_value=square.mortgage_value,
        unmortgage_cost=square.unmortgage_cost,
        rent=square.rent,
    )


def _actor_view(
    actor: ActorState,
    state: EngineState,
    names: Dict[int, str],
    monopolies: Sequence[MonopolyView],
) -> ActorView:
    owned = state.owned_by(actor.index)
    grouped: Dict[str, List[SquareView]] = {}
    mortgaged = []
    for square in owned:
        view = _square_view(square, names)
        if square.mortgaged:
            mortgaged.append(view)
        elif square.group is not None:
            grouped.setdefault(square.group, []).append(view)

    buildable = tuple(
        m.group
        for m in monopolies
        if m.owner == actor.index
        and m.group not in NON_BUILDABLE_GROUPS
        and not any(state.squares[i].mortgaged for i in m.squares)
    )

    return ActorView(
        index=actor.index,
        name=actor.name,
        cash=actor.cash,
        position=actor.position,
        position_name=state.squares[actor.position].name,
        in_jail=actor.in_jail,
        jail_attempts=actor.jail_attempts,
        jail_cards=actor.jail_cards,
        bankrupt=actor.bankrupt,
        properties_by_group={g: tuple(grouped[g]) for g in GROUP_ORDER if g in grouped},
        mortgaged=tuple(mortgaged),
        buildable_groups=buildable,
        total_asset_value=total_asset_value(actor, owned),
    )


def build_snapshot(
    state: EngineState,
    history: Sequence[TurnHistoryEntry] = (),
    history_limit: int = DEFAULT_EXPOSED,
) -> GameStateSnapshot:
    """
    Project an engine state into a snapshot.

    Args:
        state: Engine state captured for the deciding actor
        history: Turn history, most recent first
        history_limit: Maximum number of history entries to expose

    Returns:
        Frozen, JSON-serializable snapshot
    """
    names = {actor.index: actor.name for actor in state.actors}
    monopolies = find_monopolies(state)

    me = _actor_view(state.me, state, names, monopolies)
    others = tuple(
        _actor_view(actor, state, names, monopolies)
        for actor in state.actors
        if actor.index != state.actor
    )

    auction = None
    if state.auction is not None:
        auction = AuctionView(
            square=_square_view(state.squares[state.auction.square_index], names),
            current_bid=state.auction.current_bid,
            high_bidder=state.auction.high_bidder,
            bidders=state.auction.bidders,
        )

    pending_trade = None
    if state.pending_trade is not None:
        trade = state.pending_trade
        pending_trade = TradeView(
            trade_id=trade.trade_id,
            proposer=trade.proposer,
            proposer_name=names.get(trade.proposer, str(trade.proposer)),
            offered_squares=tuple(_square_view(state.squares[i], names) for i in trade.offered_squares),
            requested_squares=tuple(_square_view(state.squares[i], names) for i in trade.requested_squares),
            offered_money=trade.offered_money,
            requested_money=trade.requested_money,
        )

    return GameStateSnapshot(
        me=me,
        others=others,
        turn_actor=state.turn_actor,
        is_my_turn=state.is_my_turn,
        current_square=_square_view(state.current_square, names),
        dice_rolled=state.dice_rolled,
        last_roll=state.last_roll,
        doubles_count=state.doubles_count,
        jail_fine=state.jail_fine,
        max_jail_attempts=state.max_jail_attempts,
        monopolies=tuple(monopolies),
        history=tuple(
            HistoryView(
                actor_index=entry.actor_index,
                actor_name=entry.actor_name,
                actions=entry.actions,
                timestamp=entry.timestamp,
            )
            for entry in list(history)[: max(history_limit, 0)]
        ),
        auction=auction,
        pending_trade=pending_trade,
    )
