"""
Prompt rendering for LLM decision clients.

Turns a `GameStateSnapshot` into the natural-language state description
sent as the user message, and loads the system prompt and rules text
from the package templates.
"""

import logging
from pathlib import Path
from typing import AbstractSet, List

from llm_monopoly.game.board import group_display_name
from llm_monopoly.turn.actions import ActionName
from llm_monopoly.turn.snapshot import ActorView, GameStateSnapshot, SquareView

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

JAIL_ACTIONS = (ActionName.ROLL, ActionName.PAY_FINE, ActionName.JAIL_CARD)


def load_template(filename: str) -> str:
    """Load a template file."""
    path = TEMPLATES_DIR / filename
    if path.exists():
        return path.read_text(encoding="utf-8")
    logger.warning(f"Template not found: {path}")
    return ""


def system_prompt() -> str:
    return load_template("system_prompt.txt").replace("{rules}", load_template("rules.txt").strip())


def _building_text(square: SquareView) -> str:
    if square.has_hotel:
        return " (HOTEL)"
    if square.buildings > 0:
        plural = "s" if square.buildings != 1 else ""
        return f" ({square.buildings} house{plural})"
    return ""


def _properties_section(me: ActorView) -> List[str]:
    lines = ["# Your Properties:"]
    for group, squares in me.properties_by_group.items():
        status = "BUILDABLE MONOPOLY" if group in me.buildable_groups else f"{len(squares)} owned"
        lines.append(f"## {group_display_name(group)} Group ({status}):")
        for square in squares:
            lines.append(f"- [{square.index}] {square.name}{_building_text(square)}")

    if not me.properties_by_group and not me.mortgaged:
        lines.append("You don't own any properties yet.")
    lines.append("")

    if me.mortgaged:
        lines.append("# Your Mortgaged Properties:")
        for square in me.mortgaged:
            lines.append(
                f"- [{square.index}] {square.name} ({group_display_name(square.group)}) "
                f"- Unmortgage cost: ${square.unmortgage_cost}"
            )
        lines.append("")
    return lines


def _others_section(snapshot: GameStateSnapshot) -> List[str]:
    lines = ["# Other Players:"]
    for other in snapshot.others:
        status = " (BANKRUPT)" if other.bankrupt else ""
        lines.append(f"## [{other.index}] {other.name} (${other.cash}){status}:")
        lines.append(f"- Position: {other.position_name}")
        summary = [
            f"{len(squares)} {group_display_name(group)}"
            for group, squares in other.properties_by_group.items()
        ]
        if other.mortgaged:
            summary.append(f"{len(other.mortgaged)} Mortgaged")
        lines.append(f"- Properties: {', '.join(summary) if summary else 'None'}")
        lines.append(f"- Total asset value: ~${other.total_asset_value}")
    lines.append("")
    return lines


def _monopolies_section(snapshot: GameStateSnapshot) -> List[str]:
    lines = ["# Monopolies on the Board:"]
    if not snapshot.monopolies:
        lines.append("No player has a monopoly yet.")
    for monopoly in snapshot.monopolies:
        owner = "(Owned by You)" if monopoly.owner == snapshot.me.index else f"(Owned by {monopoly.owner_name})"
        lines.append(f"- {group_display_name(monopoly.group)} monopoly {owner}")
    lines.append("")
    return lines


def _position_section(snapshot: GameStateSnapshot) -> List[str]:
    square = snapshot.current_square
    me = snapshot.me
    lines = ["# Current Position:", f"You are on {square.name}."]
    if square.price > 0:
        if square.owner is None:
            lines.append(f"This property is UNOWNED and costs ${square.price}.")
            if me.cash >= square.price:
                lines.append("You have enough money to buy it.")
            else:
                lines.append(f"You need ${square.price - me.cash} more to buy it.")
        elif square.owner == me.index:
            lines.append("You OWN this property.")
        else:
            lines.append(f"This property is owned by {square.owner_name}.")
            if square.mortgaged:
                lines.append("The property is mortgaged, so no rent is due.")
            else:
                lines.append(f"Rent due: ${square.rent}.")
    lines.append("")
    return lines


def _dice_section(snapshot: GameStateSnapshot) -> List[str]:
    if not snapshot.dice_rolled or snapshot.last_roll is None:
        return []
    die1, die2 = snapshot.last_roll
    lines = ["# Last Dice Roll:", f"You rolled: {die1} + {die2} = {die1 + die2}"]
    if die1 == die2 and not snapshot.me.in_jail and snapshot.doubles_count > 0:
        lines.append(f"DOUBLES! (This was double roll #{snapshot.doubles_count} in a row).")
        lines.append("You MUST roll again.")
    lines.append("")
    return lines


def _jail_section(snapshot: GameStateSnapshot, legal: AbstractSet[ActionName]) -> List[str]:
    me = snapshot.me
    if not me.in_jail:
        return []
    attempt = min(me.jail_attempts + 1, snapshot.max_jail_attempts)
    lines = [
        "# Jail Status:",
        f"You are in jail. This is turn {attempt} of {snapshot.max_jail_attempts} max.",
    ]
    if me.jail_cards:
        lines.append("You have a 'Get Out of Jail Free' card.")
    if snapshot.dice_rolled and me.jail_attempts >= snapshot.max_jail_attempts:
        lines.append(f"Your last attempt failed: you must pay ${snapshot.jail_fine} or use a card now.")
    available = [a.value for a in JAIL_ACTIONS if a in legal]
    lines.append(f"Available jail actions: {', '.join(available) if available else 'none'}.")
    lines.append("")
    return lines


def _auction_section(snapshot: GameStateSnapshot) -> List[str]:
    auction = snapshot.auction
    if auction is None:
        return []
    leader = "nobody" if auction.high_bidder is None else f"player {auction.high_bidder}"
    return [
        "# Auction In Progress:",
        f"{auction.square.name} (list price ${auction.square.price}) is being auctioned.",
        f"Current bid: ${auction.current_bid} by {leader}.",
        "",
    ]


def _trade_section(snapshot: GameStateSnapshot) -> List[str]:
    trade = snapshot.pending_trade
    if trade is None:
        return []
    offered = [s.name for s in trade.offered_squares]
    requested = [s.name for s in trade.requested_squares]
    if trade.offered_money:
        offered.append(f"${trade.offered_money}")
    if trade.requested_money:
        requested.append(f"${trade.requested_money}")
    return [
        "# Trade Offer:",
        f"{trade.proposer_name} offers: {', '.join(offered) or 'nothing'}",
        f"In exchange for: {', '.join(requested) or 'nothing'}",
        "",
    ]


def _history_section(snapshot: GameStateSnapshot) -> List[str]:
    if not snapshot.history:
        return []
    lines = ["# Recent Game History (Last ~5 Turns):"]
    for index, entry in enumerate(snapshot.history):
        lines.append(f"T-{index}: {entry.actor_name} - {', '.join(entry.actions)}")
    lines.append("")
    return lines


def describe(snapshot: GameStateSnapshot, legal: AbstractSet[ActionName]) -> str:
    """Render the user message for one decision."""
    me = snapshot.me
    header = [
        f"# Your Turn: {me.name} (${me.cash})" if snapshot.is_my_turn else f"# Your Decision: {me.name} (${me.cash})",
        f"Asset Value: ~${me.total_asset_value}",
    ]
    if me.jail_cards:
        header.append("Has Get Out of Jail Card")
    header.append("")

    actions = ["# Available Actions:"]
    actions.extend(f"- {name.value}" for name in sorted(legal, key=lambda n: n.value))

    sections = (
        header
        + _position_section(snapshot)
        + _dice_section(snapshot)
        + _jail_section(snapshot, legal)
        + _auction_section(snapshot)
        + _trade_section(snapshot)
        + _properties_section(me)
        + _monopolies_section(snapshot)
        + _others_section(snapshot)
        + _history_section(snapshot)
        + actions
    )
    return "\n".join(sections) + "\n"
