#!/usr/bin/env python3
"""
Command-line entry point for playing Monopoly with LLM and scripted seats.
"""

import argparse
import asyncio
import logging
from typing import Dict, List, Optional

from llm_monopoly.agents.base import DecisionClient
from llm_monopoly.agents.llm import LLMDecisionClient
from llm_monopoly.agents.scripted import ScriptedDecisionClient
from llm_monopoly.game.config import GameConfig
from llm_monopoly.game.game import create_game
from llm_monopoly.game.player import Player
from llm_monopoly.session import GameSession, Standing
from llm_monopoly.settings import get_llm_settings

logger = logging.getLogger(__name__)

PLAYER_NAMES = ["Alice", "Bob", "Charlie", "Diana", "Eve", "Frank", "Grace", "Hank"]


def print_standings(standings: List[Standing], turns: int) -> None:
    """Print final game summary."""
    print("\n" + "=" * 60)
    print("GAME OVER")
    print("=" * 60)
    print("\nFinal Standings:")
    for standing in standings:
        print(
            f"  {standing.name}: ${standing.net_worth} net worth "
            f"(${standing.cash} cash, {standing.properties} properties)"
        )
    print(f"\nTotal Turns: {turns}")


def build_clients(
    num_players: int,
    llm_seats: int,
    seed: Optional[int],
    model: Optional[str],
    base_url: Optional[str],
) -> Dict[int, DecisionClient]:
    """LLM clients take the first `llm_seats` seats; the rest are scripted."""
    clients: Dict[int, DecisionClient] = {}
    for pid in range(num_players):
        if pid < llm_seats:
            clients[pid] = LLMDecisionClient(model_name=model, base_url=base_url)
        else:
            clients[pid] = ScriptedDecisionClient(seed=None if seed is None else seed + pid)
    return clients


async def run_game(
    num_players: int = 4,
    llm_seats: int = 1,
    seed: Optional[int] = None,
    max_turns: Optional[int] = 100,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    check: bool = False,
) -> List[Standing]:
    """
    Play a complete game.

    Args:
        num_players: Number of players (2-8)
        llm_seats: How many seats are driven by the LLM
        seed: Random seed for reproducibility
        max_turns: Maximum number of turns
        model: Override for the LLM model name
        base_url: Override for the LLM endpoint
        check: Verify the LLM endpoint before playing
    """
    players = [Player(i, PLAYER_NAMES[i]) for i in range(num_players)]
    game = create_game(GameConfig(seed=seed, time_limit_turns=max_turns), players)
    clients = build_clients(num_players, llm_seats, seed, model, base_url)

    session = GameSession(game, clients)
    try:
        if check:
            for client in clients.values():
                if isinstance(client, LLMDecisionClient) and not await client.check_connection():
                    raise SystemExit(f"Cannot reach LLM endpoint at {client.base_url}")
        standings = await session.play(max_turns)
    finally:
        await session.aclose()

    print_standings(standings, game.turn_number)
    return standings


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Play Monopoly with LLM-driven players")
    parser.add_argument(
        "--players",
        type=int,
        default=4,
        choices=range(2, 9),
        help="Number of players (2-8)",
    )
    parser.add_argument(
        "--llm-seats",
        type=int,
        default=1,
        help="Number of seats driven by the LLM (the rest use the scripted policy)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--max-turns",
        type=int,
        default=100,
        help="Maximum number of turns",
    )
    parser.add_argument("--model", type=str, default=None, help="LLM model (default: LLM_MODEL)")
    parser.add_argument("--base-url", type=str, default=None, help="LLM base URL (default: LLM_BASE_URL)")
    parser.add_argument("--check", action="store_true", help="Test the LLM connection before playing")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not 0 <= args.llm_seats <= args.players:
        parser.error("--llm-seats must be between 0 and --players")

    if args.llm_seats:
        settings = get_llm_settings()
        logger.info("LLM seats use %s at %s", args.model or settings.model, args.base_url or settings.base_url)

    asyncio.run(
        run_game(
            num_players=args.players,
            llm_seats=args.llm_seats,
            seed=args.seed,
            max_turns=args.max_turns,
            model=args.model,
            base_url=args.base_url,
            check=args.check,
        )
    )


if __name__ == "__main__":
    main()
