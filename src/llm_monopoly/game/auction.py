"""
Auction system for properties.
"""

from typing import List, Optional, Set

from llm_monopoly.game.money import EventLog, EventType


class Auction:
    """
    Manages an auction for a property.

    Bidders either raise, pass for the current round, or exit for good.
    The auction closes once every remaining bidder other than the high
    bidder has passed since the last bid, or when at most one bidder
    is left.
    """

    def __init__(
        self,
        property_position: int,
        property_name: str,
        eligible_player_ids: List[int],
        event_log: EventLog,
    ):
        self.property_position = property_position
        self.property_name = property_name
        self.active_bidders: Set[int] = set(eligible_player_ids)
        self.passed_since_bid: Set[int] = set()
        self.current_bid = 0
        self.high_bidder: Optional[int] = None
        self.event_log = event_log
        self.is_complete = False

        self.event_log.log(
            EventType.AUCTION_START,
            property=property_name,
            position=property_position,
            players=sorted(eligible_player_ids),
        )

    def can_player_bid(self, player_id: int) -> bool:
        return not self.is_complete and player_id in self.active_bidders

    def place_bid(self, player_id: int, amount: int) -> bool:
        """
        Place a bid for a player.
        Returns True if bid is accepted, False if invalid.
        """
        if not self.can_player_bid(player_id):
            return False

        if amount <= self.current_bid:
            return False

        self.current_bid = amount
        self.high_bidder = player_id
        self.passed_since_bid.clear()

        self.event_log.log(
            EventType.AUCTION_BID,
            player_id=player_id,
            property=self.property_name,
            amount=amount,
        )
        return True

    def pass_round(self, player_id: int) -> bool:
        """Player skips this bidding round but stays in the auction."""
        if not self.can_player_bid(player_id) or player_id == self.high_bidder:
            return False
        self.passed_since_bid.add(player_id)
        self.event_log.log(EventType.AUCTION_PASS, player_id=player_id, property=self.property_name)
        self._check_completion()
        return True

    def exit(self, player_id: int) -> bool:
        """Player leaves the auction entirely."""
        if not self.can_player_bid(player_id) or player_id == self.high_bidder:
            return False
        self.active_bidders.discard(player_id)
        self.passed_since_bid.discard(player_id)
        self.event_log.log(EventType.AUCTION_EXIT, player_id=player_id, property=self.property_name)
        self._check_completion()
        return True

    def next_bidder(self, after: Optional[int] = None) -> Optional[int]:
        """Next bidder in seat order who still has a decision to make this round."""
        waiting = sorted(
            pid
            for pid in self.active_bidders
            if pid not in self.passed_since_bid and pid != self.high_bidder
        )
        if not waiting:
            return None
        if after is not None:
            for pid in waiting:
                if pid > after:
                    return pid
        return waiting[0]

    def _check_completion(self) -> None:
        """Check if the auction is over."""
        others = self.active_bidders - {self.high_bidder}
        if len(self.active_bidders) <= 1 or others <= self.passed_since_bid:
            self.is_complete = True
            self.event_log.log(
                EventType.AUCTION_END,
                player_id=self.high_bidder,
                property=self.property_name,
                position=self.property_position,
                winning_bid=self.current_bid,
                winner=self.high_bidder,
            )

    def get_winner(self) -> Optional[int]:
        """Get the winning player ID, or None if auction incomplete or no bids."""
        if not self.is_complete:
            return None
        return self.high_bidder

    def get_winning_bid(self) -> int:
        return self.current_bid
