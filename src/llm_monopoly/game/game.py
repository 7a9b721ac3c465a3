"""
Main game engine and state management.

The engine owns all mutable game state. Callers drive it through the
public methods below; each mutating method returns True on success and
False when its preconditions do not hold.
"""

import random
from typing import Dict, Iterable, List, Optional, Tuple

from llm_monopoly.game.auction import Auction
from llm_monopoly.game.board import BOARD_SIZE, JAIL_POSITION, Board
from llm_monopoly.game.config import GameConfig
from llm_monopoly.game.dice import Dice
from llm_monopoly.game.money import Bank, EventLog, EventType
from llm_monopoly.game.player import Player, PlayerState, PropertyOwnership, transfer_square
from llm_monopoly.game.spaces import (
    OWNABLE_TYPES,
    PropertySpace,
    RailroadSpace,
    SpaceType,
    TaxSpace,
    UtilitySpace,
)
from llm_monopoly.game.trade import Trade, TradeManager, TradeOffer


class GameState:
    """
    Represents the complete state of a Monopoly game.
    This is the main interface for the game engine.
    """

    def __init__(self, config: GameConfig, players: List[Player], dice: Optional[Dice] = None):
        self.config = config
        self.board = Board()
        self.bank = Bank(config.house_limit, config.hotel_limit)
        self.event_log = EventLog()

        self.rng = random.Random(config.seed)
        self.dice = dice or Dice(self.rng)

        self.players: Dict[int, PlayerState] = {}
        for player in players:
            self.players[player.player_id] = PlayerState(
                player.player_id, player.name, config.starting_cash
            )

        self.property_ownership: Dict[int, PropertyOwnership] = {}
        for space in self.board.spaces:
            if space.space_type in OWNABLE_TYPES:
                self.property_ownership[space.position] = PropertyOwnership()

        self.trade_manager = TradeManager(self.event_log)

        self.current_player_index = 0
        self.turn_number = 0
        self.active_auction: Optional[Auction] = None
        self.game_over = False
        self.winner: Optional[int] = None

        # Dice state for the current turn
        self.dice_rolled = False
        self.last_dice_roll: Optional[Tuple[int, int]] = None
        # Set when the current player lands on an unowned square and has not yet bought or declined it
        self.purchase_pending = False

        self.event_log.log(
            EventType.GAME_START,
            players=[p.name for p in players],
            starting_cash=config.starting_cash,
            seed=config.seed,
        )

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def get_current_player(self) -> PlayerState:
        """Get the current active player."""
        player_ids = sorted(self.players.keys())
        current_id = player_ids[self.current_player_index % len(player_ids)]
        return self.players[current_id]

    def get_active_players(self) -> List[PlayerState]:
        """Get all non-bankrupt players."""
        return [p for p in self.players.values() if not p.is_bankrupt]

    def is_current(self, player_id: int) -> bool:
        return not self.game_over and self.get_current_player().player_id == player_id

    # ------------------------------------------------------------------
    # Dice and movement
    # ------------------------------------------------------------------

    def roll(self, player_id: int) -> Optional[Tuple[int, int]]:
        """
        Roll for the current player and resolve the consequences.

        Outside jail: doubles grant another roll, the third double in a row
        sends the player straight to jail. In jail: doubles release and move
        the player, a miss counts as one attempt.

        Returns the dice, or None if the player may not roll now.
        """
        player = self.players[player_id]
        if not self.is_current(player_id):
            return None
        if self.dice_rolled and (player.in_jail or player.consecutive_doubles == 0):
            return None

        die1, die2 = self.dice.roll()
        self.last_dice_roll = (die1, die2)
        self.dice_rolled = True
        self.purchase_pending = False
        is_doubles = die1 == die2

        self.event_log.log(
            EventType.DICE_ROLL,
            player_id=player_id,
            die1=die1,
            die2=die2,
            total=die1 + die2,
            doubles=is_doubles,
        )

        if player.in_jail:
            player.jail_turns += 1
            self.event_log.log(
                EventType.JAIL_ATTEMPT,
                player_id=player_id,
                attempt=player.jail_turns,
                doubles=is_doubles,
            )
            if is_doubles:
                self._release_from_jail(player_id, "doubles")
                self._advance(player_id, die1 + die2)
            return die1, die2

        if is_doubles:
            player.consecutive_doubles += 1
            if player.consecutive_doubles >= self.config.max_doubles:
                self.send_to_jail(player_id)
                return die1, die2
        else:
            player.consecutive_doubles = 0

        self._advance(player_id, die1 + die2)
        return die1, die2

    def _advance(self, player_id: int, spaces: int) -> None:
        position = self.move_player(player_id, spaces)
        self._resolve_landing(player_id, position)

    def move_player(self, player_id: int, spaces: int) -> int:
        """
        Move a player forward by the specified number of spaces.
        Returns the new position.
        """
        player = self.players[player_id]
        old_position = player.position
        new_position = (old_position + spaces) % BOARD_SIZE

        if new_position < old_position and spaces > 0:
            player.cash += self.config.go_salary
            self.event_log.log(
                EventType.PASS_GO,
                player_id=player_id,
                amount=self.config.go_salary,
                new_balance=player.cash,
            )

        player.position = new_position
        self.event_log.log(
            EventType.MOVE, player_id=player_id, origin=old_position, to=new_position, spaces=spaces
        )
        return new_position

    def _resolve_landing(self, player_id: int, position: int) -> None:
        """Apply the automatic effects of landing on a space."""
        space = self.board.get_space(position)
        self.event_log.log(EventType.LAND, player_id=player_id, position=position, space=space.name)

        if space.space_type in OWNABLE_TYPES:
            ownership = self.property_ownership[position]
            if not ownership.is_owned():
                self.purchase_pending = True
            elif ownership.owner_id != player_id:
                rent = self.calculate_rent(position)
                if rent > 0:
                    self._pay_rent(player_id, ownership.owner_id, rent)
        elif isinstance(space, TaxSpace):
            player = self.players[player_id]
            player.cash -= space.amount
            self.event_log.log(
                EventType.TAX_PAYMENT, player_id=player_id, amount=space.amount, new_balance=player.cash
            )
        elif space.space_type == SpaceType.GO_TO_JAIL:
            self.send_to_jail(player_id)

    # ------------------------------------------------------------------
    # Jail
    # ------------------------------------------------------------------

    def send_to_jail(self, player_id: int) -> None:
        """Send a player to jail."""
        self.players[player_id].imprison(JAIL_POSITION)
        if self.is_current(player_id):
            self.purchase_pending = False
        self.event_log.log(EventType.GO_TO_JAIL, player_id=player_id)

    def pay_jail_fine(self, player_id: int) -> bool:
        """
        Player pays the fine to leave jail.

        After a failed final attempt the player also moves by the dice
        already on the table.
        """
        player = self.players[player_id]
        if not player.in_jail or not player.can_afford(self.config.jail_fine):
            return False

        player.cash -= self.config.jail_fine
        self._leave_jail(player_id, "fine")
        return True

    def use_jail_card(self, player_id: int) -> bool:
        """Use a Get Out of Jail Free card."""
        player = self.players[player_id]
        if not player.in_jail or player.get_out_of_jail_cards == 0:
            return False

        player.get_out_of_jail_cards -= 1
        self._leave_jail(player_id, "card")
        return True

    def _leave_jail(self, player_id: int, method: str) -> None:
        player = self.players[player_id]
        forced = (
            self.dice_rolled
            and self.last_dice_roll is not None
            and player.jail_turns >= self.config.max_jail_turns
            and self.is_current(player_id)
        )
        self._release_from_jail(player_id, method)
        if forced:
            self._advance(player_id, sum(self.last_dice_roll))

    def _release_from_jail(self, player_id: int, method: str) -> None:
        self.players[player_id].release()
        details = {"method": method}
        if method == "fine":
            details["amount"] = self.config.jail_fine
        self.event_log.log(EventType.JAIL_RELEASE, player_id=player_id, **details)

    # ------------------------------------------------------------------
    # Purchases and rent
    # ------------------------------------------------------------------

    def buy_property(self, player_id: int) -> bool:
        """
        Current player buys the square they are standing on.
        Returns True if successful, False otherwise.
        """
        player = self.players[player_id]
        if not self.is_current(player_id) or not self.purchase_pending:
            return False

        position = player.position
        space = self.board.get_space(position)
        ownership = self.property_ownership.get(position)
        if ownership is None or ownership.is_owned() or not player.can_afford(space.price):
            return False

        player.cash -= space.price
        transfer_square(position, ownership, None, player)
        self.purchase_pending = False

        self.event_log.log(
            EventType.PURCHASE,
            player_id=player_id,
            property=space.name,
            position=position,
            price=space.price,
            new_balance=player.cash,
        )
        return True

    def decline_purchase(self, player_id: int) -> bool:
        """Current player passes on the square; it goes to auction."""
        if not self.is_current(player_id) or not self.purchase_pending:
            return False

        position = self.players[player_id].position
        self.purchase_pending = False
        self.event_log.log(EventType.PURCHASE_DECLINED, player_id=player_id, position=position)
        self.start_auction(position)
        return True

    def calculate_rent(self, position: int, dice_roll: Optional[int] = None) -> int:
        """Rent owed for landing on an owned, unmortgaged square."""
        ownership = self.property_ownership.get(position)
        if ownership is None or not ownership.is_owned() or ownership.is_mortgaged:
            return 0

        space = self.board.get_space(position)
        owner_id = ownership.owner_id

        if isinstance(space, PropertySpace):
            return space.get_rent(ownership.houses, self.has_monopoly(owner_id, space.color_group))

        owned_in_group = sum(
            1 for pos in self.board.get_group(space.group)
            if self.property_ownership[pos].owner_id == owner_id
        )
        if isinstance(space, RailroadSpace):
            return space.get_rent(owned_in_group)
        if isinstance(space, UtilitySpace):
            if dice_roll is None:
                dice_roll = sum(self.last_dice_roll) if self.last_dice_roll else 0
            return space.get_rent(dice_roll, owned_in_group)
        return 0

    def _pay_rent(self, payer_id: int, owner_id: int, amount: int) -> None:
        # Debt settlement is not modelled; cash may go negative.
        payer = self.players[payer_id]
        owner = self.players[owner_id]
        payer.cash -= amount
        owner.cash += amount
        self.event_log.log(
            EventType.RENT_PAYMENT,
            player_id=payer_id,
            owner=owner_id,
            amount=amount,
            payer_balance=payer.cash,
            owner_balance=owner.cash,
        )

    # ------------------------------------------------------------------
    # Groups, building and mortgages
    # ------------------------------------------------------------------

    def owns_group(self, player_id: int, group: str) -> bool:
        """True if the player owns every square in the group."""
        positions = self.board.get_group(group)
        return bool(positions) and all(
            self.property_ownership[pos].owner_id == player_id for pos in positions
        )

    def has_monopoly(self, player_id: int, group: str) -> bool:
        """
        Owns the whole group and none of it is mortgaged.
        Rule: 'an owner who owns a whole colour-group may not collect double rent if any one Site there is mortgaged.'
        """
        return self.owns_group(player_id, group) and not any(
            self.property_ownership[pos].is_mortgaged for pos in self.board.get_group(group)
        )

    def can_build(self, player_id: int, position: int) -> bool:
        """
        Requirements:
        - Player owns a street with fewer than 5 buildings
        - Player has an unmortgaged monopoly on the color group
        - Even build rule is satisfied
        - Bank has the building and the player can afford it
        """
        space = self.board.get_property_space(position)
        ownership = self.property_ownership.get(position)
        if space is None or ownership is None or ownership.owner_id != player_id:
            return False
        if ownership.houses >= 5 or not self.has_monopoly(player_id, space.color_group):
            return False

        group_levels = [self.property_ownership[pos].houses for pos in self.board.get_group(space.color_group)]
        if ownership.houses > min(group_levels):
            return False

        if ownership.houses == 4 and self.bank.hotels_available == 0:
            return False
        if ownership.houses < 4 and self.bank.houses_available == 0:
            return False

        return self.players[player_id].cash >= space.house_cost

    def build(self, player_id: int, position: int) -> bool:
        """Add one house, or a hotel on top of four houses."""
        if not self.can_build(player_id, position):
            return False

        space = self.board.get_property_space(position)
        ownership = self.property_ownership[position]
        player = self.players[player_id]

        self.bank.take_building(ownership.houses)
        player.cash -= space.house_cost
        ownership.houses += 1

        self.event_log.log(
            EventType.BUILD,
            player_id=player_id,
            property=space.name,
            position=position,
            cost=space.house_cost,
            level=ownership.houses,
            new_balance=player.cash,
        )
        return True

    def sell_building(self, player_id: int, position: int) -> bool:
        """Sell the top building back to the bank for half its cost, keeping the group even."""
        space = self.board.get_property_space(position)
        ownership = self.property_ownership.get(position)
        if space is None or ownership is None or ownership.owner_id != player_id or ownership.houses == 0:
            return False

        group_levels = [self.property_ownership[pos].houses for pos in self.board.get_group(space.color_group)]
        if ownership.houses < max(group_levels):
            return False
        if not self.bank.return_building(ownership.houses):
            return False

        player = self.players[player_id]
        refund = space.house_cost // 2
        ownership.houses -= 1
        player.cash += refund

        self.event_log.log(
            EventType.SELL_BUILDING,
            player_id=player_id,
            property=space.name,
            position=position,
            refund=refund,
            level=ownership.houses,
            new_balance=player.cash,
        )
        return True

    def mortgage_property(self, player_id: int, position: int) -> bool:
        """Mortgage an owned square; the whole group must be free of buildings."""
        ownership = self.property_ownership.get(position)
        if ownership is None or ownership.owner_id != player_id or ownership.is_mortgaged:
            return False

        space = self.board.get_space(position)
        if any(self.property_ownership[pos].houses > 0 for pos in self.board.get_group(space.group)):
            return False

        player = self.players[player_id]
        ownership.is_mortgaged = True
        player.cash += space.mortgage_value

        self.event_log.log(
            EventType.MORTGAGE,
            player_id=player_id,
            property=space.name,
            position=position,
            amount=space.mortgage_value,
            new_balance=player.cash,
        )
        return True

    def unmortgage_cost(self, position: int) -> int:
        space = self.board.get_space(position)
        return int(space.mortgage_value * (1 + self.config.mortgage_interest_rate))

    def unmortgage_property(self, player_id: int, position: int) -> bool:
        """Lift a mortgage by repaying its value plus interest."""
        ownership = self.property_ownership.get(position)
        if ownership is None or ownership.owner_id != player_id or not ownership.is_mortgaged:
            return False

        player = self.players[player_id]
        cost = self.unmortgage_cost(position)
        if player.cash < cost:
            return False

        ownership.is_mortgaged = False
        player.cash -= cost

        self.event_log.log(
            EventType.UNMORTGAGE,
            player_id=player_id,
            property=self.board.get_space(position).name,
            position=position,
            cost=cost,
            new_balance=player.cash,
        )
        return True

    # ------------------------------------------------------------------
    # Auctions
    # ------------------------------------------------------------------

    def start_auction(self, position: int) -> Auction:
        """Start an auction for a property among all solvent players."""
        space = self.board.get_space(position)
        eligible = [p.player_id for p in self.get_active_players()]
        self.active_auction = Auction(position, space.name, eligible, self.event_log)
        return self.active_auction

    def place_bid(self, player_id: int, amount: int) -> bool:
        auction = self.active_auction
        if auction is None or amount > self.players[player_id].cash:
            return False
        return auction.place_bid(player_id, amount)

    def pass_bid(self, player_id: int) -> bool:
        if self.active_auction is None:
            return False
        success = self.active_auction.pass_round(player_id)
        self._settle_auction()
        return success

    def exit_auction(self, player_id: int) -> bool:
        if self.active_auction is None:
            return False
        success = self.active_auction.exit(player_id)
        self._settle_auction()
        return success

    def _settle_auction(self) -> None:
        """Transfer the lot once the auction has closed. Winner pays the bid, not the board price."""
        auction = self.active_auction
        if auction is None or not auction.is_complete:
            return

        winner_id = auction.get_winner()
        if winner_id is not None:
            winner = self.players[winner_id]
            winner.cash -= auction.get_winning_bid()
            position = auction.property_position
            transfer_square(position, self.property_ownership[position], None, winner)

        self.active_auction = None

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    def _tradeable(self, player_id: int, positions: Iterable[int]) -> bool:
        for pos in positions:
            ownership = self.property_ownership.get(pos)
            if ownership is None or ownership.owner_id != player_id:
                return False
            group = self.board.get_space(pos).group
            if any(self.property_ownership[p].houses > 0 for p in self.board.get_group(group)):
                return False
        return True

    def validate_trade(self, proposer_id: int, recipient_id: int, give: TradeOffer, take: TradeOffer) -> Tuple[bool, str]:
        """Check both sides of a trade against current holdings."""
        recipient = self.players.get(recipient_id)
        if recipient is None or recipient_id == proposer_id or recipient.is_bankrupt:
            return False, "invalid recipient"
        if give.is_empty() and take.is_empty():
            return False, "empty trade"
        if give.cash < 0 or take.cash < 0:
            return False, "negative cash"
        if give.cash > self.players[proposer_id].cash or take.cash > recipient.cash:
            return False, "insufficient funds"
        if not self._tradeable(proposer_id, give.properties):
            return False, "proposer cannot trade offered properties"
        if not self._tradeable(recipient_id, take.properties):
            return False, "recipient cannot trade requested properties"
        return True, ""

    def propose_trade(
        self,
        proposer_id: int,
        recipient_id: int,
        offered: Iterable[int],
        requested: Iterable[int],
        offered_cash: int = 0,
        requested_cash: int = 0,
    ) -> Optional[Trade]:
        """Open a trade offer; returns None when the offer is invalid."""
        give = TradeOffer(offered_cash, set(offered))
        take = TradeOffer(requested_cash, set(requested))
        valid, _ = self.validate_trade(proposer_id, recipient_id, give, take)
        if not valid:
            return None
        return self.trade_manager.create_trade(proposer_id, recipient_id, give, take)

    def respond_to_trade(self, player_id: int, accept: bool) -> bool:
        """Recipient settles the oldest trade offered to them."""
        trade = self.trade_manager.pending_for(player_id)
        if trade is None:
            return False

        if accept:
            valid, _ = self.validate_trade(
                trade.proposer_id, trade.recipient_id, trade.proposer_offer, trade.recipient_offer
            )
            if not valid:
                self.trade_manager.close(trade, accepted=False)
                return False
            self._execute_trade(trade)

        self.trade_manager.close(trade, accepted=accept)
        return True

    def _execute_trade(self, trade: Trade) -> None:
        proposer = self.players[trade.proposer_id]
        recipient = self.players[trade.recipient_id]

        for source, target, offer in (
            (proposer, recipient, trade.proposer_offer),
            (recipient, proposer, trade.recipient_offer),
        ):
            source.cash -= offer.cash
            target.cash += offer.cash
            for pos in offer.properties:
                transfer_square(pos, self.property_ownership[pos], source, target)

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def end_turn(self) -> None:
        """End the current player's turn and advance to the next solvent player."""
        current = self.get_current_player()
        current.consecutive_doubles = 0
        self.dice_rolled = False
        self.last_dice_roll = None
        self.purchase_pending = False

        player_ids = sorted(self.players.keys())
        for _ in range(len(player_ids)):
            self.current_player_index = (self.current_player_index + 1) % len(player_ids)
            if not self.get_current_player().is_bankrupt:
                break

        self.turn_number += 1

        if self.config.time_limit_turns and self.turn_number >= self.config.time_limit_turns:
            self._end_game_by_time_limit()

        self.event_log.log(
            EventType.TURN_START,
            player_id=self.get_current_player().player_id,
            turn=self.turn_number,
        )

    def _end_game_by_time_limit(self) -> None:
        """End game due to time limit and determine winner by net worth."""
        ranked = sorted(self.get_active_players(), key=lambda p: self.net_worth(p.player_id), reverse=True)
        self.game_over = True
        self.winner = ranked[0].player_id if ranked else None
        self.event_log.log(EventType.GAME_END, player_id=self.winner, reason="time_limit")

    def net_worth(self, player_id: int) -> int:
        """Cash plus property and building value."""
        player = self.players[player_id]
        worth = player.cash
        for pos in player.properties:
            space = self.board.get_space(pos)
            ownership = self.property_ownership[pos]
            worth += space.mortgage_value if ownership.is_mortgaged else space.price
            if isinstance(space, PropertySpace):
                worth += ownership.houses * space.house_cost
        return worth


def create_game(config: GameConfig, players: List[Player], dice: Optional[Dice] = None) -> GameState:
    """Create a new game with the given configuration and seats."""
    return GameState(config, players, dice=dice)
