"""
Tests for property auctions.
"""

from llm_monopoly.game.money import EventType


def test_declining_starts_auction(basic_game, dice):
    """Rule: 'If you do not wish to buy the property, the Bank sells it through an auction'"""
    dice.push((2, 4))
    basic_game.roll(0)

    assert basic_game.decline_purchase(0)

    auction = basic_game.active_auction
    assert auction.property_position == 6
    assert auction.active_bidders == {0, 1}
    assert not basic_game.purchase_pending


def test_highest_bidder_wins_and_pays_bid(basic_game):
    basic_game.start_auction(6)

    assert basic_game.place_bid(0, 10)
    assert basic_game.place_bid(1, 20)
    assert basic_game.pass_bid(0)

    assert basic_game.active_auction is None
    assert basic_game.property_ownership[6].owner_id == 1
    assert 6 in basic_game.players[1].properties
    assert basic_game.players[1].cash == 1480
    assert basic_game.players[0].cash == 1500


def test_bid_must_exceed_current(basic_game):
    basic_game.start_auction(6)
    basic_game.place_bid(0, 50)

    assert not basic_game.place_bid(1, 50)
    assert basic_game.active_auction.high_bidder == 0


def test_bid_cannot_exceed_cash(basic_game):
    basic_game.start_auction(6)
    basic_game.players[1].cash = 30

    assert not basic_game.place_bid(1, 40)


def test_high_bidder_cannot_pass_or_exit(basic_game):
    basic_game.start_auction(6)
    basic_game.place_bid(0, 10)

    assert not basic_game.pass_bid(0)
    assert not basic_game.exit_auction(0)
    assert basic_game.active_auction is not None


def test_new_bid_reopens_round(three_player_game):
    three_player_game.start_auction(6)
    auction = three_player_game.active_auction

    three_player_game.place_bid(0, 10)
    three_player_game.pass_bid(1)
    three_player_game.place_bid(2, 15)

    assert auction.passed_since_bid == set()
    assert auction.next_bidder(after=2) == 0
    assert not auction.is_complete


def test_exit_leaves_last_bidder(three_player_game):
    three_player_game.start_auction(6)
    three_player_game.place_bid(2, 10)

    three_player_game.exit_auction(0)
    three_player_game.exit_auction(1)

    assert three_player_game.active_auction is None
    assert three_player_game.property_ownership[6].owner_id == 2


def test_no_bids_leaves_square_unowned(basic_game):
    basic_game.start_auction(6)

    basic_game.pass_bid(0)
    basic_game.pass_bid(1)

    assert basic_game.active_auction is None
    assert basic_game.property_ownership[6].owner_id is None
    end = basic_game.event_log.of_type(EventType.AUCTION_END)[0]
    assert end.details["winner"] is None


def test_next_bidder_rotates_in_seat_order(three_player_game):
    three_player_game.start_auction(6)
    auction = three_player_game.active_auction

    assert auction.next_bidder() == 0
    assert auction.next_bidder(after=0) == 1
    assert auction.next_bidder(after=2) == 0

    three_player_game.place_bid(1, 10)
    assert auction.next_bidder(after=0) == 2
