"""
Tests for mortgages.
"""


def test_mortgage_pays_half_price(basic_game, give):
    """Rule: 'The mortgage value is printed on each Title Deed'"""
    give(basic_game, 0, 39)

    assert basic_game.mortgage_property(0, 39)

    assert basic_game.property_ownership[39].is_mortgaged
    assert basic_game.players[0].cash == 1700


def test_cannot_mortgage_twice(basic_game, give):
    give(basic_game, 0, 39, mortgaged=True)

    assert not basic_game.mortgage_property(0, 39)


def test_cannot_mortgage_others_property(basic_game, give):
    give(basic_game, 1, 39)

    assert not basic_game.mortgage_property(0, 39)


def test_buildings_block_mortgage(basic_game, give):
    """Rule: 'all Buildings on all Sites of a colour-group must be sold before any Site can be mortgaged'"""
    give(basic_game, 0, 1, 3)
    basic_game.property_ownership[1].houses = 1

    assert not basic_game.mortgage_property(0, 3)


def test_unmortgage_with_interest(basic_game, give):
    """Rule: 'pay off the mortgage plus 10% interest'"""
    give(basic_game, 0, 39, mortgaged=True)

    assert basic_game.unmortgage_cost(39) == 220
    assert basic_game.unmortgage_property(0, 39)

    assert not basic_game.property_ownership[39].is_mortgaged
    assert basic_game.players[0].cash == 1280


def test_unmortgage_needs_cash(basic_game, give):
    give(basic_game, 0, 39, mortgaged=True)
    basic_game.players[0].cash = 100

    assert not basic_game.unmortgage_property(0, 39)


def test_mortgaged_square_collects_no_rent(basic_game, give):
    give(basic_game, 1, 39, mortgaged=True)

    assert basic_game.calculate_rent(39) == 0
