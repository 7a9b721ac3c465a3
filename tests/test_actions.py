"""
Tests for the action vocabulary and tool catalogue.
"""

import pytest

from llm_monopoly.agents.tools import CATALOGUE, get_catalogue, to_openai_tools
from llm_monopoly.exceptions import DecisionError, UnknownActionError
from llm_monopoly.turn.actions import Action, ActionName


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("roll", ActionName.ROLL),
        ("ROLL", ActionName.ROLL),
        ("rollDice", ActionName.ROLL),
        ("end-turn", ActionName.END_TURN),
        ("endTurn", ActionName.END_TURN),
        ("buyHouse", ActionName.BUILD),
        ("declineBuyProperty", ActionName.DECLINE_BUY),
        ("pass_bid", ActionName.PASS_BID),
        (" exit_auction ", ActionName.EXIT_AUCTION),
    ],
)
def test_parse_accepts_known_spellings(raw, expected):
    assert ActionName.parse(raw) == expected


@pytest.mark.parametrize("raw", ["teleport", "", None, "roll dice"])
def test_parse_rejects_unknown_names(raw):
    with pytest.raises(UnknownActionError):
        ActionName.parse(raw)


def test_unknown_action_is_a_decision_error():
    assert issubclass(UnknownActionError, DecisionError)


def test_rationale_does_not_affect_equality():
    assert Action(ActionName.ROLL, {}, "because") == Action(ActionName.ROLL)


def test_catalogue_covers_every_action():
    assert set(CATALOGUE) == set(ActionName)


def test_square_actions_require_index():
    build = CATALOGUE[ActionName.BUILD].to_openai()

    assert build["function"]["name"] == "build"
    assert build["function"]["parameters"]["required"] == ["square_index"]
    assert build["function"]["parameters"]["properties"]["square_index"]["maximum"] == 39


def test_trade_schema():
    params = CATALOGUE[ActionName.TRADE_INITIATE].parameters

    assert set(params["properties"]) == {
        "recipient_index",
        "offered_squares",
        "requested_squares",
        "offered_money",
        "requested_money",
    }


def test_get_catalogue_can_be_restricted():
    specs = get_catalogue([ActionName.END_TURN, ActionName.ROLL])

    assert [s.name for s in specs] == [ActionName.ROLL, ActionName.END_TURN]
    assert [t["function"]["name"] for t in to_openai_tools(specs)] == ["roll", "end_turn"]
