"""
Tests for the command-line entry point.
"""

import pytest

from llm_monopoly.agents.llm import LLMDecisionClient
from llm_monopoly.agents.scripted import ScriptedDecisionClient
from llm_monopoly.cli import build_clients, main


def test_build_clients_seats_llm_first():
    clients = build_clients(3, 1, seed=5, model="test-model", base_url="http://llm.test/v1")

    assert isinstance(clients[0], LLMDecisionClient)
    assert clients[0].model_name == "test-model"
    assert isinstance(clients[1], ScriptedDecisionClient)
    assert isinstance(clients[2], ScriptedDecisionClient)


def test_scripted_only_game(capsys):
    main(["--players", "2", "--llm-seats", "0", "--seed", "3", "--max-turns", "10", "--log-level", "WARNING"])

    out = capsys.readouterr().out
    assert "GAME OVER" in out
    assert "Total Turns: 10" in out


def test_llm_seats_cannot_exceed_players():
    with pytest.raises(SystemExit):
        main(["--players", "2", "--llm-seats", "3"])
