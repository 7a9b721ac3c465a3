"""
Tests for environment-based configuration.
"""

from llm_monopoly.settings import LLMProvider, LLMSettings, TurnSettings


def test_llm_defaults(monkeypatch):
    for var in ("LLM_PROVIDER", "LLM_BASE_URL", "LLM_API_KEY", "LLM_TIMEOUT_SECONDS"):
        monkeypatch.delenv(var, raising=False)

    settings = LLMSettings(_env_file=None)

    assert settings.provider == LLMProvider.OLLAMA
    assert settings.base_url == "http://localhost:11434/v1"
    assert settings.timeout_seconds is None
    assert settings.api_key is None


def test_provider_selects_base_url(monkeypatch):
    monkeypatch.delenv("LLM_BASE_URL", raising=False)
    monkeypatch.setenv("LLM_PROVIDER", "vllm")

    assert LLMSettings(_env_file=None).base_url == "http://localhost:8000/v1"


def test_explicit_base_url_wins(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("LLM_BASE_URL", "http://gpu-box:9000/v1")

    assert LLMSettings(_env_file=None).base_url == "http://gpu-box:9000/v1"


def test_api_key_is_secret(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "sk-test")

    settings = LLMSettings(_env_file=None)

    assert settings.api_key.get_secret_value() == "sk-test"
    assert "sk-test" not in repr(settings)


def test_turn_defaults(monkeypatch):
    for var in ("TURN_MAX_ITERATIONS", "TURN_MAX_CYCLES_PER_TURN", "TURN_HISTORY_CAPACITY", "TURN_HISTORY_EXPOSED"):
        monkeypatch.delenv(var, raising=False)

    settings = TurnSettings(_env_file=None)

    assert settings.max_iterations == 8
    assert settings.history_capacity == 10
    assert settings.history_exposed == 5


def test_turn_settings_from_env(monkeypatch):
    monkeypatch.setenv("TURN_MAX_ITERATIONS", "4")

    assert TurnSettings(_env_file=None).max_iterations == 4


def test_exposed_history_is_clamped_to_capacity():
    settings = TurnSettings(_env_file=None, history_capacity=3, history_exposed=5)

    assert settings.history_exposed == 3
