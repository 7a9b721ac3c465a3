"""LLM-backed decision client using an OpenAI-compatible chat completions API."""

import json
import logging
import time
from typing import Any, AbstractSet, Callable, Dict, Optional, Sequence

import httpx

from llm_monopoly.agents.base import DecisionClient
from llm_monopoly.agents.prompts import describe, system_prompt
from llm_monopoly.agents.tools import ToolSpec, to_openai_tools
from llm_monopoly.exceptions import (
    MalformedResponseError,
    OracleTransportError,
    UnknownActionError,
)
from llm_monopoly.settings import LLMSettings, get_llm_settings
from llm_monopoly.turn.actions import Action, ActionName
from llm_monopoly.turn.snapshot import GameStateSnapshot

logger = logging.getLogger(__name__)


class LLMDecisionClient(DecisionClient):
    """
    Decision client that asks a language model to pick a tool.

    Works with any backend exposing /v1/chat/completions with function
    calling (OpenAI, vLLM, Ollama).

    The client:
    1. Renders the snapshot into a natural-language state description
    2. Sends it with the system prompt and the tool catalogue
    3. Reads the first tool call from the reply
    4. Maps it onto an `Action`, raising a `DecisionError` subtype on failure

    A reply that calls no tool is an implicit end of turn. Free text in
    the reply is kept as the action's rationale and never drives control
    flow.

    Attributes:
        model_name: The LLM model name.
        base_url: Base URL for the OpenAI-compatible API.
        decision_callback: Optional callback receiving a record of each decision.
    """

    def __init__(
        self,
        settings: Optional[LLMSettings] = None,
        model_name: Optional[str] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        decision_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        self.settings = settings or get_llm_settings()
        self.model_name = model_name or self.settings.model
        self.base_url = (base_url or self.settings.base_url or "http://localhost:11434/v1").rstrip("/")
        if api_key is None and self.settings.api_key is not None:
            api_key = self.settings.api_key.get_secret_value()
        self.api_key = api_key
        self.decision_callback = decision_callback
        # Allow injected client; fallback to lazy creation
        self._client = client
        self._owns_client = client is None
        self._system_prompt = system_prompt()
        self._decision_count = 0

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        return self._client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def request_decision(
        self,
        snapshot: GameStateSnapshot,
        legal_actions: AbstractSet[ActionName],
        catalogue: Sequence[ToolSpec],
    ) -> Action:
        start_time = time.time()
        self._decision_count += 1

        prompt = describe(snapshot, legal_actions)
        logger.debug("Prompt for player %s:\n%s", snapshot.me.index, prompt)

        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            "tools": to_openai_tools(catalogue),
            "tool_choice": "auto",
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
        }

        result = await self._post(payload)
        action = self._parse_response(result, catalogue)

        processing_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"LLM player {snapshot.me.index} chose {action.name.value} "
            f"(args={dict(action.args)}, time={processing_time_ms}ms)"
        )

        if self.decision_callback:
            decision_data = {
                "player_id": snapshot.me.index,
                "sequence_number": self._decision_count,
                "legal_actions": sorted(a.value for a in legal_actions),
                "prompt": prompt,
                "reasoning": action.rationale,
                "chosen_action": {"name": action.name.value, "args": dict(action.args)},
                "processing_time_ms": processing_time_ms,
                "model_version": self.model_name,
            }
            try:
                self.decision_callback(decision_data)
            except Exception as cb_err:
                logger.error("Decision callback error: %s", cb_err)

        return action

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/chat/completions"
        try:
            response = await self.client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            raise OracleTransportError(f"Request to {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise OracleTransportError(f"HTTP {response.status_code} from {url}: {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"Response is not JSON: {response.text[:200]}") from exc

        if not isinstance(data, dict):
            raise MalformedResponseError("Response is not a JSON object")
        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise OracleTransportError(f"Upstream error: {message}")
        return data

    def _parse_response(self, data: Dict[str, Any], catalogue: Sequence[ToolSpec]) -> Action:
        """
        Map a chat completion onto an action.

        Raises:
            MalformedResponseError: the reply does not have the chat completion shape, or its tool arguments are unusable
            UnknownActionError: the tool name is not in the catalogue
        """
        choices = data.get("choices")
        if not choices or not isinstance(choices, list):
            raise MalformedResponseError("Invalid API response (no choices)")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise MalformedResponseError("Invalid API response (no message)")

        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise MalformedResponseError(f"Message content must be text, got {type(content).__name__}")
        rationale = (content or "").strip() or None
        if rationale:
            logger.info("LLM reasoning: %s", rationale)

        tool_calls = message.get("tool_calls") or []
        if not isinstance(tool_calls, list):
            raise MalformedResponseError(f"tool_calls must be a list, got {type(tool_calls).__name__}")
        if not tool_calls:
            logger.info("LLM provided text but no tool call; ending turn")
            return Action(ActionName.END_TURN, {}, rationale)

        call = tool_calls[0]
        function = call.get("function") if isinstance(call, dict) else None
        if not isinstance(function, dict):
            raise MalformedResponseError(f"Tool call has no function: {str(call)[:200]}")
        raw_name = function.get("name")
        if not isinstance(raw_name, str):
            raise MalformedResponseError("Tool call has no function name")
        name = ActionName.parse(raw_name)
        if name not in {spec.name for spec in catalogue}:
            raise UnknownActionError(raw_name)

        arguments = function.get("arguments")
        if arguments is None or arguments == "":
            args: Any = {}
        elif isinstance(arguments, str):
            try:
                args = json.loads(arguments)
            except json.JSONDecodeError as exc:
                raise MalformedResponseError(f"Failed to parse tool arguments: {arguments[:200]}") from exc
        else:
            args = arguments

        if not isinstance(args, dict):
            raise MalformedResponseError(f"Tool arguments must be an object, got {type(args).__name__}")

        return Action(name, args, rationale)

    async def check_connection(self) -> bool:
        """Send a minimal completion to verify the endpoint and credentials."""
        payload = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": "Hello, this is a test message."}],
            "max_tokens": 5,
        }
        try:
            data = await self._post(payload)
        except (OracleTransportError, MalformedResponseError) as exc:
            logger.warning("LLM connection check failed: %s", exc)
            return False
        return bool(data.get("choices"))

    async def aclose(self) -> None:
        """Clean up resources."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
