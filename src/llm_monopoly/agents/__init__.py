from llm_monopoly.agents.base import DecisionClient
from llm_monopoly.agents.tools import CATALOGUE, ToolSpec, get_catalogue, to_openai_tools
from llm_monopoly.agents.scripted import ScriptedDecisionClient
from llm_monopoly.agents.llm import LLMDecisionClient

__all__ = [
    "CATALOGUE",
    "DecisionClient",
    "LLMDecisionClient",
    "ScriptedDecisionClient",
    "ToolSpec",
    "get_catalogue",
    "to_openai_tools",
]
