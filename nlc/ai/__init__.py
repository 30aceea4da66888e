"""
The `ai` package provides the core intelligence for the command-line assistant,
encapsulating the agent, its tool environment, the interaction gate and the LLM client.
"""

from .agent import Agent, Environment
from .assistants.do import do
from .context import RequestContext, TurnOutcome
from .gate import Decision, InteractionGate
from .llm import LLMClient, get_client, get_model_name


__all__ = [
    "Agent",
    "Environment",
    "RequestContext",
    "TurnOutcome",
    "Decision",
    "InteractionGate",
    "LLMClient",
    "get_client",
    "get_model_name",
    "do",
]
