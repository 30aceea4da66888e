import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import aisuite

from ..config import Config
from ..errors import BackendError, ConfigurationError

LOGGER = logging.getLogger(__name__)

# LM Studio ignores the key, but the OpenAI SDK refuses to start without one.
LOCAL_PROVIDER_API_KEY = "lm-studio"


@dataclass
class LLMCompletionResponse:
    """Wraps the full assistant message from the LLM API."""

    assistant_message: Dict

    @property
    def content(self) -> Optional[str]:
        """The text content of the message, if any."""
        return self.assistant_message.get("content")

    @property
    def tool_calls(self) -> Optional[List[Dict]]:
        """The list of tool calls requested by the LLM, if any."""
        return self.assistant_message.get("tool_calls")


class LLMClient:
    """
    A wrapper for the LLM client to abstract away the specific provider library.
    This allows for easier swapping of LLM providers in the future.
    """

    def __init__(self, provider_configs: Dict):
        """
        Initializes the LLM client.

        Args:
            provider_configs: A dictionary containing configuration for the LLM provider.
        """
        self.client = aisuite.Client(provider_configs)

    @staticmethod
    def format_system_message(content: str) -> Dict:
        return {"role": "system", "content": content}

    @staticmethod
    def format_user_message(content: str) -> Dict:
        return {"role": "user", "content": content}

    @staticmethod
    def format_assistant_message(content: str) -> Dict:
        return {"role": "assistant", "content": content}

    def completion(
        self,
        model: str,
        messages: List[Dict],
        tools: Optional[List[Dict]] = None,
        **kwargs
    ) -> LLMCompletionResponse:
        LOGGER.debug("Calling %s with %d messages and %d tools", model, len(messages), len(tools or []))
        try:
            response = self.client.chat.completions.create(
                model=model, messages=messages, tools=tools, **kwargs
            )
        except Exception as e:
            raise BackendError(f"The model request failed: {e}") from e

        # The message object from aisuite/openai can be converted to a dict.
        # We exclude unset values to keep the payload clean and compatible.
        message_dict = response.choices[0].message.model_dump(exclude_unset=True)
        return LLMCompletionResponse(assistant_message=message_dict)


def get_client(config: Config) -> LLMClient:
    """
    Builds an LLM client for the configured provider.
    Only checks that the required settings are present; nothing is sent over the network.
    """
    if config.provider == "openai":
        if not config.api_key:
            raise ConfigurationError(
                "OpenAI API key not found. Please set it using: nlc config key <your-api-key>"
            )
        provider_configs = {"openai": {"api_key": config.api_key}}
    elif config.provider == "lmstudio":
        provider_configs = {
            "openai": {"api_key": LOCAL_PROVIDER_API_KEY, "base_url": config.base_url}
        }
    else:
        raise ConfigurationError(
            f"Unsupported provider '{config.provider}'. Supported: openai, lmstudio"
        )

    LOGGER.debug("Using provider %s", config.provider)
    return LLMClient(provider_configs)


def get_model_name(config: Config) -> str:
    """Returns the aisuite model id (`<provider>:<model>`) for the configured model."""
    if not config.model_name:
        raise ConfigurationError(
            "No model configured. Set one using: nlc config model <model-name>"
        )

    # Both providers speak the OpenAI protocol through aisuite's openai provider.
    return f"openai:{config.model_name}"
