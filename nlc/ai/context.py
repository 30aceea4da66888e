from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from ..errors import InputError
from ..files import load_file_with_line_numbers
from .llm import LLMClient

REVISION_SEPARATOR = " // Revision: "


@dataclass(frozen=True)
class RequestContext:
    """
    Everything one backend turn is built from: the (possibly revised) prompt
    and, optionally, the user-supplied file rendered with line numbers.
    """

    prompt: str
    file_path: Optional[str] = None
    file_content: Optional[str] = None

    @classmethod
    def load(cls, prompt: str, file_path: Optional[str] = None) -> "RequestContext":
        """Builds the initial context, failing fast when `file_path` does not exist."""
        if not file_path:
            return cls(prompt=prompt)

        file_content = load_file_with_line_numbers(file_path)
        if file_content is None:
            raise InputError(
                f'File not found: "{file_path}". Please check the path and try again.'
            )
        return cls(prompt=prompt, file_path=file_path, file_content=file_content)

    def amend(self, revision: str) -> "RequestContext":
        return replace(self, prompt=f"{self.prompt}{REVISION_SEPARATOR}{revision}")

    def user_message(self) -> str:
        if self.file_content is not None:
            return (
                f"Here is the script `{self.file_path}`:\n\n"
                f"{self.file_content}\n\n---\n\n"
                f"Task: {self.prompt}"
            )
        return f"Task: {self.prompt}"


def build_messages(context: RequestContext, system_prompt: str, greeting: str) -> List[Dict]:
    """The fixed three-message sequence sent to the backend on every turn."""
    return [
        LLMClient.format_system_message(system_prompt),
        LLMClient.format_assistant_message(greeting),
        LLMClient.format_user_message(context.user_message()),
    ]


@dataclass
class TurnOutcome:
    """What a single backend turn ended up doing."""

    context: RequestContext
    text: Optional[str] = None
    tool_name: Optional[str] = None
    revision: Optional[str] = None
    failed: bool = False
