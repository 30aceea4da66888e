import shlex
from enum import Enum
from typing import Annotated, Callable, Optional

from pydantic import Field

from ... import logger
from ...config import Config
from ...errors import HandlerError
from ...shell import run_command
from ..agent import Agent, Environment
from ..context import RequestContext, TurnOutcome
from ..gate import Decision, InteractionGate
from ..llm import get_client, get_model_name

SYSTEM_PROMPT = """
You are NLC, an intelligent and efficient command-line assistant running in a terminal environment.
Interpret natural language requests and respond with shell commands, scripts, or succinct CLI outputs.
Stay concise and pragmatic. Avoid small talk unless explicitly requested.
"""

GREETING = "NLC is ready. What would you like to do?"


class ToolName(str, Enum):
    SUGGEST_COMMAND = "suggestCommand"
    WRITE_SCRIPT = "writeScript"
    MODIFY_SCRIPT = "modifyScript"
    ERROR = "error"


class DoEnvironment(Environment):
    """The four actions `nlc do` can take, bound to one turn's request."""

    def __init__(
        self,
        context: RequestContext,
        gate: Optional[InteractionGate] = None,
        runner: Optional[Callable] = None,
    ):
        super().__init__()
        self.context = context
        self.gate = gate or InteractionGate(logger.console)
        self.runner = runner or run_command

        registered = set(self.tools)
        expected = {tool.value for tool in ToolName}
        if registered != expected:
            raise RuntimeError(f"Tool registry mismatch: {sorted(registered ^ expected)}")

    @Environment.tool(name=ToolName.SUGGEST_COMMAND.value)
    def suggest_command(
        self,
        command: Annotated[
            str, Field(description="A suggested shell command based on the user's request")
        ],
    ) -> Optional[str]:
        """
        Suggest a command based on the user's natural language input - only when a command
        is clearly implied or requested.
        """
        logger.log_command(command)

        review = self.gate.review_command(command)
        if review.decision in (Decision.RUN, Decision.MODIFY):
            self.runner(review.command)
        elif review.decision is Decision.REVISE:
            return review.revision
        return None

    @Environment.tool(name=ToolName.WRITE_SCRIPT.value)
    def write_script(
        self,
        script: Annotated[
            str,
            Field(
                description="The complete shell script, with clear and thorough inline comments "
                "for readability and explanation."
            ),
        ],
        suggestedName: Annotated[
            str,
            Field(description="A recommended filename under which the script can be saved."),
        ],
    ):
        """
        Generates and saves a shell or Bash script based on the user's explicit request.
        Only create scripts written in shell or Bash - do **not** generate scripts in any
        other programming language.
        """
        self._save_and_offer_run(script, suggestedName)

    @Environment.tool(name=ToolName.MODIFY_SCRIPT.value)
    def modify_script(
        self,
        modifiedScript: Annotated[
            str,
            Field(
                description="The updated shell script with clear and well-documented inline "
                "comments explaining the changes."
            ),
        ],
    ):
        """
        Use this tool when the user requests a modification or bug fix for a **shell** or
        **Bash** script **and** has provided the original script. This tool should only be
        used for shell/Bash scripts - **not** for scripts in other programming languages.
        """
        self._save_and_offer_run(modifiedScript, self.context.file_path)

    @Environment.tool(name=ToolName.ERROR.value)
    def error(
        self,
        errorMessage: Annotated[
            str,
            Field(
                description="A clear and informative message explaining why the request "
                "cannot be fulfilled."
            ),
        ],
    ):
        """
        Use this as a fallback when no other tool is appropriate - specifically when the
        user's request falls outside the defined scope or capabilities of this project.
        """
        logger.error(errorMessage)

    def _save_and_offer_run(self, script: str, default_filename: Optional[str]):
        logger.log_script(script)

        filename = self.gate.ask_destination(default_filename)
        try:
            # newline="" keeps the script byte-for-byte what the model wrote.
            with open(filename, "w", encoding="utf-8", newline="") as f:
                f.write(script)
        except OSError as e:
            raise HandlerError(f"Could not save the script to '{filename}': {e}") from e
        logger.success(f"Saved script to {filename}")

        if self.gate.confirm_run():
            self.runner(f"bash {shlex.quote(filename)}")


def do(config: Config, request: str, file_path: Optional[str] = None) -> TurnOutcome:
    """Turns a natural language request into a command or script and walks the user through it."""
    llm = get_client(config)
    model = get_model_name(config)
    context = RequestContext.load(request, file_path)

    gate = InteractionGate(logger.console)
    agent = Agent(
        llm,
        model,
        lambda turn_context: DoEnvironment(turn_context, gate),
        SYSTEM_PROMPT,
        GREETING,
    )
    return agent.run(context)
