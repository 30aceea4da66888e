"""
The human-in-the-loop decision point in front of every side effect.

Commands get four options (run, modify, revise, cancel) because they are
cheap to edit before running. Scripts are persisted before the user is asked
about running them, so for scripts the gate only negotiates where the file
goes and whether to run it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from prompt_toolkit import prompt
from rich.console import Console
from rich.prompt import Confirm, Prompt


class Decision(str, Enum):
    RUN = "run"
    MODIFY = "modify"
    REVISE = "revise"
    CANCEL = "cancel"


COMMAND_CHOICES = {
    Decision.RUN: "Run the command",
    Decision.MODIFY: "Modify the command",
    Decision.REVISE: "Revise the original request",
    Decision.CANCEL: "Cancel",
}


@dataclass
class CommandReview:
    """The user's answer to a proposed command."""

    decision: Decision
    command: Optional[str] = None
    revision: Optional[str] = None


class InteractionGate:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _ask_non_empty(self, message: str, default: Optional[str] = None) -> str:
        answer = ""
        while not answer.strip():
            if default:
                answer = Prompt.ask(message, default=default, console=self.console)
            else:
                answer = Prompt.ask(message, console=self.console)
        return answer.strip()

    def _edit(self, command: str) -> str:
        # The proposed command is prefilled in an editable line buffer.
        edited = ""
        while not edited.strip():
            edited = prompt("Edit the command: ", default=command)
        return edited.strip()

    def review_command(self, command: str) -> CommandReview:
        for decision, label in COMMAND_CHOICES.items():
            self.console.print(f"  [bold]{decision.value}[/]: {label}")

        choice = Prompt.ask(
            "What would you like to do with this command?",
            choices=[decision.value for decision in COMMAND_CHOICES],
            default=Decision.RUN.value,
            console=self.console,
        )
        decision = Decision(choice)

        if decision is Decision.RUN:
            return CommandReview(decision, command=command)
        if decision is Decision.MODIFY:
            modified = self._edit(command)
            return CommandReview(decision, command=modified)
        if decision is Decision.REVISE:
            revision = self._ask_non_empty("Add to or revise your original request")
            return CommandReview(decision, revision=revision)
        return CommandReview(Decision.CANCEL)

    def ask_destination(self, default: Optional[str]) -> str:
        return self._ask_non_empty("Where should I save it?", default=default)

    def confirm_run(self) -> bool:
        return Confirm.ask("Should I run the script?", default=True, console=self.console)
