import inspect
import json
import logging
from typing import Annotated, Any, Callable, Dict, List, Optional, get_args, get_origin, get_type_hints

from pydantic import ConfigDict, ValidationError, create_model
from pydantic.fields import FieldInfo

from .. import logger
from ..errors import HandlerError, ToolArgumentsError
from .context import RequestContext, TurnOutcome, build_messages
from .llm import LLMClient, LLMCompletionResponse

LOGGER = logging.getLogger(__name__)


class Environment:
    """
    A registry of the tools offered to the LLM.

    Subclasses declare tools by decorating methods with `@Environment.tool()`.
    The JSON schema sent to the LLM and the validator applied to incoming
    arguments are both derived from the method signature.
    """

    def __init__(self):
        self.tools = {}
        self._collect_tools()

    def _collect_tools(self):
        for attr_name in dir(self):
            if attr_name.startswith("_"):
                continue

            attr = getattr(self, attr_name)
            if hasattr(attr, "__tool_info__"):
                tool_info = getattr(attr, "__tool_info__")
                self.tools[tool_info["tool_name"]] = tool_info

    def get_tools(self) -> List[Dict]:
        # Format the function in the OpenAI format
        return [
            {
                "type": "function",
                "function": {
                    "name": t["tool_name"],
                    "description": t["description"],
                    "parameters": t["parameters"],
                },
            }
            for t in self.tools.values()
        ]

    def run_tool(self, tool_name: str, args: Any) -> Any:
        """
        Validates `args` against the tool's schema and runs it.
        Raises ToolArgumentsError before the handler runs if the call is malformed.
        """
        tool_info = self.tools.get(tool_name)
        if not tool_info:
            raise ToolArgumentsError(f"Tool '{tool_name}' not found.")

        if not isinstance(args, dict):
            raise ToolArgumentsError(
                f"Arguments for tool '{tool_name}' must be an object, got {type(args).__name__}."
            )

        try:
            validated = tool_info["arguments_model"].model_validate(args)
        except ValidationError as e:
            raise ToolArgumentsError(f"Invalid arguments for tool '{tool_name}': {e}") from e

        func = tool_info["function"]
        return func(self, **validated.model_dump())

    @staticmethod
    def tool(name: Optional[str] = None):
        def decorator(func):
            signature = inspect.signature(func)
            type_hints = get_type_hints(func, include_extras=True)
            tool_name = name or func.__name__

            # Build JSON schema for arguments
            args_schema = {"type": "object", "properties": {}, "required": []}
            model_fields = {}

            param_types = {
                str: "string",
                int: "integer",
                float: "number",
                bool: "boolean",
                list: "array",
                dict: "object",
            }

            # Examine each parameter
            for param_name, param in signature.parameters.items():
                if param_name == "self":
                    continue

                param_hint = type_hints.get(param_name, str)
                param_type = param_hint
                description = None
                if get_origin(param_hint) is Annotated:
                    param_type, *metadata = get_args(param_hint)
                    for item in metadata:
                        if isinstance(item, FieldInfo) and item.description:
                            description = item.description

                # Convert Python types to JSON schema types
                param_schema = {"type": param_types.get(param_type, "string")}
                if description:
                    param_schema["description"] = description

                args_schema["properties"][param_name] = param_schema

                # If parameter has no default, it's required
                if param.default == inspect.Parameter.empty:
                    args_schema["required"].append(param_name)
                    model_fields[param_name] = (param_hint, ...)
                else:
                    model_fields[param_name] = (param_hint, param.default)

            arguments_model = create_model(
                f"{tool_name}Arguments",
                __config__=ConfigDict(extra="forbid", strict=True),
                **model_fields,
            )

            tool_description = inspect.cleandoc(func.__doc__) if func.__doc__ else ""
            func.__tool_info__ = {
                "function": func,
                "tool_name": tool_name,
                "description": tool_description,
                "parameters": args_schema,
                "arguments_model": arguments_model,
            }
            return func

        return decorator


class Agent:
    """
    Drives one logical user command: asks the LLM to pick a tool, runs that
    tool, and starts a new turn with an amended request whenever the tool
    hands back a revision.

    Each turn gets a fresh environment built from that turn's context, and
    the message list is rebuilt from scratch, so nothing leaks between turns
    except the amended prompt.
    """

    def __init__(
        self,
        llm: LLMClient,
        model: str,
        environment_factory: Callable[[RequestContext], Environment],
        system_prompt: str,
        greeting: str,
    ):
        self.llm = llm
        self.model = model
        self.environment_factory = environment_factory
        self.system_prompt = system_prompt
        self.greeting = greeting

    def run(self, context: RequestContext) -> TurnOutcome:
        """
        Runs turns until one of them does not ask for a revision.
        There is no depth limit: each extra turn needs the user to choose "revise".
        """
        while True:
            outcome = self.run_turn(context)
            if outcome.revision is None:
                return outcome

            context = context.amend(outcome.revision)
            LOGGER.debug("Revising request: %s", context.prompt)

    def run_turn(self, context: RequestContext) -> TurnOutcome:
        environment = self.environment_factory(context)
        response = self.llm.completion(
            model=self.model,
            messages=build_messages(context, self.system_prompt, self.greeting),
            tools=environment.get_tools(),
        )

        if response.tool_calls:
            return self._dispatch(environment, context, response)

        # No tool selected: whatever the model said is the whole answer.
        if response.content:
            logger.print_markdown(response.content)
        return TurnOutcome(context=context, text=response.content)

    def _dispatch(
        self,
        environment: Environment,
        context: RequestContext,
        response: LLMCompletionResponse,
    ) -> TurnOutcome:
        tool_calls = response.tool_calls
        function = _function_of(tool_calls[0])
        tool_name = function["name"]
        if len(tool_calls) > 1:
            LOGGER.warning(
                "The model requested %d tools at once; only '%s' will run.",
                len(tool_calls),
                tool_name,
            )
        if response.content:
            LOGGER.debug("Ignoring text sent along with a tool call: %s", response.content)

        tool_args = _parse_arguments(tool_name, function.get("arguments"))
        LOGGER.debug("Running tool %s", tool_name)

        try:
            result = environment.run_tool(tool_name, tool_args)
        except HandlerError as e:
            logger.error(str(e))
            return TurnOutcome(context=context, tool_name=tool_name, failed=True)

        # Tools hand back the revision text when the user chose to revise the request.
        revision = result if isinstance(result, str) else None
        return TurnOutcome(context=context, tool_name=tool_name, revision=revision)


def _function_of(tool_call: Any) -> Dict:
    function = tool_call.get("function") if isinstance(tool_call, dict) else None
    if not isinstance(function, dict) or not function.get("name"):
        raise ToolArgumentsError(f"Malformed tool call from the model: {tool_call!r}")
    return function


def _parse_arguments(tool_name: str, raw_arguments: Any) -> Any:
    if isinstance(raw_arguments, dict):
        return raw_arguments
    try:
        return json.loads(raw_arguments or "{}")
    except (TypeError, json.JSONDecodeError) as e:
        raise ToolArgumentsError(f"Malformed arguments for tool '{tool_name}': {e}") from e
