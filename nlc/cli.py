#!/usr/bin/env python3

import argparse
import argcomplete
import sys

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import wraps
from typing import Callable, List, Optional

from . import __version__, logger
from .ai import do
from .config import (
    API_KEY,
    BASE_URL,
    MODEL_NAME,
    PROVIDER,
    SUPPORTED_PROVIDERS,
    Config,
    ConfigStore,
)
from .errors import ConfigurationError, InputError


_available_commands: List["Command"] = []


@dataclass
class Argument(ABC):
    def __init__(self, help: str, kwargs: Optional[dict] = None):
        self.help = help
        self.kwargs = kwargs if kwargs is not None else {}

    @abstractmethod
    def add_to_parser(self, parser: argparse.ArgumentParser):
        pass


class OptionalArg(Argument):
    def __init__(
        self,
        short_option: str,
        long_option: str,
        help: str,
        kwargs: Optional[dict] = None,
    ):
        super().__init__(help=help, kwargs=kwargs)
        self.short_option = short_option
        self.long_option = long_option

    def add_to_parser(self, parser: argparse.ArgumentParser):
        parser.add_argument(
            self.short_option, self.long_option, help=self.help, **self.kwargs
        )


class PositionalArg(Argument):
    def __init__(self, name: str, help: str, kwargs: Optional[dict] = None):
        super().__init__(help=help, kwargs=kwargs)
        self.name = name

    def add_to_parser(self, parser: argparse.ArgumentParser):
        parser.add_argument(self.name, help=self.help, **self.kwargs)


@dataclass
class Command:
    name: str
    func: Callable
    help: str
    description: str
    args: list[Argument]


def command(args: List[Argument]):
    def decorator(func):
        if not func.__name__.startswith("handle_"):
            raise ValueError("Command handler must start with 'handle_'.")

        if not func.__doc__:
            raise ValueError(
                f"Command handler '{func.__name__}' must have a docstring for its help text."
            )

        @wraps(func)
        def wrapper(parsed_args):
            # Every command gets the settings store explicitly; nothing below the
            # CLI reads configuration on its own.
            return func(parsed_args, ConfigStore())

        command_name = func.__name__.split("_")[1]
        # Use the first line of the docstring as the help text and
        # the full docstring for the detailed description.
        help_text = func.__doc__.strip().split("\n")[0]
        _available_commands.append(
            Command(command_name, wrapper, help_text, func.__doc__, args)
        )
        return wrapper

    return decorator


##############################################################################


@command(
    [
        PositionalArg(
            name="request",
            help="The action or query you want NLC to perform.",
            kwargs={"nargs": "+"},
        ),
        OptionalArg(
            short_option="-f",
            long_option="--file",
            help="Optional script to include with your request (e.g., to fix or modify it).",
            kwargs={"metavar": "PATH"},
        ),
    ]
)
def handle_do(args, store: ConfigStore):
    """Execute a natural language request using NLC.
    NLC proposes a command or a script and asks before running or saving anything.
    """
    do(Config.load(store), " ".join(args.request), args.file)


CONFIG_SETTINGS = {
    "key": API_KEY,
    "model": MODEL_NAME,
    "provider": PROVIDER,
    "url": BASE_URL,
}


@command(
    [
        PositionalArg(
            name="setting",
            help="key (OpenAI API key), model, provider (openai|lmstudio) or url (LM Studio base URL).",
            kwargs={"choices": list(CONFIG_SETTINGS)},
        ),
        PositionalArg(
            name="value",
            help="The new value for the setting.",
        ),
    ]
)
def handle_config(args, store: ConfigStore):
    """Manage configuration settings for NLC (OpenAI or LM Studio)."""
    value = args.value.strip()

    if args.setting == "key":
        if not value:
            raise ConfigurationError("API key cannot be empty.")
        store.set(API_KEY, value)
        logger.success("OpenAI API key saved successfully.")

    elif args.setting == "model":
        if not value:
            raise ConfigurationError("Model name cannot be empty.")
        store.set(MODEL_NAME, value)
        logger.success(f"Model set to: {value}")

    elif args.setting == "provider":
        if value not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Invalid provider. Supported: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        store.set(PROVIDER, value)
        if value == "openai":
            logger.success("Switched to OpenAI.")
        else:
            logger.success("Switched to LM Studio. Be sure to set the base url: nlc config url <url>")

    elif args.setting == "url":
        if not value:
            raise ConfigurationError("Base URL cannot be empty.")
        store.set(BASE_URL, value)
        logger.success(f"Base URL set to: {value}")


##############################################################################


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nlc",
        description="A lightweight, AI-powered terminal assistant for natural language commands.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logs."
    )
    subparsers = parser.add_subparsers(
        dest="command", help="Sub-commands", required=True
    )

    # Sort commands alphabetically for consistent --help output.
    _available_commands.sort(key=lambda cmd: cmd.name)

    for command in _available_commands:
        subparser = subparsers.add_parser(
            command.name, help=command.help, description=command.description
        )
        for arg in command.args:
            arg.add_to_parser(subparser)
        subparser.set_defaults(func=command.func)

    return parser


def run_cli(argv: Optional[List[str]] = None):
    """
    Parses command-line arguments and executes the corresponding command.

    Args:
        argv: A list of strings representing the command-line arguments.
              If None, `sys.argv[1:]` is used automatically by `parse_args`.
    """
    parser = build_parser()

    # Enable argument auto-completion.
    argcomplete.autocomplete(parser)

    args = parser.parse_args(argv)
    logger.configure_logging(args.verbose)

    try:
        args.func(args)
    except (ConfigurationError, InputError) as e:
        # Problems the user can fix; report them without failing the process.
        logger.error(str(e))
    except (KeyboardInterrupt, EOFError):
        logger.console.print("\nCancelled.")
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """The main entry point for the command-line interface, called by the `nlc` script."""
    run_cli()


if __name__ == "__main__":
    main()
