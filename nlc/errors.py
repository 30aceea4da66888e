class NlcError(Exception):
    """Base class for every error raised by nlc itself."""


class ConfigurationError(NlcError):
    """A required setting is missing or holds an unsupported value."""


class InputError(NlcError):
    """The user supplied input that cannot be used (e.g. a missing file)."""


class BackendError(NlcError):
    """The text-generation backend failed or broke the tool protocol."""


class ToolArgumentsError(BackendError):
    """The backend called a tool with arguments that do not match its schema."""


class ExecutionError(NlcError):
    """A shell command could not be launched."""


class HandlerError(NlcError):
    """A tool handler could not complete its side effect."""
