"""Error taxonomy for chorus.

Model-level failures are usually converted into ``Error:`` content strings by the
responders that own them; these exceptions mark the places where that conversion
happens, or where a failure is allowed to reach the caller.
"""

ERROR_PREFIX = "Error:"


class ChorusError(Exception):
    """Base class for all chorus errors."""


class GenerationFailed(ChorusError):
    """The generation capability returned no usable output."""


class CredentialMissing(ChorusError):
    """A required API key is not configured."""

    def __init__(self, variable: str):
        super().__init__(f"{variable} is not configured.")
        self.variable = variable


class UnsupportedInputCombination(ChorusError):
    """The requested model cannot handle the supplied input (e.g. attachments)."""


class EmptyMessageError(ChorusError, ValueError):
    """The user message is empty after stripping the command and has no attachment."""


class ChatNotFoundError(ChorusError, KeyError):
    """The requested chat does not exist in the store."""


def error_content(message: str) -> str:
    """Format a per-model error marker string."""
    return f"{ERROR_PREFIX} {message}"


def is_error_content(content: str) -> bool:
    """Check whether response content is a per-model error marker."""
    return content.startswith(ERROR_PREFIX)
