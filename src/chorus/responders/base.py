"""Shared plumbing for responders."""

from typing import Any

from ..config import RouterConfig
from ..llm import GenerationProvider


class Responder:
    """Base class for components that turn a user message into AI output.

    Holds the generation provider and configuration, and forwards log
    messages to an optional debug callback.
    """

    component = "responder"

    def __init__(self, llm: GenerationProvider, config: RouterConfig | None = None) -> None:
        self._llm = llm
        self._config = config or RouterConfig()
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        """Send debug message if callback is set."""
        if self._debug_callback:
            self._debug_callback(level, self.component, message)
