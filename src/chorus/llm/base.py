from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from .models import Attachment, GenerationResult, HistoryItem


class GenerationProvider(ABC):
    """A generative-AI vendor behind one async ``generate`` call.

    Callers only ever see ``HistoryItem`` lists in and ``GenerationResult`` out.
    Subclasses own the vendor SDK, the role mapping, how attachments are sent
    and how a JSON reply is requested and checked against ``output_schema``.

    Usable as an async context manager, which closes the provider on exit.
    """

    @abstractmethod
    async def generate(
        self,
        messages: list[HistoryItem],
        system: str | None = None,
        model: str | None = None,
        temperature: float = 0.7,
        output_schema: type[BaseModel] | None = None,
        attachment: Attachment | None = None,
        **kwargs: Any
    ) -> GenerationResult:
        """Produce the next assistant turn.

        Args:
            messages: Conversation so far; the last item is the prompt
            system: System instruction
            model: Overrides the provider's default model
            temperature: Sampling temperature
            output_schema: Pydantic model the reply should validate against
            attachment: File or URL context for the prompt
            **kwargs: Vendor-specific request options

        Returns:
            GenerationResult whose ``output`` is an ``output_schema`` instance,
            or None when nothing valid came back. Vendor errors propagate.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the vendor client."""

    async def __aenter__(self) -> "GenerationProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx may complain about the loop closing during interpreter teardown
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
