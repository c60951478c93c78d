import base64
import binascii
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class HistoryItem(BaseModel):
    """A single role-tagged turn handed to a generation call."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant", "system"] = Field(
        description="Role of the message sender: 'user', 'assistant', or 'system'"
    )
    content: str = Field(description="Content of the message")
    author_name: str | None = Field(default=None, description="Display name of the author")


class FileAttachment(BaseModel):
    """A user supplied file carried as a base64 data URI."""

    model_config = ConfigDict(frozen=True)

    name: str
    data_uri: str = Field(description="data:<mimetype>;base64,<payload>")
    mime_type: str

    def decode(self) -> bytes:
        """Decode the base64 payload of the data URI.

        Raises:
            ValueError: If the data URI is not base64 encoded
        """
        header, _, payload = self.data_uri.partition(",")
        if not header.startswith("data:") or ";base64" not in header:
            raise ValueError(f"Attachment '{self.name}' is not a base64 data URI")
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Attachment '{self.name}' has an invalid payload") from e


class Attachment(BaseModel):
    """Optional file and/or URL context accompanying a user message."""

    model_config = ConfigDict(frozen=True)

    file: FileAttachment | None = None
    url: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.file is None and not self.url

    def describe(self) -> str:
        """Short human readable label used when the message text is empty."""
        if self.file is not None:
            return f"Analyzed file: {self.file.name}"
        if self.url:
            return f"Analyzed URL: {self.url}"
        return ""


class GenerationResult(BaseModel):
    """Result of one generation call."""

    text: str = Field(default="", description="Generated text content")
    output: Any | None = Field(
        default=None,
        description="Validated structured output when an output schema was requested"
    )
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
