"""Gemini generation provider built on the google-genai SDK.

Gemini occasionally answers with no candidates at all (safety filtering or a
transient service hiccup). Such replies are retried a few times with a short
linear backoff before an empty result is handed back to the caller.
"""

import asyncio
from typing import Any

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from ..base import GenerationProvider
from ..models import Attachment, GenerationResult, HistoryItem

# Companion roleplay trips the stock thresholds, so only high-risk content is blocked
_BLOCKED_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_SETTINGS = [
    types.SafetySetting(category=category, threshold="BLOCK_ONLY_HIGH")
    for category in _BLOCKED_CATEGORIES
]

# Prompts that look like function calls otherwise end in UNEXPECTED_TOOL_CALL
_NO_TOOLS = types.ToolConfig(
    function_calling_config=types.FunctionCallingConfig(mode="NONE")
)

RETRY_BACKOFF_SECONDS = 0.5


def extract_text(response: Any) -> str:
    """Concatenate the text parts of the first candidate.

    Falls back to ``response.text``, which the SDK may raise from when the
    reply was blocked; that case yields ``""``.
    """
    candidates = response.candidates or []
    content = candidates[0].content if candidates else None
    if content is not None and content.parts:
        joined = "".join(getattr(part, "text", None) or "" for part in content.parts)
        if joined:
            return joined

    try:
        return response.text or ""
    except (ValueError, AttributeError):
        return ""


def _usage_of(response: Any) -> dict[str, int] | None:
    meta = response.usage_metadata
    if not meta:
        return None
    return {
        "prompt_tokens": meta.prompt_token_count or 0,
        "completion_tokens": meta.candidates_token_count or 0,
        "total_tokens": meta.total_token_count or 0,
    }


def _attachment_parts(attachment: Attachment) -> list[types.Part]:
    parts = []
    if attachment.url:
        parts.append(types.Part(
            text=f"Use the content from the following URL as context: {attachment.url}"
        ))
    if attachment.file is not None:
        parts.append(types.Part.from_bytes(
            data=attachment.file.decode(),
            mime_type=attachment.file.mime_type,
        ))
    return parts


class GeminiProvider(GenerationProvider):
    """Text and structured generation with Gemini.

    Hidden design decisions:
    - 'assistant' turns are sent with the 'model' role; 'system' turns are lifted
      into the system instruction
    - Attachments ride on the last user turn as extra parts
    - Structured output uses the SDK's response_schema and is re-validated
    - Empty replies are retried
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        max_retries: int = 3,
        **client_kwargs: Any
    ):
        """Create the SDK client.

        Args:
            api_key: Google AI API key
            model: Model used when ``generate`` is not given one
            max_retries: Attempts made before an empty reply is accepted
            **client_kwargs: Passed through to ``genai.Client``
        """
        self._client = genai.Client(api_key=api_key, **client_kwargs)
        self._model = model
        self._max_retries = max(1, max_retries)

    @property
    def model(self) -> str:
        return self._model

    @property
    def client(self) -> genai.Client:
        """Underlying SDK client (shared with the speech synthesizer)."""
        return self._client

    def _convert_messages(
        self,
        messages: list[HistoryItem],
        attachment: Attachment | None = None
    ) -> tuple[str | None, list[types.Content]]:
        """Split history into ``(system_instruction, contents)``."""
        lifted = [m.content for m in messages if m.role == "system"]
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)],
            )
            for m in messages
            if m.role != "system"
        ]

        if attachment is not None and not attachment.is_empty:
            extra = _attachment_parts(attachment)
            if contents and contents[-1].role == "user":
                contents[-1].parts.extend(extra)
            else:
                contents.append(types.Content(role="user", parts=extra))

        return ("\n\n".join(lifted) or None), contents

    def _build_config(
        self,
        system: str | None,
        temperature: float,
        output_schema: type[BaseModel] | None,
        extra: dict[str, Any],
    ) -> types.GenerateContentConfig:
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system,
            safety_settings=SAFETY_SETTINGS,
            tool_config=_NO_TOOLS,
            **extra
        )
        if output_schema is not None:
            config.response_mime_type = "application/json"
            config.response_schema = output_schema
        return config

    def _parse_output(self, response: Any, text: str, output_schema: type[BaseModel]) -> BaseModel | None:
        """Validate structured output, preferring the SDK's parsed value."""
        parsed = getattr(response, "parsed", None)
        if isinstance(parsed, output_schema):
            return parsed
        if not text:
            return None
        try:
            return output_schema.model_validate_json(text)
        except ValidationError:
            return None

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
        """Generate one reply.

        ``system`` is merged ahead of any system turns found in ``messages``.
        Extra keyword arguments become ``GenerateContentConfig`` fields.
        """
        target = model or self._model
        lifted, contents = self._convert_messages(messages, attachment)
        instruction = "\n\n".join(part for part in (system, lifted) if part) or None
        config = self._build_config(instruction, temperature, output_schema, kwargs)

        result = GenerationResult(text="", model=target)
        for attempt in range(1, self._max_retries + 1):
            response = await self._client.aio.models.generate_content(
                model=target,
                contents=contents,
                config=config,
            )
            text = extract_text(response)
            output = self._parse_output(response, text, output_schema) if output_schema else None
            result = GenerationResult(text=text, output=output, model=target, usage=_usage_of(response))

            if text or output is not None or attempt == self._max_retries:
                break
            await asyncio.sleep(RETRY_BACKOFF_SECONDS * attempt)

        return result

    async def close(self) -> None:
        """Nothing to release; the SDK client holds no open handles."""
