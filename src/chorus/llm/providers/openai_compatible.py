import json
from typing import Any

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from ...errors import UnsupportedInputCombination
from ..base import GenerationProvider
from ..models import Attachment, GenerationResult, HistoryItem

XAI_BASE_URL = "https://api.x.ai/v1"


def _validate_json(text: str, schema: type[BaseModel]) -> BaseModel | None:
    if not text:
        return None
    try:
        return schema.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError):
        return None


class OpenAICompatibleProvider(GenerationProvider):
    """Chat completions against any OpenAI-style endpoint.

    The externally routed model (xAI Grok) is reached this way: bearer-token
    auth and ``POST {base_url}/chat/completions``. Text only; attachments are
    refused. Structured output asks for a JSON object and validates it locally.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "grok-3",
        base_url: str | None = XAI_BASE_URL,
        **client_kwargs: Any
    ):
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, **client_kwargs)
        self._model = model

    @property
    def model(self) -> str:
        return self._model

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
        """Run one chat completion.

        Raises:
            UnsupportedInputCombination: If a non-empty attachment is given
        """
        if attachment is not None and not attachment.is_empty:
            raise UnsupportedInputCombination(f"{self._model} does not support file/URL analysis.")

        target = model or self._model
        payload = [{"role": "system", "content": system}] if system else []
        payload += [{"role": m.role, "content": m.content} for m in messages]
        if output_schema is not None:
            kwargs.setdefault("response_format", {"type": "json_object"})

        completion = await self._client.chat.completions.create(
            model=target,
            messages=payload,
            temperature=temperature,
            **kwargs
        )

        text = completion.choices[0].message.content or ""
        usage = completion.usage.model_dump(
            include={"prompt_tokens", "completion_tokens", "total_tokens"}
        ) if completion.usage else None

        return GenerationResult(
            text=text,
            output=_validate_json(text, output_schema) if output_schema else None,
            model=completion.model or target,
            usage=usage,
        )

    async def close(self) -> None:
        await self._client.close()
