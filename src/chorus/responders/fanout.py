"""Multi-model fan-out router.

A fan-out turn asks several models the same question. The externally routed
model gets a real call to its own vendor; every other known model is
simulated in a single batched structured call. Both partitions run
concurrently and their failures become per-model ``Error:`` entries instead
of failing the turn.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

from ..config import RouterConfig
from ..errors import CredentialMissing, GenerationFailed, error_content
from ..llm import Attachment, GenerationProvider, HistoryItem, create_generation_provider
from ..prompts import render_prompt
from ..registry import (
    AGGREGATE_MODEL_ID,
    EXTERNAL_MODEL_ID,
    NON_QUERYABLE_IDS,
    ModelDescriptor,
    get_model,
)
from ..store.models import ModelResponse
from .base import Responder
from .language import LanguageDetector
from .models import BatchReply, FanOutResult


def language_directive(language: str | None) -> str:
    if not language:
        return ""
    return f"**IMPORTANT: Respond in {language}.**"


class FanOutRouter(Responder):
    """Queries several models for one prompt and optionally summarizes them.

    Hidden design decisions:
    - Which models are real calls and which are simulated in one batch
    - Concurrency of the two partitions (asyncio.gather)
    - Conversion of partition failures into per-model error entries
    - Ordering of results by the requested id order
    - When a smart summary is worth generating
    """

    component = "fanout"

    def __init__(
        self,
        llm: GenerationProvider,
        config: RouterConfig | None = None,
        external_llm: GenerationProvider | None = None,
        language_detector: LanguageDetector | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            llm: Provider used for the batched simulation and the summary
            config: Router configuration
            external_llm: Provider for the externally routed model; created from
                the configured key on first use when omitted
            language_detector: Detector shared with other responders
        """
        super().__init__(llm, config)
        self._external_llm = external_llm
        self._language = language_detector or LanguageDetector(llm, self._config)

    def set_debug_callback(self, callback: Any) -> None:
        super().set_debug_callback(callback)
        self._language.set_debug_callback(callback)

    def requested_ids(self, model_ids: Sequence[str]) -> list[str]:
        """Deduplicate the requested ids, keeping first occurrence order.

        Asking the aggregate model (or nothing at all) means asking the default
        set. The flagship persona is never queried as a standard model.
        """
        ids = list(dict.fromkeys(model_ids))
        if not ids or AGGREGATE_MODEL_ID in ids:
            ids = list(dict.fromkeys(self._config.fanout_default_ids))
        return [model_id for model_id in ids if model_id not in NON_QUERYABLE_IDS]

    def _external_provider(self) -> GenerationProvider:
        if self._external_llm is None:
            self._external_llm = create_generation_provider(
                "xai",
                api_key=self._config.grok_api_key,
                model=self._config.grok_model,
                base_url=self._config.grok_base_url,
            )
        return self._external_llm

    async def _ask_external(
        self,
        prompt: str,
        history: Sequence[HistoryItem],
        attachment: Attachment | None,
        language: str | None,
    ) -> list[ModelResponse]:
        name = get_model(EXTERNAL_MODEL_ID).name
        if not self._config.grok_api_key:
            content = error_content(str(CredentialMissing("GROK_API_KEY")))
        elif attachment is not None and not attachment.is_empty:
            content = error_content(f"{name} does not support file/URL analysis.")
        else:
            try:
                result = await self._external_provider().generate(
                    [*history, HistoryItem(role="user", content=prompt)],
                    system=f"Respond in {language}." if language else None,
                    model=self._config.grok_model,
                )
                content = result.text or error_content(f"Could not get a response from {name}.")
            except Exception as e:
                self._debug("error", f"{name} call failed: {e}")
                content = error_content(str(e) or f"Could not get a response from {name}.")
        return [ModelResponse(model_id=EXTERNAL_MODEL_ID, content=content)]

    async def _ask_batch(
        self,
        models: Sequence[ModelDescriptor],
        prompt: str,
        history: Sequence[HistoryItem],
        attachment: Attachment | None,
        language: str | None,
    ) -> list[ModelResponse]:
        context = ""
        if attachment is not None and attachment.file is not None:
            context = "\nAn external file has been provided. Analyze it to answer the prompt."
        elif attachment is not None and attachment.url:
            context = f"\nA URL ({attachment.url}) has been provided. Use its content as context."

        instruction = render_prompt(
            "fanout",
            language_directive=language_directive(language),
            prompt=prompt,
            context=context,
            personas="\n".join(f"- {m.name} (id: {m.id}): {m.persona_prompt}" for m in models),
        )

        try:
            result = await self._llm.generate(
                [*history, HistoryItem(role="user", content=instruction)],
                model=self._config.chat_model,
                output_schema=BatchReply,
                attachment=attachment,
            )
            if result.output is None:
                raise GenerationFailed("Batch simulation returned no structured output.")
        except Exception as e:
            self._debug("error", f"Batch call for {len(models)} models failed: {e}")
            return [
                ModelResponse(
                    model_id=m.id,
                    content=error_content(f"Could not get a response from {m.name}."),
                )
                for m in models
            ]

        wanted = {m.id for m in models}
        entries = [
            ModelResponse(model_id=entry.model_id, content=entry.content)
            for entry in result.output.responses
            if entry.model_id in wanted
        ]
        ignored = len(result.output.responses) - len(entries)
        if ignored:
            self._debug("warning", f"Ignored {ignored} batch entries for ids that were not requested")
        return entries

    async def summarize(
        self,
        prompt: str,
        responses: Sequence[ModelResponse],
        language: str | None = None,
    ) -> str | None:
        """Synthesize successful responses into one answer; None on failure."""
        successful = [r for r in responses if not r.is_error]
        if len(successful) < 2:
            return None

        instruction = render_prompt(
            "summary",
            prompt=prompt,
            language_directive=language_directive(language),
            responses="\n\n".join(
                f"Response from {get_model(r.model_id).name if get_model(r.model_id) else r.model_id}:\n{r.content}"
                for r in successful
            ),
        )
        try:
            result = await self._llm.generate(
                [HistoryItem(role="user", content=instruction)],
                model=self._config.chat_model,
            )
        except Exception as e:
            self._debug("warning", f"Summary generation failed: {e}")
            return None
        return result.text.strip() or None

    async def route(
        self,
        prompt: str,
        model_ids: Sequence[str],
        history: Sequence[HistoryItem] = (),
        attachment: Attachment | None = None,
    ) -> FanOutResult:
        """Fan a prompt out to the requested models.

        Args:
            prompt: User message with any /command removed
            model_ids: Requested ids, in display order
            history: Conversation view shared by the queried models
            attachment: Optional file/URL context

        Returns:
            FanOutResult whose responses follow the requested order, one per id
            that produced data. Unknown ids yield a "not found" error entry.
        """
        requested = self.requested_ids(model_ids)
        if not requested:
            return FanOutResult()

        language = await self._language.detect(prompt)

        unknown = [model_id for model_id in requested if get_model(model_id) is None]
        batch = [
            get_model(model_id) for model_id in requested
            if model_id != EXTERNAL_MODEL_ID and model_id not in unknown
        ]

        tasks = []
        if EXTERNAL_MODEL_ID in requested:
            tasks.append(self._ask_external(prompt, history, attachment, language))
        if batch:
            tasks.append(self._ask_batch(batch, prompt, history, attachment, language))

        self._debug(
            "info",
            f"Fan-out to {', '.join(requested)} ({len(tasks)} concurrent calls, language={language})"
        )
        partitions = await asyncio.gather(*tasks, return_exceptions=True)

        by_id: dict[str, ModelResponse] = {}
        for partition in partitions:
            if isinstance(partition, BaseException):
                self._debug("error", f"Fan-out partition failed: {partition}")
                continue
            for response in partition:
                by_id.setdefault(response.model_id, response)
        for model_id in unknown:
            by_id[model_id] = ModelResponse(
                model_id=model_id,
                content=error_content(f"Model '{model_id}' was not found."),
            )

        responses = [by_id[model_id] for model_id in requested if model_id in by_id]
        dropped = len(requested) - len(responses)
        if dropped:
            self._debug("warning", f"{dropped} requested models returned no response")

        summary = await self.summarize(prompt, responses, language) if responses else None

        return FanOutResult(
            responses=responses,
            summary=summary,
            detected_language=language,
            dropped=dropped,
        )
