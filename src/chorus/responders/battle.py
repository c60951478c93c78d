"""Battle mode: two models answer the same prompt side by side."""

import asyncio

from ..llm import HistoryItem
from ..registry import get_model
from .base import Responder
from .models import BattleResult


class BattleResponder(Responder):
    """Runs one prompt against two registry models concurrently."""

    component = "battle"

    async def run(self, prompt: str, model_a_id: str, model_b_id: str) -> BattleResult:
        """Ask both models and return their answers.

        Raises:
            ValueError: If either id is not in the registry
        """
        model_a = get_model(model_a_id)
        model_b = get_model(model_b_id)
        if model_a is None or model_b is None:
            raise ValueError("One or both selected models are invalid.")

        messages = [HistoryItem(role="user", content=prompt)]
        result_a, result_b = await asyncio.gather(
            self._llm.generate(messages, system=model_a.persona_prompt, model=self._config.chat_model),
            self._llm.generate(messages, system=model_b.persona_prompt, model=self._config.chat_model),
        )
        self._debug("info", f"Battle {model_a.id} vs {model_b.id} finished")

        return BattleResult(
            model_a_id=model_a.id,
            model_b_id=model_b.id,
            response_a=result_a.text,
            response_b=result_b.text,
        )
