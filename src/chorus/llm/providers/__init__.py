from .gemini import GeminiProvider
from .openai_compatible import XAI_BASE_URL, OpenAICompatibleProvider

__all__ = ["GeminiProvider", "OpenAICompatibleProvider", "XAI_BASE_URL"]
