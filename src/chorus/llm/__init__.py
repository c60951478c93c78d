from .base import GenerationProvider
from .factory import create_generation_provider
from .models import Attachment, FileAttachment, GenerationResult, HistoryItem
from .providers import GeminiProvider, OpenAICompatibleProvider

__all__ = [
    "GenerationProvider",
    "create_generation_provider",
    "Attachment",
    "FileAttachment",
    "GenerationResult",
    "HistoryItem",
    "GeminiProvider",
    "OpenAICompatibleProvider",
]
