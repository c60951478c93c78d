from typing import Any

from .base import GenerationProvider
from .providers import XAI_BASE_URL, GeminiProvider, OpenAICompatibleProvider

# name -> (provider class, required keys, defaults)
_REGISTRY: dict[str, tuple[type[GenerationProvider], tuple[str, ...], dict[str, Any]]] = {
    "gemini": (GeminiProvider, ("api_key",), {}),
    "xai": (OpenAICompatibleProvider, ("api_key",), {"base_url": XAI_BASE_URL}),
    "openai": (OpenAICompatibleProvider, ("api_key", "model"), {"base_url": None}),
}
_ALIASES = {"grok": "xai"}


def create_generation_provider(provider: str, **config: Any) -> GenerationProvider:
    """Build a provider by vendor name.

    Recognized names are ``gemini``, ``xai`` (alias ``grok``) and ``openai``,
    case-insensitively. Every vendor needs ``api_key``; the generic ``openai``
    entry also needs ``model``. Remaining keys go to the provider constructor.

    Raises:
        ValueError: Unknown vendor name
        TypeError: A required key is missing

    Examples:
        >>> provider = create_generation_provider("gemini", api_key="...")
        >>> provider = create_generation_provider("grok", api_key="xai-...")
    """
    key = provider.lower()
    key = _ALIASES.get(key, key)
    if key not in _REGISTRY:
        supported = ", ".join(f"'{name}'" for name in _REGISTRY)
        raise ValueError(f"Unsupported provider: {provider}. Supported providers: {supported}")

    provider_class, required, defaults = _REGISTRY[key]
    for field in required:
        if field not in config:
            raise TypeError(f"{key} provider requires '{field}' in config")
    return provider_class(**{**defaults, **config})
