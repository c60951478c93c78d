"""Provider factory functions for CLI.

Centralizes creation of the chat store, generation providers and the chat
service from environment variables. Hides configuration details from command
implementations.
"""

import typer
from rich.console import Console

from ..chat import ChatService
from ..config import RouterConfig
from ..llm import GenerationProvider, GeminiProvider, create_generation_provider
from ..responders import (
    FanOutRouter,
    GroupOrchestrator,
    LanguageDetector,
    MemorySynthesizer,
    PersonaResponder,
)
from ..speech import GeminiSpeechSynthesizer
from ..store import ChatStore, create_chat_store

# Default console for output
_console = Console()


def get_config() -> RouterConfig:
    """Router configuration from ``.env`` and the process environment."""
    return RouterConfig.from_env()


def get_store(backend: str | None = None, config: RouterConfig | None = None) -> ChatStore:
    """Create the chat store (``CHORUS_STORE`` / ``CHORUS_DB_PATH`` via the config)."""
    return create_chat_store(backend, config or get_config())


def require_llm(config: RouterConfig, console: Console | None = None) -> GenerationProvider:
    """Gemini provider for the configured key.

    Raises:
        SystemExit: If GEMINI_API_KEY is not set
    """
    con = console or _console
    if not config.gemini_api_key:
        con.print("[red]Error: GEMINI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return create_generation_provider("gemini", api_key=config.gemini_api_key, model=config.chat_model)


def get_external_llm(config: RouterConfig, console: Console | None = None) -> GenerationProvider | None:
    """Provider for the externally routed model, or None without a key."""
    con = console or _console
    if not config.grok_api_key:
        con.print("[yellow]Warning: GROK_API_KEY not set, Grok replies will be errors[/yellow]")
        return None
    return create_generation_provider(
        "xai",
        api_key=config.grok_api_key,
        model=config.grok_model,
        base_url=config.grok_base_url,
    )


def build_chat_service(
    store: ChatStore,
    config: RouterConfig,
    llm: GenerationProvider,
    external_llm: GenerationProvider | None = None,
    speech: bool = True,
) -> ChatService:
    """Wire the responders and the chat service together."""
    synthesizer = None
    if speech and isinstance(llm, GeminiProvider):
        synthesizer = GeminiSpeechSynthesizer(
            client=llm.client,
            model=config.tts_model,
            default_voice=config.default_voice,
        )

    language = LanguageDetector(llm, config)
    return ChatService(
        store=store,
        persona=PersonaResponder(llm, config, synthesizer),
        fanout=FanOutRouter(llm, config, external_llm, language),
        group=GroupOrchestrator(llm, config, synthesizer),
        memory=MemorySynthesizer(llm, config),
        config=config,
    )

