"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import LogLevel
from ..errors import ChorusError
from ..registry import MODELS, CustomPersona, display_name
from ..responders import BattleResponder
from ..store import Author, Chat, ChatMessage
from .log import ConsoleLog
from .providers import build_chat_service, get_config, get_external_llm, get_store, require_llm

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="chorus",
    help="Multi-model companion chat: personas, fan-out comparisons and group conversations",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

CLI_AUTHOR = Author(uid="cli-user", name="You")


def _parse_personas(values: list[str] | None) -> list[CustomPersona]:
    """Parse ``Name=instructions`` options into custom personas."""
    personas = []
    for value in values or []:
        name, sep, instructions = value.partition("=")
        if not sep or not name.strip() or not instructions.strip():
            console.print(f"[red]Error: custom persona must look like 'Name=instructions', got {value!r}[/red]")
            raise typer.Exit(code=1)
        slug = "custom-" + "-".join(name.lower().split())
        personas.append(CustomPersona(id=slug, name=name.strip(), instructions=instructions.strip()))
    return personas


def _print_message(message: ChatMessage) -> None:
    """Render one stored message."""
    if message.role == "user":
        console.print(f"[bold yellow]{message.author.name}:[/bold yellow] {message.content}")
        return

    if message.responses:
        for response in message.responses:
            style = "red" if response.is_error else "green"
            console.print(Panel(
                response.content,
                title=display_name(response.model_id),
                border_style=style,
            ))
        return

    if message.is_summary:
        console.print(Panel(message.content, title=message.author.name, border_style="cyan"))
        return

    suffix = " [dim](audio)[/dim]" if message.audio_data_uri else ""
    console.print(f"[bold magenta]{message.author.name}:[/bold magenta] {message.content}{suffix}")


@app.command()
def models():
    """List the models and personas that can be addressed with /<id>."""
    table = Table(title="Models and personas")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Voice", style="dim")
    table.add_column("Description", style="dim")

    for model in MODELS:
        table.add_row(model.id, model.name, model.kind.value, model.voice or "-", model.description)

    console.print(table)


@app.command()
def new(
    title: str = typer.Option("New chat", "--title", "-t", help="Chat title"),
    model: str | None = typer.Option(None, "--model", "-m", help="Default model id"),
    member: list[str] | None = typer.Option(None, "--member", help="AI member id (repeat for a group chat)"),
    persona: list[str] | None = typer.Option(None, "--persona", help="Custom persona as 'Name=instructions'"),
    store_backend: str | None = typer.Option(None, "--store", help="Store backend (sqlite or memory)"),
):
    """Create a chat and print its id."""
    async def _new():
        store = get_store(store_backend)
        try:
            await store.connect()
            chat = Chat(
                title=title,
                members=[CLI_AUTHOR.uid],
                ai_members=member or [],
                custom_personas=_parse_personas(persona),
                default_model_id=model,
            )
            await store.save_chat(chat)
            console.print(f"[green]Created chat[/green] {chat.id}")
        finally:
            await store.disconnect()

    asyncio.run(_new())


async def _run_turn(
    chat: Chat | None,
    chat_id: str | None,
    message: str,
    store_backend: str | None,
    speech: bool,
    verbose: bool,
) -> None:
    config = get_config()
    llm = require_llm(config, console)
    external = get_external_llm(config, console)
    store = get_store(store_backend, config)

    try:
        await store.connect()
        if chat is not None:
            await store.save_chat(chat)
            chat_id = chat.id
            console.print(f"[dim]Chat {chat_id}[/dim]")

        service = build_chat_service(store, config, llm, external, speech=speech)
        if verbose:
            service.set_debug_callback(ConsoleLog(console, LogLevel.DEBUG))

        seen: set[str] = set()

        def on_change(messages: list[ChatMessage], _chat: Chat) -> None:
            for stored in messages:
                if stored.id not in seen:
                    seen.add(stored.id)
                    if stored.role == "assistant":
                        _print_message(stored)

        seen.update(m.id for m in await store.list_messages(chat_id))
        unsubscribe = store.listen(chat_id, on_change)

        def on_speaking(name: str | None) -> None:
            if name:
                console.print(f"[dim]{name} is typing...[/dim]")

        try:
            outcome = await service.send_message(chat_id, message, CLI_AUTHOR, on_speaking=on_speaking)
        finally:
            unsubscribe()

        if outcome.fanout is not None and outcome.fanout.dropped:
            console.print(f"[yellow]{outcome.fanout.dropped} requested models did not answer[/yellow]")
        if outcome.user_message.ai_reaction:
            console.print(f"[dim]Reaction: {outcome.user_message.ai_reaction}[/dim]")

    except ChorusError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        await store.disconnect()
        await llm.close()
        if external is not None:
            await external.close()


@app.command()
def send(
    message: str = typer.Argument(..., help="Message text, optionally starting with /<model-id>"),
    chat_id: str | None = typer.Option(None, "--chat", "-c", help="Existing chat id (default: new chat)"),
    store_backend: str | None = typer.Option(None, "--store", help="Store backend (sqlite or memory)"),
    speech: bool = typer.Option(True, "--speech/--no-speech", help="Synthesize persona audio"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Send one message and print the replies."""
    chat = None if chat_id else Chat(members=[CLI_AUTHOR.uid])
    asyncio.run(_run_turn(chat, chat_id, message, store_backend, speech, verbose))


@app.command()
def group(
    message: str = typer.Argument(..., help="Message for the group"),
    member: list[str] | None = typer.Option(None, "--member", "-m", help="AI member id (repeatable)"),
    persona: list[str] | None = typer.Option(None, "--persona", help="Custom persona as 'Name=instructions'"),
    store_backend: str | None = typer.Option("memory", "--store", help="Store backend (sqlite or memory)"),
    speech: bool = typer.Option(False, "--speech/--no-speech", help="Synthesize the dialogue"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Start a group chat and watch the personas answer one by one."""
    chat = Chat(
        title="Group chat",
        members=[CLI_AUTHOR.uid],
        ai_members=member or [],
        custom_personas=_parse_personas(persona),
    )
    if not chat.is_group:
        console.print("[red]Error: a group chat needs at least two members[/red]")
        raise typer.Exit(code=1)
    asyncio.run(_run_turn(chat, None, message, store_backend, speech, verbose))


@app.command()
def battle(
    prompt: str = typer.Argument(..., help="Prompt both models answer"),
    model_a: str = typer.Option("chat-gpt", "--a", help="First model id"),
    model_b: str = typer.Option("claude", "--b", help="Second model id"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Pit two models against each other on one prompt."""
    async def _battle():
        config = get_config()
        llm = require_llm(config, console)
        responder = BattleResponder(llm, config)
        if verbose:
            responder.set_debug_callback(ConsoleLog(console, LogLevel.DEBUG))

        try:
            result = await responder.run(prompt, model_a, model_b)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await llm.close()

        table = Table(show_header=True, expand=True)
        table.add_column(display_name(result.model_a_id), style="cyan", ratio=1)
        table.add_column(display_name(result.model_b_id), style="magenta", ratio=1)
        table.add_row(result.response_a, result.response_b)
        console.print(table)

    asyncio.run(_battle())


@app.command()
def history(
    chat_id: str | None = typer.Argument(None, help="Chat id (omit to list chats)"),
    store_backend: str | None = typer.Option(None, "--store", help="Store backend (sqlite or memory)"),
):
    """Show a chat's messages, or list chats."""
    async def _history():
        store = get_store(store_backend)
        try:
            await store.connect()
            if chat_id is None:
                table = Table(title="Chats")
                table.add_column("Id", style="cyan")
                table.add_column("Title")
                table.add_column("Default model", style="dim")
                table.add_column("Updated", style="dim")
                for chat in await store.list_chats():
                    table.add_row(
                        chat.id,
                        chat.title,
                        chat.default_model_id or "-",
                        chat.updated_at.strftime("%Y-%m-%d %H:%M"),
                    )
                console.print(table)
                return

            for message in await store.list_messages(chat_id):
                _print_message(message)
        except ChorusError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await store.disconnect()

    asyncio.run(_history())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
