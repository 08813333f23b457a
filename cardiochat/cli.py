"""
CardioChat CLI

Command-line interface for CardioChat conversations.

Usage:
    cardiochat chat                          # Interactive REPL on the active conversation
    cardiochat ask "I have chest pain"       # Single message to the active conversation
    cardiochat conversations                 # List conversations
    cardiochat show 2                        # Print one transcript
    cardiochat delete 2                      # Delete a conversation (asks first)
    cardiochat serve                         # Run the HTTP API
"""

import asyncio
import logging
import subprocess
import sys

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from cardiochat import __version__
from cardiochat.config import get_settings
from cardiochat.conversations.models import Conversation, Sender, SessionState
from cardiochat.errors import CardioChatError
from cardiochat.pipeline.orchestrator import ChatOrchestrator, TurnOutcome, create_orchestrator

console = Console()

EXIT_WORDS = {"exit", "quit", "/exit", "/quit", ":q"}

CHAT_HELP = (
    "Commands: [bold]/new[/bold], [bold]/list[/bold], [bold]/switch ID[/bold], "
    "[bold]/delete ID[/bold], [bold]/show[/bold], [bold]/exit[/bold]"
)


def configure_cli_logging() -> None:
    for logger_name in ("cardiochat", "httpx"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)


def _should_exit_chat(text: str) -> bool:
    return text.strip().lower() in EXIT_WORDS


def _parse_command(text: str) -> tuple[str, list[str]] | None:
    """Split a `/command arg ...` line; None for ordinary messages."""
    stripped = text.strip()
    if not stripped.startswith("/"):
        return None
    parts = stripped[1:].split()
    if not parts:
        return "", []
    return parts[0].lower(), parts[1:]


def _parse_id(args: list[str]) -> int:
    if len(args) != 1 or not args[0].isdigit():
        raise click.BadParameter("expected a single numeric conversation id")
    return int(args[0])


def _conversation_table(state: SessionState, sending: frozenset[int] = frozenset()) -> Table:
    table = Table(title="Conversations")
    table.add_column("", width=1)
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Messages", justify="right")
    for conversation in state.conversations:
        marker = "*" if conversation.id == state.active_conversation_id else ""
        title = conversation.title
        if conversation.id in sending:
            title = f"{title} [dim](sending)[/dim]"
        table.add_row(marker, str(conversation.id), title, str(len(conversation.messages)))
    return table


def _print_conversation(conversation: Conversation) -> None:
    console.print(f"[bold]#{conversation.id} {conversation.title}[/bold]")
    if not conversation.messages:
        console.print("[dim]No messages yet.[/dim]")
    for message in conversation.messages:
        if message.sender == Sender.USER:
            console.print(f"[bold cyan]You:[/bold cyan] {message.text}")
        else:
            console.print("[bold green]Assistant:[/bold green]")
            console.print(Markdown(message.text))


def _print_outcome(outcome: TurnOutcome) -> None:
    if outcome.reply is None:
        return
    style = "red" if outcome.status == "error" else "green"
    console.print(Panel(Markdown(outcome.reply.text), border_style=style))


def _require_active(orchestrator: ChatOrchestrator) -> int:
    """Active conversation id, creating one if the session is empty."""
    active = orchestrator.state.active
    if active is None:
        active = orchestrator.create_conversation()
        console.print(f"[green]Started conversation #{active.id}[/green]")
    return active.id


def _handle_command(orchestrator: ChatOrchestrator, name: str, args: list[str]) -> None:
    if name == "new":
        conversation = orchestrator.create_conversation()
        console.print(f"[green]Started conversation #{conversation.id}[/green]")
    elif name == "list":
        console.print(_conversation_table(orchestrator.state, orchestrator.sending))
    elif name == "switch":
        orchestrator.select_conversation(_parse_id(args))
        _print_conversation(orchestrator.state.active)
    elif name == "show":
        active = orchestrator.state.active
        if active is None:
            console.print("[yellow]No active conversation.[/yellow]")
        else:
            _print_conversation(active)
    elif name == "delete":
        conversation_id = _parse_id(args)
        conversation = orchestrator.get_conversation(conversation_id)
        if click.confirm(f"Delete conversation #{conversation.id} ({conversation.title})?"):
            orchestrator.delete_conversation(conversation_id)
            console.print(f"[yellow]Deleted conversation #{conversation_id}[/yellow]")
    elif name == "help":
        console.print(CHAT_HELP)
    else:
        console.print(f"[red]Unknown command: /{name}[/red]")
        console.print(CHAT_HELP)


def _load_orchestrator() -> ChatOrchestrator:
    try:
        return create_orchestrator(get_settings())
    except Exception as e:
        raise click.ClickException(f"Failed to initialize: {e}") from e


def _close_orchestrator(orchestrator: ChatOrchestrator) -> None:
    asyncio.run(orchestrator.aclose())


# ============================================================================
# CLI Commands
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="CardioChat")
def cli():
    """CardioChat - cardiology assistant chat sessions."""
    configure_cli_logging()


@cli.command()
def chat():
    """Interactive REPL mode for conversations."""
    console.print(
        Panel.fit(
            "[bold green]CardioChat Interactive Mode[/bold green]\n"
            f"Describe your symptoms. {CHAT_HELP}",
            border_style="green",
        )
    )
    orchestrator = _load_orchestrator()

    async def run_chat():
        try:
            active = orchestrator.state.active
            if active is not None and active.messages:
                _print_conversation(active)
            while True:
                try:
                    text = console.input("[bold cyan]You:[/bold cyan] ")
                except (EOFError, KeyboardInterrupt):
                    console.print("\n[yellow]Goodbye![/yellow]")
                    break

                if not text.strip():
                    continue
                if _should_exit_chat(text):
                    console.print("\n[yellow]Goodbye![/yellow]")
                    break

                try:
                    command = _parse_command(text)
                    if command is not None:
                        _handle_command(orchestrator, *command)
                        continue

                    conversation_id = _require_active(orchestrator)
                    with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                        outcome = await orchestrator.send(conversation_id, text)
                    _print_outcome(outcome)
                except (CardioChatError, click.BadParameter) as e:
                    console.print(f"[red]Error: {e}[/red]")
        finally:
            await orchestrator.aclose()

    asyncio.run(run_chat())


@cli.command()
@click.argument("text")
@click.option("--conversation", "conversation_id", type=int, help="Conversation id (default: active).")
def ask(text: str, conversation_id: int | None):
    """Send a single message and print the reply."""
    orchestrator = _load_orchestrator()

    async def run_ask() -> TurnOutcome:
        try:
            target = conversation_id
            if target is None:
                target = _require_active(orchestrator)
            else:
                orchestrator.get_conversation(target)
            with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                return await orchestrator.send(target, text)
        finally:
            await orchestrator.aclose()

    try:
        outcome = asyncio.run(run_ask())
    except CardioChatError as e:
        raise click.ClickException(str(e)) from e

    if not outcome.accepted:
        raise click.ClickException("Message is empty; nothing was sent.")
    _print_outcome(outcome)
    if outcome.status == "error":
        sys.exit(1)


@cli.command()
def conversations():
    """List saved conversations."""
    orchestrator = _load_orchestrator()
    try:
        console.print(_conversation_table(orchestrator.state))
    finally:
        _close_orchestrator(orchestrator)


@cli.command()
@click.argument("conversation_id", type=int)
def show(conversation_id: int):
    """Print one conversation transcript."""
    orchestrator = _load_orchestrator()
    try:
        _print_conversation(orchestrator.get_conversation(conversation_id))
    except CardioChatError as e:
        raise click.ClickException(str(e)) from e
    finally:
        _close_orchestrator(orchestrator)


@cli.command()
@click.argument("conversation_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
def delete(conversation_id: int, yes: bool):
    """Delete a conversation."""
    orchestrator = _load_orchestrator()
    try:
        conversation = orchestrator.get_conversation(conversation_id)
        if not yes and not click.confirm(
            f"Delete conversation #{conversation.id} ({conversation.title})?"
        ):
            console.print("[yellow]Cancelled.[/yellow]")
            return
        state = orchestrator.delete_conversation(conversation_id)
    except CardioChatError as e:
        raise click.ClickException(str(e)) from e
    finally:
        _close_orchestrator(orchestrator)
    console.print(f"[green]✓ Deleted conversation #{conversation_id}[/green]")
    if state.active_conversation_id is not None:
        console.print(f"Active conversation: #{state.active_conversation_id}")


@cli.command()
@click.option("--host", default=None, help="Bind host (default: API_HOST).")
@click.option("--port", default=None, type=int, help="Bind port (default: API_PORT).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API server."""
    settings = get_settings()
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "cardiochat.api.main:app",
        "--host",
        host or settings.api_host,
        "--port",
        str(port or settings.api_port),
    ]
    if reload:
        cmd.append("--reload")
    console.print(f"[cyan]Starting API:[/cyan] {' '.join(cmd)}")
    process = subprocess.Popen(cmd)
    try:
        process.wait()
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopping API server...[/yellow]")
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()


def main():
    cli()


if __name__ == "__main__":
    main()
