"""CLI commands for medibot.

Provides subcommands for asking questions and inspecting the intent catalog.

Commands:
    medibot ask QUERY       - Answer a single question
    medibot match QUERY     - Show intent scores for a query
    medibot validate PATH   - Validate a catalog file
    medibot intents         - List intents in the active catalog
    medibot history         - Show or clear chat history
    medibot chat            - Interactive chat (default)
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .config import AppConfig
from .core.errors import ChatHistoryError, IntentLoadError
from .core.history import ChatHistory
from .core.intent import ErrorKind, MatchThresholds, load_catalog_file
from .core.metrics import ServiceMetrics
from .core.service import ChatbotService, create_service

console = Console()

QUIT_WORDS = {"quit", "exit", "bye"}


def load_config(args: argparse.Namespace) -> AppConfig:
    """Load config for the project path, applying command-line overrides."""
    config = AppConfig.load(Path(args.project_path).resolve())
    updates = {}
    if getattr(args, "catalog", None):
        updates["catalog_path"] = Path(args.catalog)
    if getattr(args, "history_file", None):
        updates["history_path"] = Path(args.history_file)
    if updates:
        config = config.model_copy(update=updates)
    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    return config


def build_service(args: argparse.Namespace, metrics: ServiceMetrics | None = None) -> ChatbotService:
    """Create the chatbot service described by config and arguments."""
    config = load_config(args)
    return create_service(
        catalog_path=config.catalog_path,
        history_path=config.history_path,
        max_history=config.max_history,
        metrics=metrics,
    )


def ask_query(args: argparse.Namespace) -> int:
    """Answer a single query.

    Args:
        args: Parsed arguments (query, json)

    Returns:
        Exit code (1 if the reply carries an internal error)
    """
    service = build_service(args)
    result = service.generate_response(args.query)

    if args.json:
        console.print_json(data=result.to_dict())
    else:
        console.print(result.answer)
        if result.intent:
            console.print(f"[dim]intent: {result.intent}[/dim]")
        elif result.error:
            console.print(f"[yellow]{result.error.value}[/yellow]")

    if result.error in (ErrorKind.INTERNAL_ERROR, ErrorKind.INTENT_MATCH_ERROR):
        return 1
    return 0


def match_query(args: argparse.Namespace) -> int:
    """Show how each intent scores against a query.

    Args:
        args: Parsed arguments (query, limit)

    Returns:
        Exit code (0 for success)
    """
    service = build_service(args)
    ranked = service.resolver.rank(args.query)

    if not ranked:
        console.print("[yellow]Empty query.[/yellow]")
        return 0

    table = Table(title=f"Intent scores for {args.query!r}")
    table.add_column("Intent", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Accepted", justify="center")

    for result in ranked[: args.limit]:
        accepted = "[green]yes[/green]" if result.is_accepted() else "[dim]no[/dim]"
        table.add_row(result.tag or "-", f"{result.score:.4f}", accepted)

    console.print(table)

    intent = service.find_matching_intent(args.query)
    if intent is not None:
        console.print(f"[green]✓[/green] Resolved to [bold]{intent.tag}[/bold]")
    else:
        console.print(f"[yellow]No match[/yellow] (threshold {MatchThresholds.ACCEPT})")
    return 0


def validate_catalog(args: argparse.Namespace) -> int:
    """Validate a catalog file.

    Args:
        args: Parsed arguments (path)

    Returns:
        Exit code (0 if valid, 1 otherwise)
    """
    try:
        catalog = load_catalog_file(args.path)
    except IntentLoadError as e:
        console.print(f"[red]Invalid catalog:[/red] {e}")
        return 1

    patterns = sum(len(i.patterns) for i in catalog)
    responses = sum(len(i.responses) for i in catalog)
    console.print(
        f"[green]✓[/green] {args.path}: {len(catalog)} intents, "
        f"{patterns} patterns, {responses} responses"
    )
    return 0


def list_intents(args: argparse.Namespace) -> int:
    """List the intents in the active catalog.

    Args:
        args: Parsed arguments

    Returns:
        Exit code (0 for success)
    """
    service = build_service(args)

    table = Table(title="Intents")
    table.add_column("Tag", style="cyan")
    table.add_column("Patterns", justify="right")
    table.add_column("Responses", justify="right")
    table.add_column("Example", style="dim")

    for intent in service.intents:
        table.add_row(
            intent.tag,
            str(len(intent.patterns)),
            str(len(intent.responses)),
            intent.patterns[0] if intent.patterns else "-",
        )

    console.print(table)
    return 0


def show_history(args: argparse.Namespace) -> int:
    """Show or clear stored chat history.

    Args:
        args: Parsed arguments (limit, clear)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    config = load_config(args)
    history = ChatHistory(config.history_path, config.max_history)

    try:
        if args.clear:
            history.clear()
            console.print("[green]✓[/green] Chat history cleared")
            return 0
        messages = history.recent(args.limit or 20)
    except ChatHistoryError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if not messages:
        console.print("[dim]No chat history yet.[/dim]")
        return 0

    table = Table(title="Chat History")
    table.add_column("Time", style="dim")
    table.add_column("From", style="cyan")
    table.add_column("Message")
    table.add_column("Intent", style="dim")

    for msg in messages:
        text = msg.text[:60] + "..." if len(msg.text) > 60 else msg.text
        table.add_row(
            msg.timestamp.strftime("%Y-%m-%d %H:%M"),
            msg.sender,
            text.replace("\n", " "),
            msg.intent or "-",
        )

    console.print(table)
    return 0


def chat_loop(args: argparse.Namespace) -> int:
    """Run an interactive chat session.

    Args:
        args: Parsed arguments

    Returns:
        Exit code (0 for success)
    """
    metrics = ServiceMetrics()
    service = build_service(args, metrics=metrics)

    console.print("[bold]medibot[/bold] - ask a first-aid question ('quit' to leave)")
    while True:
        try:
            query = console.input("[bold cyan]you>[/bold cyan] ")
        except EOFError:
            break
        if query.strip().lower() in QUIT_WORDS:
            break

        result = service.chat(query)
        style = "green" if result.ok else "yellow"
        console.print(f"[{style}]bot>[/{style}] {result.answer}")

    summary = metrics.summary()
    if summary["requests"]:
        console.print(
            f"[dim]{summary['requests']} replies, "
            f"mean {summary['mean_ms']:.1f} ms, max {summary['max_ms']:.1f} ms[/dim]"
        )
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="medibot",
        description="medibot: first-aid intent matching chatbot",
    )
    parser.add_argument(
        "--project",
        "-p",
        dest="project_path",
        default=".",
        help="Directory holding .medibot/config.yaml (default: current directory)",
    )
    parser.add_argument(
        "--catalog",
        "-c",
        help="Intent catalog file (JSON or YAML)",
    )
    parser.add_argument(
        "--history-file",
        dest="history_file",
        help="Chat history JSON file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # =========================================================================
    # ask command
    # =========================================================================
    ask_parser = subparsers.add_parser("ask", help="Answer a single question")
    ask_parser.add_argument("query", help="Question text")
    ask_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the {answer, intent, error} result as JSON",
    )
    ask_parser.set_defaults(func=ask_query)

    # =========================================================================
    # match command
    # =========================================================================
    match_parser = subparsers.add_parser("match", help="Show intent scores for a query")
    match_parser.add_argument("query", help="Question text")
    match_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=5,
        help="Number of intents to show (default: 5)",
    )
    match_parser.set_defaults(func=match_query)

    # =========================================================================
    # validate command
    # =========================================================================
    validate_parser = subparsers.add_parser("validate", help="Validate a catalog file")
    validate_parser.add_argument("path", help="Catalog file to check")
    validate_parser.set_defaults(func=validate_catalog)

    # =========================================================================
    # intents command
    # =========================================================================
    intents_parser = subparsers.add_parser("intents", help="List catalog intents")
    intents_parser.set_defaults(func=list_intents)

    # =========================================================================
    # history command
    # =========================================================================
    history_parser = subparsers.add_parser("history", help="Show chat history")
    history_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=20,
        help="Maximum messages to show (default: 20)",
    )
    history_parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete stored chat history",
    )
    history_parser.set_defaults(func=show_history)

    # =========================================================================
    # chat command
    # =========================================================================
    chat_parser = subparsers.add_parser("chat", help="Interactive chat (default)")
    chat_parser.set_defaults(func=chat_loop)

    return parser


def run_cli(args: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # No subcommand = interactive chat
    func = getattr(parsed, "func", chat_loop)
    try:
        return func(parsed)
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled.[/dim]")
        return 130
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


__all__ = [
    "ask_query",
    "build_service",
    "chat_loop",
    "create_parser",
    "list_intents",
    "load_config",
    "match_query",
    "run_cli",
    "show_history",
    "validate_catalog",
]
