"""CLI entry point for planboard."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from planboard.config import PlanboardConfig, load_config
from planboard.config.loader import DEFAULT_CONFIG_TEMPLATE
from planboard.generation import GenerationOrchestrator, GenerationResponse
from planboard.llm import LLMError, Turn
from planboard.logging_config import setup_logging
from planboard.publisher import PublishError
from planboard.session import UsageSnapshot

app = typer.Typer(
    name="planboard",
    help="Chat your way to an xTiles project board.",
)

config_app = typer.Typer(help="Manage planboard configuration.")
app.add_typer(config_app, name="config")

GREETING = "Hi! I'm your assistant. What would you like to create, plan or organize today?"
DONE_FALLBACK = "Done. Check the created page."

# Global state
_config: PlanboardConfig | None = None


def _get_config() -> PlanboardConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to planboard.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    setup_logging(_config.log_level, _config.log_format)


def _build_orchestrator(cfg: PlanboardConfig, mode: str | None) -> GenerationOrchestrator:
    if mode is not None:
        cfg = cfg.model_copy(
            update={"session": cfg.session.model_copy(update={"mode": mode})}
        )
    try:
        return GenerationOrchestrator.from_config(cfg)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _usage_table(usage: UsageSnapshot) -> Table:
    table = Table(title="Token usage (session)")
    table.add_column("Input", justify="right", style="cyan")
    table.add_column("Output", justify="right", style="green")
    table.add_column("Cached", justify="right", style="yellow")
    table.add_row(
        f"{usage.input_tokens:,}", f"{usage.output_tokens:,}", f"{usage.cached_tokens:,}"
    )
    return table


def _reply_text(response: GenerationResponse) -> str:
    """What the chat shows for a turn: the project link, else the text."""
    if response.project_url:
        return f"[Open project]({response.project_url})"
    return response.text.strip() or DONE_FALLBACK


def _error_text(error: Exception) -> str:
    status = getattr(error, "status_code", None)
    detail = (f"HTTP {status}: " if status else "") + str(error)
    return f"Sorry, something went wrong.\n\n**Details:** {detail}"


def _show_sources(response: GenerationResponse) -> None:
    if not response.sources:
        return
    rprint("[dim]Sources:[/dim]")
    for src in response.sources:
        rprint(f"  - {src.title or src.uri} [dim]{src.uri}[/dim]")


async def _chat_loop(orchestrator: GenerationOrchestrator) -> None:
    transcript: list[Turn] = [Turn(role="assistant", content=GREETING)]
    rprint(Markdown(GREETING))
    rprint(
        f"[dim]Mode: {orchestrator.mode.value}. "
        "Commands: /new, /mode <stateful|full_history>, /usage, /quit[/dim]"
    )

    while True:
        try:
            text = typer.prompt("You")
        except typer.Abort:
            break
        text = text.strip()
        if not text:
            continue

        if text in ("/quit", "/exit"):
            break
        if text == "/usage":
            rprint(_usage_table(orchestrator.get_usage_snapshot()))
            continue
        if text == "/new":
            orchestrator.reset_session()
            transcript = [Turn(role="assistant", content=GREETING)]
            rprint("[green]New conversation started.[/green]")
            continue
        if text.startswith("/mode"):
            _, _, value = text.partition(" ")
            try:
                orchestrator.set_mode(value.strip())
            except ValueError:
                rprint(f"[red]Unknown mode:[/red] {value.strip() or '(none)'}")
                continue
            rprint(f"[green]Mode:[/green] {orchestrator.mode.value}")
            continue

        history = list(transcript)
        transcript.append(Turn(role="user", content=text))
        try:
            response = await orchestrator.send(text, transcript=history)
        except (LLMError, PublishError) as e:
            reply = _error_text(e)
            transcript.append(Turn(role="assistant", content=reply))
            rprint(Markdown(reply))
            continue

        reply = _reply_text(response)
        transcript.append(Turn(role="assistant", content=reply))
        rprint(Markdown(reply))
        _show_sources(response)
        rprint(_usage_table(orchestrator.get_usage_snapshot()))


@app.command()
def chat(
    mode: Annotated[
        str | None,
        typer.Option("--mode", "-m", help="Generation mode: stateful or full_history"),
    ] = None,
) -> None:
    """Start an interactive planning chat."""
    orchestrator = _build_orchestrator(_get_config(), mode)
    asyncio.run(_chat_loop(orchestrator))


@app.command()
def send(
    text: str = typer.Argument(..., help="What to plan"),
    project_id: Annotated[
        str | None, typer.Option("--project-id", "-p", help="Add to an existing project")
    ] = None,
    mode: Annotated[
        str | None,
        typer.Option("--mode", "-m", help="Generation mode: stateful or full_history"),
    ] = None,
    show_markdown: Annotated[
        bool, typer.Option("--show-markdown", help="Print the generated Markdown")
    ] = False,
) -> None:
    """Generate and publish a board for a single request."""
    if not text.strip():
        rprint("[red]Error:[/red] request text is empty")
        raise typer.Exit(1)

    orchestrator = _build_orchestrator(_get_config(), mode)
    try:
        response = asyncio.run(orchestrator.send(text, project_id=project_id))
    except PublishError as e:
        if show_markdown and e.markdown:
            rprint(Syntax(e.markdown, "markdown", theme="monokai"))
        rprint(f"[red]Publish failed:[/red] {_error_text(e)}")
        raise typer.Exit(1)
    except LLMError as e:
        rprint(f"[red]Generation failed:[/red] {e}")
        raise typer.Exit(1)

    if show_markdown and not response.empty:
        rprint(Syntax(response.text, "markdown", theme="monokai"))
    if response.empty:
        rprint(f"[yellow]{response.text}[/yellow]")

    rprint(Panel(
        f"[dim]Project URL:[/dim]  {response.project_url or '-'}\n"
        f"[dim]Project ID:[/dim]   {response.project_id or '-'}\n"
        f"[dim]Mode:[/dim]         {response.mode.value}\n"
        f"[dim]Tokens:[/dim]       in {response.input_tokens:,} / "
        f"out {response.output_tokens:,} / cached {response.cached_tokens:,}",
        title="Board Published" if response.project_url else "Generation Complete",
        border_style="green",
    ))
    _show_sources(response)


@app.command()
def proxy(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Bind port")] = None,
) -> None:
    """Run the CORS proxy in front of the publish endpoint."""
    import uvicorn

    from planboard.proxy import create_app

    cfg = _get_config().proxy
    rprint(f"[bold]Proxying[/bold] -> {cfg.upstream}")
    uvicorn.run(create_app(cfg.upstream), host=host or cfg.host, port=port or cfg.port)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default planboard.yaml in current directory."""
    target = Path("planboard.yaml")
    if target.exists() and not force:
        rprint("[yellow]planboard.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
