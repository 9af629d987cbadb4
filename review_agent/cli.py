"""
CLI interface using Typer with Rich integration.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional
import typer
from rich.console import Console
from loguru import logger

from .core import ReviewAgent, ToolRunner
from .config.settings import Settings
from .errors import AllModelsFailedError, ReviewAgentError
from .ui.console import ReviewConsole


# Create Typer app
app = typer.Typer(
    name="review-agent",
    help="AI-powered code review for your pending Git changes",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=False  # Allow default command
)

# Global console for error handling
console = Console()


def setup_logging(log_level: str = "WARNING", log_file: Optional[Path] = None):
    """Setup logging configuration."""
    logger.remove()  # Remove default handler

    # Console logging with colors
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True
    )

    # File logging
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 MB",
            retention="7 days"
        )


def load_settings(config_file: Optional[Path]) -> Settings:
    if config_file:
        return Settings.from_file(config_file)
    return Settings()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to configuration file"
    ),
    models: Optional[List[str]] = typer.Option(
        None, "--model", "-m",
        help="Model to try, in order (repeatable; overrides configured models)"
    ),
    retries: Optional[int] = typer.Option(
        None, "--retries",
        min=1, max=10,
        help="Attempts per model, with exponential backoff between them"
    ),
    switch_delay: Optional[float] = typer.Option(
        None, "--switch-delay",
        min=0,
        help="Seconds to wait before switching models after a non-overload failure"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d",
        help="Enable debug logging (includes verbose)"
    ),
    version: bool = typer.Option(
        False, "--version",
        help="Show version information"
    )
):
    """
    Review the changes in the current directory with an AI model.

    [bold blue]Examples:[/bold blue]

    [green]review-agent[/green]                                  # Review, suggest a commit, write the report
    [green]review-agent --retries 5 --switch-delay 3[/green]     # Retry each model with backoff
    [green]review-agent -m gemini-2.5-flash -m gemini-1.5-pro[/green]  # Custom model order
    [green]review-agent tools --style detailed[/green]           # Run the tools without a model
    [green]review-agent config --show[/green]                    # Show configuration
    """
    if version:
        from . import __version__
        console.print(f"[bold blue]Review Agent[/bold blue] version [green]{__version__}[/green]")
        return

    # Store common options for subcommands
    ctx.obj = {"config_file": config_file, "verbose": verbose, "debug": debug}

    if ctx.invoked_subcommand is None:
        asyncio.run(_run_review(config_file, models, retries, switch_delay, verbose, debug))


@app.command()
def tools(
    ctx: typer.Context,
    root_dir: str = typer.Option(
        ".", "--dir", "-r",
        help="Directory to inspect"
    ),
    style: str = typer.Option(
        "conventional", "--style", "-s",
        help="Commit message style (conventional, simple, detailed)"
    ),
    output: str = typer.Option(
        "test-review.md", "--output", "-o",
        help="Where to write the sample report"
    )
):
    """
    Run the review tools locally, without calling a model.

    [bold blue]Examples:[/bold blue]

    [green]review-agent tools[/green]
    [green]review-agent tools --dir ../project --style simple -o /tmp/review.md[/green]
    """
    if style not in ("conventional", "simple", "detailed"):
        console.print(f"[red]Invalid style:[/red] {style}")
        console.print("Valid options: conventional, simple, detailed")
        raise typer.Exit(1)

    options = ctx.obj or {}
    try:
        settings = load_settings(options.get("config_file"))
        setup_logging(_log_level(settings, options.get("verbose", False), options.get("debug", False)))

        runner = ToolRunner(settings, ReviewConsole(settings))
        runner.console.print_info(f"Testing review tools in {root_dir}")

        changes = runner.collect_changes(root_dir)
        commit = runner.commit_message(root_dir, style)
        runner.write_sample_report(changes, commit, output)

    except ReviewAgentError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]File error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False, "--show", "-s",
        help="Show current configuration"
    ),
    models: Optional[List[str]] = typer.Option(
        None, "--model", "-m",
        help="Set the model order (repeatable)"
    ),
    retries: Optional[int] = typer.Option(
        None, "--retries",
        min=1, max=10,
        help="Set attempts per model"
    ),
    save: bool = typer.Option(
        False, "--save",
        help="Save configuration to file"
    )
):
    """
    Manage Review Agent configuration.

    [bold blue]Examples:[/bold blue]

    [green]review-agent config --show[/green]
    [green]review-agent config -m gemini-1.5-flash -m gemini-2.5-flash --retries 5 --save[/green]
    """
    options = ctx.obj or {}
    try:
        settings = load_settings(options.get("config_file"))

        config_changed = False

        if models:
            settings.ai.models = list(models)
            config_changed = True
            console.print(f"[green]Set models to:[/green] {', '.join(models)}")

        if retries:
            settings.retry.attempts_per_model = retries
            config_changed = True
            console.print(f"[green]Set attempts per model to:[/green] {retries}")

        if show:
            _show_configuration(settings)

        if save and config_changed:
            config_path = settings.config_dir / "config.json"
            settings.save_to_file(config_path)
            console.print(f"[green]Configuration saved to:[/green] {config_path}")
        elif config_changed:
            console.print("[yellow]Use --save to persist these changes[/yellow]")
        elif not show:
            console.print("[yellow]No configuration changes made[/yellow]")
            console.print("Use [green]--show[/green] to see current configuration")

    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)


def _log_level(settings: Settings, verbose: bool, debug: bool) -> str:
    # Debug overrides verbose
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return settings.ui.log_level


def _show_configuration(settings: Settings) -> None:
    ReviewAgent(settings).show_configuration()


async def _run_review(
    config_file: Optional[Path],
    models: Optional[List[str]],
    retries: Optional[int],
    switch_delay: Optional[float],
    verbose: bool,
    debug: bool
):
    """Run the review workflow."""
    try:
        settings = load_settings(config_file)

        if models:
            settings.ai.models = list(models)
        if retries:
            settings.retry.attempts_per_model = retries
        if switch_delay is not None:
            settings.retry.switch_delay = switch_delay

        setup_logging(_log_level(settings, verbose, debug), settings.log_file)

        agent = ReviewAgent(settings)
        agent.console.print_banner()
        agent.console.show_ai_backend_info(
            settings.ai.backend_type,
            settings.ai.api_url,
            settings.ai.models
        )

        await agent.run_review()

    except AllModelsFailedError:
        raise typer.Exit(1)
    except ReviewAgentError as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error occurred")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
