"""
Console interface with Rich components.
"""

from typing import List, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.theme import Theme
from rich import box
from rich.markup import escape

from ..config.settings import Settings
from ..git_ops.repository import FileDiff
from ..orchestrator import Notifier
from ..tools.commit_message import CommitMessageResult
from ..tools.markdown_report import MarkdownWriteResult


FAILURE_SUGGESTIONS = [
    "Try again in a few minutes when the API load is lower",
    "Check your Google AI API key and quota",
    "Consider configuring different models with --model",
]


class ReviewConsole:
    """Console interface for Review Agent."""

    def __init__(self, settings: Settings, console: Optional[Console] = None):
        """Initialize console with settings."""
        self.settings = settings
        self._setup_styles()
        self.console = console or Console(
            color_system="auto" if settings.ui.use_colors else None,
            theme=self.theme
        )

    def _setup_styles(self) -> None:
        """Setup custom styles for consistent theming."""
        self.styles = {
            "title": "bold blue",
            "success": "bold green",
            "warning": "bold yellow",
            "error": "bold red",
            "info": "blue",
            "muted": "dim",
            "file_added": "green",
            "file_modified": "yellow",
            "file_deleted": "red",
            "commit_type": "bold magenta",
            "model": "cyan",
        }

        self.theme = Theme(self.styles)

    def print_banner(self) -> None:
        """Print application banner."""
        from .. import __version__

        banner = Panel.fit(
            f"[bold blue]Review Agent v{__version__}[/bold blue]\n"
            "[dim]AI-powered code review for your pending changes[/dim]",
            box=box.ROUNDED,
            style="blue"
        )
        self.console.print(banner)
        self.console.print()

    def show_ai_backend_info(self, backend_type: str, api_url: str, models: List[str]) -> None:
        """Show AI backend information."""
        chain = " → ".join(f"[model]{m}[/model]" for m in models)
        backend_panel = Panel(
            f"[bold]{backend_type.title()}[/bold] @ {api_url}\n"
            f"Models: {chain}",
            title="AI Backend",
            box=box.ROUNDED,
            style="blue"
        )
        self.console.print(backend_panel)
        self.console.print()

    def write_chunk(self, chunk: str) -> None:
        """Write streamed model text verbatim."""
        self.console.print(chunk, end="", markup=False, emoji=False, highlight=False, soft_wrap=True)

    def print_file_changes(self, changes: List[FileDiff], title: str = "Changed Files") -> None:
        """Print changed files with diff sizes."""
        if not changes:
            self.print_warning("No changes detected")
            return

        table = Table(title=title, box=box.SIMPLE_HEAD)
        table.add_column("File", style="bold")
        table.add_column("Diff lines", justify="right", style="muted")

        for change in changes:
            table.add_row(escape(change.file), str(len(change.diff.splitlines())))

        self.console.print(table)
        self.console.print()

    def show_commit_message(self, result: CommitMessageResult) -> None:
        """Show a generated commit message."""
        message = escape(result.message) if result.message else "[muted](empty)[/muted]"
        if result.style == "conventional" and ':' in message:
            prefix, description = message.split(':', 1)
            message = f"[commit_type]{prefix}[/commit_type]:{description}"

        self.console.print(Panel(
            message,
            title=f"Commit Message ({result.style})",
            subtitle=f"type: {result.type} · files: {result.files_changed}",
            box=box.ROUNDED,
            style="green"
        ))
        self.console.print()

    def show_report_written(self, result: MarkdownWriteResult) -> None:
        self.print_success(f"Report written to {result.output_path} ({result.file_size} bytes)")

    def show_all_models_failed(self, last_error: Optional[BaseException]) -> None:
        """Show the final failure banner with suggestions."""
        suggestions = "\n".join(f"{i}. {s}" for i, s in enumerate(FAILURE_SUGGESTIONS, 1))
        self.console.print()
        self.console.print(Panel(
            f"[error]All models failed.[/error] Last error:\n"
            f"{escape(str(last_error or 'Unknown error'))}\n\n"
            f"[bold]Suggestions:[/bold]\n{suggestions}",
            title="Review Failed",
            box=box.ROUNDED,
            style="red"
        ))

    def print_success(self, message: str) -> None:
        """Print success message."""
        self.console.print(f"[success]✓ {message}[/success]")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.console.print(f"[warning]⚠ {message}[/warning]")

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.console.print(f"[error]✗ {message}[/error]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self.console.print(f"[info]ℹ {message}[/info]")


class ConsoleNotifier(Notifier):
    """Reports orchestration progress on the console."""

    def __init__(self, console: ReviewConsole):
        self.console = console

    def attempt(self, model: str, attempt: int, total: int) -> None:
        suffix = f" (attempt {attempt}/{total})" if total > 1 else ""
        self.console.print_info(f"Trying model: {model}{suffix}...")

    def failure(self, model: str, error: BaseException) -> None:
        self.console.console.print()
        self.console.print_error(f"Model {model} failed: {escape(str(error))}")

    def waiting(self, seconds: float, reason: str) -> None:
        self.console.print_info(f"Waiting {seconds:.1f}s {reason}...")

    def success(self, model: str) -> None:
        self.console.console.print()
        self.console.print_success(f"Code review completed successfully with {model}!")
