"""
Core Review Agent engine that wires settings, tools, backends and console.
"""

from typing import List, Optional, Sequence
from loguru import logger

from .config.settings import Settings
from .ai_backends.base import AIBackend
from .ai_backends.factory import BackendFactory
from .errors import AllModelsFailedError
from .orchestrator import FallbackOrchestrator, OrchestrationResult, RetryPolicy
from .tools.base import ToolRegistry
from .tools.commit_message import CommitMessageResult, CommitMessageTool, generate_commit_message
from .tools.file_changes import FileChangesTool, get_file_changes_in_directory
from .tools.markdown_report import MarkdownReportTool, MarkdownWriteResult, write_review_to_markdown
from .git_ops.repository import FileDiff
from .ui.console import ConsoleNotifier, ReviewConsole
from .utils.prompts import SYSTEM_PROMPT


def build_tool_registry(settings: Settings) -> ToolRegistry:
    """Register the three review tools."""
    return ToolRegistry([
        FileChangesTool(exclude=settings.review.exclude_files),
        CommitMessageTool(),
        MarkdownReportTool(),
    ])


class ReviewAgent:
    """Core Review Agent application engine."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        console: Optional[ReviewConsole] = None,
        backends: Optional[Sequence[AIBackend]] = None
    ):
        """Initialize Review Agent with settings and its collaborators."""
        self.settings = settings or Settings()
        self.console = console or ReviewConsole(self.settings)
        self.tools = build_tool_registry(self.settings)
        self.backends: List[AIBackend] = list(backends) if backends is not None else BackendFactory.create_fallback_chain(self.settings)

        logger.info("Review Agent initialized")

    def create_orchestrator(self) -> FallbackOrchestrator:
        """Build an orchestrator streaming to this agent's console."""
        return FallbackOrchestrator(
            backends=self.backends,
            tools=self.tools,
            system_prompt=SYSTEM_PROMPT,
            policy=RetryPolicy.from_settings(self.settings.retry),
            sink=self.console.write_chunk,
            notifier=ConsoleNotifier(self.console),
            max_steps=self.settings.ai.max_steps
        )

    async def run_review(self, prompt: Optional[str] = None) -> OrchestrationResult:
        """Run the review prompt through the model fallback chain."""
        prompt = prompt or self.settings.review.build_prompt()
        logger.info(f"Running review with {len(self.backends)} model(s)")

        orchestrator = self.create_orchestrator()
        try:
            return await orchestrator.run(prompt)
        except AllModelsFailedError as e:
            self.console.show_all_models_failed(e.last_error)
            raise

    def show_configuration(self) -> None:
        """Show current configuration."""
        from rich.table import Table

        table = Table(title="Review Agent Configuration")
        table.add_column("Setting", style="bold")
        table.add_column("Value")

        table.add_row("Backend", self.settings.ai.backend_type)
        table.add_row("API URL", self.settings.ai.api_url)
        table.add_row("API key", "set" if self.settings.ai.api_key else "[red]missing[/red]")
        table.add_row("Models", ", ".join(self.settings.ai.models))
        table.add_row("Max steps", str(self.settings.ai.max_steps))
        table.add_row("Attempts per model", str(self.settings.retry.attempts_per_model))
        table.add_row("Backoff base", f"{self.settings.retry.backoff_base}s")
        table.add_row("Jitter", f"{self.settings.retry.jitter}s")
        table.add_row("Switch delay", f"{self.settings.retry.switch_delay}s")
        table.add_row("Excluded files", ", ".join(self.settings.review.exclude_files))
        table.add_row("Report path", self.settings.review.output_path)
        table.add_row("Config file", str(self.settings.config_dir / "config.json"))
        table.add_row("Log file", str(self.settings.log_file))

        self.console.console.print(table)


class ToolRunner:
    """Exercise the review tools directly, without a model in the loop."""

    def __init__(self, settings: Settings, console: ReviewConsole):
        self.settings = settings
        self.console = console

    def collect_changes(self, root_dir: str) -> List[FileDiff]:
        changes = get_file_changes_in_directory(root_dir, self.settings.review.exclude_files)
        self.console.print_file_changes(changes)
        return changes

    def commit_message(self, root_dir: str, style: str) -> CommitMessageResult:
        result = generate_commit_message(root_dir, style)
        self.console.show_commit_message(result)
        return result

    def write_sample_report(
        self,
        changes: List[FileDiff],
        commit: CommitMessageResult,
        output_path: str
    ) -> MarkdownWriteResult:
        """Write a placeholder review listing the changed files."""
        files = "\n".join(f"- `{change.file}`" for change in changes) or "- (no changes)"
        review = (
            "# Code Review Summary\n\n"
            "## Files Modified\n"
            f"{files}\n\n"
            "## Commit Message\n"
            f"`{commit.message}`\n"
        )
        result = write_review_to_markdown(review, output_path, include_metadata=True)
        self.console.show_report_written(result)
        return result
