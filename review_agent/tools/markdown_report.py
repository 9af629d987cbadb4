"""
Markdown report writer.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from loguru import logger
from pydantic import BaseModel, Field

from .base import Tool


REPORT_TITLE = "Code Review Report"


@dataclass
class MarkdownWriteResult:
    success: bool
    output_path: str
    file_size: int
    timestamp: str
    metadata_included: bool


class MarkdownReviewInput(BaseModel):
    review_content: str = Field(min_length=1, description="The code review content to write to markdown")
    output_path: str = Field(min_length=1, description="The path where the markdown file should be saved")
    include_metadata: bool = Field(
        default=True,
        description="Whether to include metadata like timestamp and file info"
    )


def iso_timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_metadata_header(now: datetime) -> str:
    """Title block with human-readable and ISO-8601 timestamps."""
    local = now.astimezone()
    iso = iso_timestamp(now)
    return (
        f"# {REPORT_TITLE}\n\n"
        f"**Generated on:** {local.strftime('%Y-%m-%d')} at {local.strftime('%H:%M:%S')}\n"
        f"**Timestamp:** {iso}\n\n"
        f"---\n\n"
    )


def write_review_to_markdown(
    review_content: str,
    output_path: str,
    include_metadata: bool = True,
    now: Optional[datetime] = None
) -> MarkdownWriteResult:
    """
    Write a review to ``output_path``, replacing any existing file.

    Parent directories are created as needed. Filesystem errors propagate.
    """
    now = now or datetime.now(timezone.utc)
    timestamp = iso_timestamp(now)

    content = render_metadata_header(now) if include_metadata else ""
    content += review_content

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)

    file_size = len(content.encode('utf-8'))
    logger.info(f"Wrote review to {path} ({file_size} bytes)")

    return MarkdownWriteResult(
        success=True,
        output_path=output_path,
        file_size=file_size,
        timestamp=timestamp,
        metadata_included=include_metadata
    )


class MarkdownReportTool(Tool):
    name = "write_review_to_markdown"
    description = "Writes the code review content to a markdown file with optional metadata"
    input_model = MarkdownReviewInput

    def execute(self, params: MarkdownReviewInput) -> MarkdownWriteResult:
        return write_review_to_markdown(
            params.review_content,
            params.output_path,
            params.include_metadata
        )
