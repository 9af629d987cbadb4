"""Tests for the markdown report writer."""

from datetime import datetime, timezone

import pytest

from review_agent.tools.markdown_report import MarkdownReportTool, write_review_to_markdown


REVIEW = "## Summary\n\nLooks good. Nit: rename `x` to `count`.\n"


def test_without_metadata_writes_review_verbatim(tmp_path):
    output = tmp_path / "review.md"

    result = write_review_to_markdown(REVIEW, str(output), include_metadata=False)

    assert output.read_bytes() == REVIEW.encode("utf-8")
    assert result.success
    assert result.metadata_included is False
    assert result.file_size == len(REVIEW.encode("utf-8"))
    assert result.output_path == str(output)


def test_with_metadata_prepends_header(tmp_path):
    output = tmp_path / "review.md"
    now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    result = write_review_to_markdown(REVIEW, str(output), now=now)
    content = output.read_text(encoding="utf-8")

    assert content.startswith("# Code Review Report\n\n**Generated on:** ")
    assert "**Timestamp:** 2026-01-02T03:04:05.000Z\n\n---\n\n" in content
    assert content.endswith(REVIEW)
    assert result.timestamp == "2026-01-02T03:04:05.000Z"
    assert result.metadata_included is True
    assert result.file_size == len(content.encode("utf-8"))


def test_creates_nested_parent_directories(tmp_path):
    output = tmp_path / "a" / "b" / "c" / "review.md"

    write_review_to_markdown(REVIEW, str(output), include_metadata=False)

    assert output.read_text(encoding="utf-8") == REVIEW


def test_overwrites_existing_file(tmp_path):
    output = tmp_path / "review.md"
    output.write_text("stale content that is much longer than the new review")

    write_review_to_markdown("fresh", str(output), include_metadata=False)

    assert output.read_text() == "fresh"


def test_file_size_counts_bytes(tmp_path):
    review = "Revisión completa ✓"

    result = write_review_to_markdown(review, str(tmp_path / "r.md"), include_metadata=False)

    assert result.file_size == len(review.encode("utf-8"))
    assert result.file_size > len(review)


def test_windows_line_endings_are_preserved(tmp_path):
    output = tmp_path / "crlf.md"

    write_review_to_markdown("line one\r\nline two\r\n", str(output), include_metadata=False)

    assert output.read_bytes() == b"line one\r\nline two\r\n"


def test_unwritable_path_propagates(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(OSError):
        write_review_to_markdown(REVIEW, str(blocker / "review.md"))


def test_tool_defaults_to_metadata(tmp_path):
    output = tmp_path / "tool.md"

    result = MarkdownReportTool().run({"review_content": REVIEW, "output_path": str(output)})

    assert result.metadata_included is True
    assert output.read_text(encoding="utf-8").startswith("# Code Review Report")
