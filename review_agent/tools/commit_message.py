"""
Commit message composition from working-tree changes.

Files are classified by their insertion/deletion counts, a commit type is
picked from naming heuristics and one of three templates is rendered.
"""

from dataclasses import dataclass, field
from typing import List, Literal, Optional
from loguru import logger
from pydantic import BaseModel, Field

from .base import Tool
from ..git_ops.repository import DiffSummary, GitRepository


CommitStyle = Literal["conventional", "simple", "detailed"]
CommitType = Literal["feat", "fix", "refactor", "test", "docs", "remove", "update"]


@dataclass
class FileClassification:
    """Changed files split by kind of change."""

    added: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)


@dataclass
class CommitMessageResult:
    message: str
    type: str
    scope: Optional[str]
    files_changed: int
    file_types: FileClassification
    style: str


class CommitMessageInput(BaseModel):
    root_dir: str = Field(min_length=1, description="The root directory to analyze for commit message")
    style: CommitStyle = Field(default="conventional", description="The style of commit message to generate")


def _is_test_file(path: str) -> bool:
    return 'test' in path or 'spec' in path


def _basename(path: str) -> str:
    return path.split('/')[-1]


def classify_files(changed_files: List[str], summary: DiffSummary) -> FileClassification:
    """Sort changed files into added/modified/deleted using the diff summary."""
    file_types = FileClassification()

    for path in changed_files:
        stat = summary.find(path)
        if stat is None or stat.binary:
            continue
        if stat.insertions > 0 and stat.deletions == 0:
            file_types.added.append(path)
        elif stat.insertions > 0 and stat.deletions > 0:
            file_types.modified.append(path)
        elif stat.insertions == 0 and stat.deletions > 0:
            file_types.deleted.append(path)

    return file_types


def determine_commit_type(file_types: FileClassification) -> str:
    """Pick the commit type, highest priority first."""
    has_new_features = any(not _is_test_file(f) for f in file_types.added)
    has_bug_fixes = any('fix' in f or 'bug' in f for f in file_types.modified)
    has_tests = any(_is_test_file(f) for f in file_types.added)
    has_docs = any('readme' in f or 'doc' in f or f.endswith('.md') for f in file_types.added)
    is_refactor = bool(file_types.modified) and all(not _is_test_file(f) for f in file_types.modified)

    if has_bug_fixes:
        return "fix"
    if is_refactor and not has_new_features:
        return "refactor"
    if has_tests:
        return "test"
    if has_docs:
        return "docs"
    if file_types.deleted:
        return "remove"
    return "feat"


def derive_scope(changed_files: List[str]) -> Optional[str]:
    """Base name without extension when exactly one file changed."""
    if len(changed_files) != 1:
        return None
    return _basename(changed_files[0]).split('.')[0] or None


def conventional_phrase(commit_type: str, files: List[str]) -> str:
    main_files = [f for f in files if not _is_test_file(f)]
    first_main = _basename(main_files[0]) if main_files else None

    def pick(many: str, fallback: str) -> str:
        if len(main_files) > 1:
            return many
        return first_main or fallback

    if commit_type == "feat":
        return f"add {pick('new features', 'functionality')}"
    if commit_type == "fix":
        return f"resolve issues in {pick('multiple files', 'code')}"
    if commit_type == "refactor":
        return f"improve {pick('code structure', 'implementation')}"
    if commit_type == "test":
        return f"add test coverage for {first_main or 'code'}"
    if commit_type == "docs":
        return "update documentation"
    if commit_type == "remove":
        return f"remove {pick('unused code', 'files')}"
    if len(files) > 1:
        return "update multiple files"
    return f"update {(_basename(files[0]) if files else '') or 'code'}"


def simple_message(file_types: FileClassification) -> str:
    actions = []
    if file_types.added:
        actions.append(f"Added {len(file_types.added)} file(s)")
    if file_types.modified:
        actions.append(f"Modified {len(file_types.modified)} file(s)")
    if file_types.deleted:
        actions.append(f"Removed {len(file_types.deleted)} file(s)")
    return ", ".join(actions)


def detailed_message(commit_type: str, file_types: FileClassification, files: List[str], summary: DiffSummary) -> str:
    message = (
        f"{commit_type}: Updated {len(files)} file(s) with "
        f"{summary.insertions} insertions and {summary.deletions} deletions"
    )
    if file_types.added:
        message += f"\n- Added: {', '.join(file_types.added)}"
    if file_types.modified:
        message += f"\n- Modified: {', '.join(file_types.modified)}"
    if file_types.deleted:
        message += f"\n- Removed: {', '.join(file_types.deleted)}"
    return message


def compose_commit_message(
    changed_files: List[str],
    summary: DiffSummary,
    style: str = "conventional"
) -> CommitMessageResult:
    """Build a commit message for an explicit list of changed files."""
    file_types = classify_files(changed_files, summary)
    commit_type = determine_commit_type(file_types)
    scope = derive_scope(changed_files)

    if style == "conventional":
        prefix = f"{commit_type}({scope})" if scope else commit_type
        message = f"{prefix}: {conventional_phrase(commit_type, changed_files)}"
    elif style == "simple":
        message = simple_message(file_types)
    elif style == "detailed":
        message = detailed_message(commit_type, file_types, changed_files, summary)
    else:
        raise ValueError(f"Unknown commit message style: {style}")

    return CommitMessageResult(
        message=message,
        type=commit_type,
        scope=scope,
        files_changed=len(changed_files),
        file_types=file_types,
        style=style
    )


def generate_commit_message(root_dir: str, style: str = "conventional") -> CommitMessageResult:
    """Generate a commit message for the pending changes in ``root_dir``."""
    repo = GitRepository(root_dir)
    summary = repo.diff_summary()

    # Staged names win, then unstaged names, then the summary itself
    changed_files = (
        repo.staged_files()
        or repo.unstaged_files()
        or [stat.file for stat in summary.files]
    )

    result = compose_commit_message(changed_files, summary, style)
    logger.info(f"Generated {style} commit message ({result.type}) for {result.files_changed} files")
    return result


class CommitMessageTool(Tool):
    name = "generate_commit_message"
    description = "Generates an appropriate commit message based on the changes in the given directory"
    input_model = CommitMessageInput

    def execute(self, params: CommitMessageInput) -> CommitMessageResult:
        return generate_commit_message(params.root_dir, params.style)
