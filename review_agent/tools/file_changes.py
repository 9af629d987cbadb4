"""
Diff collection tool.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from .base import Tool
from ..git_ops.repository import FileDiff, GitRepository


DEFAULT_EXCLUDES = ["dist", "bun.lock"]


class FileChangesInput(BaseModel):
    root_dir: str = Field(min_length=1, description="The root directory")


def get_file_changes_in_directory(root_dir: str, exclude: Optional[List[str]] = None) -> List[FileDiff]:
    """Return the diff of every changed file under ``root_dir``."""
    repo = GitRepository(root_dir)
    return repo.collect_diffs(DEFAULT_EXCLUDES if exclude is None else exclude)


class FileChangesTool(Tool):
    name = "get_file_changes_in_directory"
    description = "Gets the code changes made in given directory"
    input_model = FileChangesInput

    def __init__(self, exclude: Optional[List[str]] = None):
        self.exclude = list(DEFAULT_EXCLUDES if exclude is None else exclude)

    def execute(self, params: FileChangesInput) -> List[FileDiff]:
        return get_file_changes_in_directory(params.root_dir, self.exclude)
