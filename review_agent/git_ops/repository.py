"""
Git working-tree queries used by the review tools.
"""

from pathlib import Path
from typing import List, Optional, Union
from dataclasses import dataclass, field
from git import Repo, InvalidGitRepositoryError, NoSuchPathError, GitCommandError
from loguru import logger

from ..errors import GitRepositoryError


@dataclass
class FileStat:
    """One entry of a diff summary."""

    file: str
    insertions: int = 0
    deletions: int = 0
    binary: bool = False


@dataclass
class DiffSummary:
    """Changed files with per-file insertion/deletion counts."""

    files: List[FileStat] = field(default_factory=list)

    @property
    def insertions(self) -> int:
        return sum(f.insertions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    def find(self, path: str) -> Optional[FileStat]:
        """Return the summary entry for a path, if any."""
        for stat in self.files:
            if stat.file == path:
                return stat
        return None


@dataclass
class FileDiff:
    """Unified diff text for a single changed file."""

    file: str
    diff: str


class GitRepository:
    """Read-only view over a Git working tree."""

    def __init__(self, repo_path: Optional[Union[str, Path]] = None):
        """Initialize Git repository."""
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()
        self.repo: Optional[Repo] = None
        self._initialize_repo()

    def _initialize_repo(self) -> None:
        """Initialize the Git repository object."""
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
            logger.debug(f"Initialized Git repository at {self.repo.working_dir}")
        except NoSuchPathError:
            raise GitRepositoryError(f"Directory does not exist: {self.repo_path}")
        except InvalidGitRepositoryError:
            raise GitRepositoryError(f"Not a Git repository: {self.repo_path}")

    def _git(self, *args: str) -> str:
        # Unquoted paths so non-ASCII names round-trip into `diff -- <path>`
        try:
            return self.repo.git(c="core.quotepath=false").diff(*args)
        except GitCommandError as e:
            raise GitRepositoryError(f"git diff {' '.join(args)} failed: {e}")

    def diff_summary(self) -> DiffSummary:
        """Summarize unstaged changes (working tree against the index)."""
        summary = DiffSummary()

        for line in self._git("--numstat").splitlines():
            if not line.strip():
                continue
            added, removed, path = line.split('\t', 2)
            if added == '-' and removed == '-':
                summary.files.append(FileStat(file=path, binary=True))
            else:
                summary.files.append(FileStat(
                    file=path,
                    insertions=int(added),
                    deletions=int(removed)
                ))

        logger.debug(f"Diff summary: {len(summary.files)} files, +{summary.insertions} -{summary.deletions}")
        return summary

    def file_diff(self, path: str) -> str:
        """Get the unified diff text for one file."""
        return self._git("--", path)

    def staged_files(self) -> List[str]:
        """Names of files staged in the index."""
        return [f for f in self._git("--cached", "--name-only").split('\n') if f]

    def unstaged_files(self) -> List[str]:
        """Names of files changed in the working tree but not staged."""
        return [f for f in self._git("--name-only").split('\n') if f]

    def collect_diffs(self, exclude: Optional[List[str]] = None) -> List[FileDiff]:
        """Get per-file diffs for every changed file not in the exclusion list."""
        excluded = set(exclude or [])
        diffs = []

        for stat in self.diff_summary().files:
            if stat.file in excluded:
                logger.debug(f"Skipping excluded path: {stat.file}")
                continue
            diffs.append(FileDiff(file=stat.file, diff=self.file_diff(stat.file)))

        logger.info(f"Collected diffs for {len(diffs)} files in {self.repo_path}")
        return diffs
