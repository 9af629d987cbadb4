"""Tests for GitRepository and the diff collection tool."""

import pytest

from review_agent.errors import GitRepositoryError
from review_agent.git_ops.repository import GitRepository
from review_agent.tools.file_changes import FileChangesTool, get_file_changes_in_directory


def test_clean_tree_has_no_changes(git_repo):
    repo = GitRepository(git_repo)

    assert repo.diff_summary().files == []
    assert repo.collect_diffs() == []


def test_diff_summary_counts(git_repo):
    (git_repo / "src/app.py").write_text("def main():\n    return 2\n")
    (git_repo / "README.md").write_text("# Project\n\nMore docs.\n")
    (git_repo / "old.py").unlink()

    summary = GitRepository(git_repo).diff_summary()
    stats = {stat.file: (stat.insertions, stat.deletions) for stat in summary.files}

    assert stats == {
        "README.md": (2, 0),
        "old.py": (0, 2),
        "src/app.py": (1, 1),
    }
    assert summary.insertions == 3
    assert summary.deletions == 3


def test_collect_diffs_skips_excluded_paths(git_repo):
    (git_repo / "src/app.py").write_text("def main():\n    return 2\n")
    (git_repo / "dist").write_text("bundle v2\n")
    (git_repo / "bun.lock").write_text("lock v2\n")

    diffs = get_file_changes_in_directory(str(git_repo))

    assert [d.file for d in diffs] == ["src/app.py"]
    assert "-    return 1" in diffs[0].diff
    assert "+    return 2" in diffs[0].diff


def test_collect_diffs_with_custom_exclusions(git_repo):
    (git_repo / "src/app.py").write_text("def main():\n    return 2\n")
    (git_repo / "dist").write_text("bundle v2\n")

    diffs = get_file_changes_in_directory(str(git_repo), exclude=["src/app.py"])

    assert [d.file for d in diffs] == ["dist"]


def test_staged_and_unstaged_names(git_repo):
    (git_repo / "src/app.py").write_text("def main():\n    return 2\n")
    (git_repo / "README.md").write_text("# Project\n\nMore docs.\n")
    repo = GitRepository(git_repo)
    repo.repo.git.add("src/app.py")

    assert repo.staged_files() == ["src/app.py"]
    assert repo.unstaged_files() == ["README.md"]


def test_subdirectory_resolves_to_repository(git_repo):
    (git_repo / "src/app.py").write_text("def main():\n    return 2\n")

    diffs = get_file_changes_in_directory(str(git_repo / "src"))

    assert [d.file for d in diffs] == ["src/app.py"]


def test_non_repository_raises(tmp_path):
    plain = tmp_path / "plain"
    plain.mkdir()

    with pytest.raises(GitRepositoryError, match="Not a Git repository"):
        GitRepository(plain)


def test_missing_directory_raises(tmp_path):
    with pytest.raises(GitRepositoryError, match="does not exist"):
        GitRepository(tmp_path / "missing")


def test_tool_uses_configured_exclusions(git_repo):
    (git_repo / "dist").write_text("bundle v2\n")
    tool = FileChangesTool(exclude=[])

    diffs = tool.run({"root_dir": str(git_repo)})

    assert [d.file for d in diffs] == ["dist"]


def test_non_ascii_paths_are_unquoted(git_repo):
    repo = GitRepository(git_repo)
    (git_repo / "café.py").write_text("x = 1\n")
    repo.repo.git.add("café.py")
    repo.repo.index.commit("add café")
    (git_repo / "café.py").write_text("x = 2\n")

    diffs = repo.collect_diffs()

    assert [d.file for d in diffs] == ["café.py"]
    assert "+x = 2" in diffs[0].diff
    assert repo.unstaged_files() == ["café.py"]
    assert repo.collect_diffs(exclude=["café.py"]) == []

    repo.repo.git.add("café.py")
    assert repo.staged_files() == ["café.py"]
