import subprocess
from pathlib import Path

import pytest

from gitkview.repository import (
    FileEntry,
    GitCommandError,
    RepositoryInfo,
    TreeEntry,
    load_commits,
    run_git,
)


def _git(path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=path, check=True, capture_output=True, text=True
    )
    return result.stdout


def _make_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "commit.gpgsign", "false")
    return repo


def _commit(repo: Path, message: str) -> str:
    filename = message.lower().replace(" ", "_") + ".txt"
    (repo / filename).write_text(f"Test content for {message}")
    _git(repo, "add", filename)
    _git(repo, "commit", "-m", message)
    return _git(repo, "rev-parse", "HEAD").strip()


def _make_complex_repo(tmp_path: Path) -> Path:
    repo = _make_repo(tmp_path)
    _commit(repo, "Initial commit")
    _git(repo, "checkout", "-b", "feature/test")
    _commit(repo, "Add feature functionality")
    _commit(repo, "Fix feature bug")
    _git(repo, "checkout", "main")
    _commit(repo, "Main branch update")
    _git(repo, "merge", "feature/test", "--no-ff", "-m", "Merge feature branch")
    return repo


def test_repository_discovery(tmp_path):
    repo = _make_repo(tmp_path)
    _commit(repo, "Test commit")
    info = RepositoryInfo.from_repo(repo)
    assert info.path.exists()
    assert info.path.resolve() == repo.resolve()
    assert info.name == "repo"
    assert info.is_bare is False
    assert info.head_branch == "main"


def test_commit_loading(tmp_path):
    repo = _make_complex_repo(tmp_path)
    ids = run_git(repo, ["rev-list", "--max-count=10", "HEAD"]).split()
    commits = load_commits(repo, ids)
    assert len(commits) >= 5
    assert [c.id for c in commits] == ids


def test_branch_operations(tmp_path):
    repo = _make_complex_repo(tmp_path)
    info = RepositoryInfo.from_repo(repo)
    assert "main" in info.branches
    assert "feature/test" in info.branches


def test_loaded_commit_fields(tmp_path):
    repo = _make_repo(tmp_path)
    sha = _commit(repo, "Initial commit")
    (commit,) = load_commits(repo, [sha])
    assert commit.id == sha
    assert commit.summary == "Initial commit"
    assert commit.message.strip() == "Initial commit"
    assert commit.author.name == "Test User"
    assert commit.author.email == "test@example.com"
    assert commit.committer.name == "Test User"
    assert commit.parent_ids == []
    assert sha.startswith(commit.short_id)
    assert commit.tree_id == _git(repo, "rev-parse", "HEAD^{tree}").strip()


def test_merge_commit_has_two_parents(tmp_path):
    repo = _make_complex_repo(tmp_path)
    head = _git(repo, "rev-parse", "HEAD").strip()
    (merge,) = load_commits(repo, [head])
    assert len(merge.parent_ids) == 2
    assert merge.summary == "Merge feature branch"


def test_unknown_and_malformed_ids_are_skipped(tmp_path):
    repo = _make_repo(tmp_path)
    sha = _commit(repo, "Initial commit")
    commits = load_commits(repo, ["0" * 40, "not-an-id", sha])
    assert [c.id for c in commits] == [sha]
    assert load_commits(repo, []) == []


def test_tags_and_remotes(tmp_path):
    repo = _make_repo(tmp_path)
    _commit(repo, "Initial commit")
    _git(repo, "tag", "v1.0")
    _git(repo, "remote", "add", "origin", str(tmp_path / "elsewhere"))
    info = RepositoryInfo.from_repo(repo)
    assert info.tags == ["v1.0"]
    assert info.remotes == ["origin"]


def test_empty_repository_has_no_head_branch(tmp_path):
    repo = _make_repo(tmp_path)
    info = RepositoryInfo.from_repo(repo)
    assert info.head_branch is None
    assert info.branches == []


def test_detached_head(tmp_path):
    repo = _make_repo(tmp_path)
    sha = _commit(repo, "Initial commit")
    _git(repo, "checkout", "--detach", sha)
    info = RepositoryInfo.from_repo(repo)
    assert info.head_branch == "HEAD"


def test_run_git_failure_raises(tmp_path):
    repo = _make_repo(tmp_path)
    with pytest.raises(GitCommandError):
        run_git(repo, ["rev-parse", "--verify", "no-such-ref"])


def test_entries_hold_their_fields():
    entry = FileEntry(name="a.txt", path="dir/a.txt", is_dir=False, size=12)
    assert entry.mode is None
    assert entry.size == 12
    tree = TreeEntry(name="dir", path="dir", id="abc", filemode=0o40000, is_tree=True)
    assert tree.is_tree and tree.filemode == 0o40000