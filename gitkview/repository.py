"""Access to a Git repository through the git command line."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from gitkview.models import GitCommit, GitSignature

_FIELD_SEP = "\x1f"
_COMMIT_FORMAT = _FIELD_SEP.join(
    ["%H", "%h", "%an", "%ae", "%at", "%cn", "%ce", "%ct", "%P", "%T", "%B"]
)
_FIELD_COUNT = 11
_OID_RE = re.compile(r"^(?:[0-9a-fA-F]{40}|[0-9a-fA-F]{64})$")


class GitCommandError(RuntimeError):
    """Raised when a git command cannot be run or exits with an error."""

    def __init__(self, args: Sequence[str], message: str) -> None:
        super().__init__(f"git {' '.join(args)} failed: {message}")
        self.git_args = list(args)
        self.message = message


def run_git(repo_path: str | Path, args: Sequence[str]) -> str:
    """Run git with the given arguments in the repository and return its output."""
    command = ["git", *args]
    try:
        completed = subprocess.run(
            command,
            cwd=str(repo_path),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except (FileNotFoundError, NotADirectoryError, PermissionError) as exc:
        raise GitCommandError(args, str(exc)) from exc
    if completed.returncode != 0:
        raise GitCommandError(args, completed.stderr.strip() or f"exit {completed.returncode}")
    return completed.stdout


def _timestamp(text: str) -> datetime:
    try:
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return datetime.now(timezone.utc)


def _summary(message: str) -> str:
    paragraph = message.strip().split("\n\n", 1)[0]
    return " ".join(line.strip() for line in paragraph.splitlines() if line.strip())


def _parse_record(record: str) -> GitCommit | None:
    parts = record.split(_FIELD_SEP, _FIELD_COUNT - 1)
    if len(parts) != _FIELD_COUNT:
        return None
    (oid, short_id, a_name, a_email, a_time,
     c_name, c_email, c_time, parents, tree, message) = parts
    return GitCommit(
        id=oid.strip(),
        short_id=short_id,
        author=GitSignature(name=a_name, email=a_email, when=_timestamp(a_time)),
        committer=GitSignature(name=c_name, email=c_email, when=_timestamp(c_time)),
        message=message,
        summary=_summary(message),
        parent_ids=parents.split(),
        tree_id=tree,
    )


def _show_commits(repo_path: str | Path, oids: list[str]) -> list[GitCommit]:
    output = run_git(
        repo_path,
        ["log", "--no-walk=unsorted", "-z", f"--format={_COMMIT_FORMAT}", *oids, "--"],
    )
    commits = (_parse_record(record) for record in output.split("\0") if record)
    return [commit for commit in commits if commit is not None]


def load_commits(repo_path: str | Path, commit_ids: Iterable[str]) -> list[GitCommit]:
    """Load the commits with the given ids, skipping ids that are not commits."""
    oids = [oid.strip() for oid in commit_ids if _OID_RE.match(oid.strip())]
    if not oids:
        return []
    try:
        return _show_commits(repo_path, oids)
    except GitCommandError:
        pass
    commits: list[GitCommit] = []
    for oid in oids:
        try:
            commits.extend(_show_commits(repo_path, [oid]))
        except GitCommandError:
            continue
    return commits


def _ref_names(repo_path: str | Path, prefix: str) -> list[str]:
    output = run_git(repo_path, ["for-each-ref", "--format=%(refname)", prefix])
    return [
        line[len(prefix):]
        for line in output.splitlines()
        if line.startswith(prefix)
    ]


@dataclass
class RepositoryInfo:
    """Summary of a repository: location, HEAD and its references."""

    path: Path
    name: str
    is_bare: bool
    head_branch: str | None = None
    branches: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    remotes: list[str] = field(default_factory=list)

    @classmethod
    def from_repo(cls, path: str | Path) -> RepositoryInfo:
        """Inspect the repository at or above ``path``."""
        is_bare = run_git(path, ["rev-parse", "--is-bare-repository"]).strip() == "true"
        if is_bare:
            location = run_git(path, ["rev-parse", "--absolute-git-dir"]).strip()
        else:
            location = run_git(path, ["rev-parse", "--show-toplevel"]).strip()
        repo_path = Path(location)
        name = repo_path.name or "Unknown"

        head_branch: str | None
        try:
            run_git(path, ["rev-parse", "--verify", "-q", "HEAD"])
        except GitCommandError:
            head_branch = None
        else:
            try:
                head_branch = run_git(path, ["symbolic-ref", "--short", "-q", "HEAD"]).strip()
            except GitCommandError:
                head_branch = "HEAD"

        try:
            remotes = run_git(path, ["remote"]).split()
        except GitCommandError:
            remotes = []

        return cls(
            path=repo_path,
            name=name,
            is_bare=is_bare,
            head_branch=head_branch,
            branches=_ref_names(path, "refs/heads/"),
            tags=_ref_names(path, "refs/tags/"),
            remotes=remotes,
        )


@dataclass
class FileEntry:
    """A file or directory in a working tree listing."""

    name: str
    path: str
    is_dir: bool
    size: int | None = None
    mode: int | None = None


@dataclass
class TreeEntry:
    """An entry of a Git tree object."""

    name: str
    path: str
    id: str
    filemode: int
    is_tree: bool