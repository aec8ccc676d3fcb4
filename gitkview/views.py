"""Saved commit views: filters, their loaded commits and a manager for them."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from gitkview.models import GitCommit
from gitkview.repository import load_commits, run_git

logger = logging.getLogger(__name__)

DEFAULT_VIEW_NAME = "Default"


def get_commits_from_git_args(repo_path: str | Path, args: Sequence[str]) -> list[GitCommit]:
    """Run ``git rev-list`` with the arguments and load the listed commits."""
    output = run_git(repo_path, ["rev-list", *args])
    return load_commits(repo_path, (line.strip() for line in output.splitlines()))


@dataclass
class ViewFilter:
    """Criteria selecting which commits a view shows."""

    name: str = DEFAULT_VIEW_NAME
    description: str = "Show all commits"
    author_filter: str | None = None
    committer_filter: str | None = None
    message_filter: str | None = None
    file_filter: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    branch_filter: str | None = None
    max_commits: int | None = 1000
    include_merges: bool = True
    case_sensitive: bool = False
    use_regex: bool = False

    @classmethod
    def named(cls, name: str) -> ViewFilter:
        """Return a default filter carrying a custom name."""
        return cls(name=name, description=f"Custom view: {name}")

    def matches_commit(self, commit: GitCommit) -> bool:
        """Tell whether a commit passes the author, committer, message and merge filters."""
        if self.author_filter is not None and not (
            self._text_matches(commit.author.name, self.author_filter)
            or self._text_matches(commit.author.email, self.author_filter)
        ):
            return False
        if self.committer_filter is not None and not (
            self._text_matches(commit.committer.name, self.committer_filter)
            or self._text_matches(commit.committer.email, self.committer_filter)
        ):
            return False
        if self.message_filter is not None and not self._text_matches(
            commit.message, self.message_filter
        ):
            return False
        if not self.include_merges and len(commit.parent_ids) > 1:
            return False
        return True

    def _text_matches(self, text: str, pattern: str) -> bool:
        # Regular-expression filters are matched as plain substrings here.
        if self.case_sensitive:
            return pattern in text
        return pattern.lower() in text.lower()

    def to_git_args(self) -> list[str]:
        """Return the ``git rev-list`` arguments that express this filter."""
        args = [self.branch_filter if self.branch_filter is not None else "HEAD"]
        if self.author_filter is not None:
            args.append(f"--author={self.author_filter}")
        if self.committer_filter is not None:
            args.append(f"--committer={self.committer_filter}")
        if self.message_filter is not None:
            args.append(f"--grep={self.message_filter}")
        if self.date_from is not None:
            args.append(f"--since={self.date_from}")
        if self.date_to is not None:
            args.append(f"--until={self.date_to}")
        if not self.include_merges:
            args.append("--no-merges")
        if self.max_commits is not None:
            args.append(f"--max-count={self.max_commits}")
        if self.file_filter is not None:
            args.extend(["--", self.file_filter])
        return args


def _seconds(max_age: timedelta | float) -> float:
    if isinstance(max_age, timedelta):
        return max_age.total_seconds()
    return float(max_age)


@dataclass
class GitView:
    """A filter together with the commits it last produced."""

    filter: ViewFilter = field(default_factory=ViewFilter)
    commits: list[GitCommit] = field(default_factory=list)
    is_loading: bool = False
    last_updated: float | None = None

    def update_commits(self, repo_path: str | Path) -> None:
        """Reload the view's commits from the repository."""
        self.is_loading = True
        try:
            commits = get_commits_from_git_args(repo_path, self.filter.to_git_args())
        finally:
            self.is_loading = False
        self.commits = [c for c in commits if self.filter.matches_commit(c)]
        self.last_updated = time.time()

    def refresh(self, repo_path: str | Path) -> None:
        """Reload the view's commits."""
        self.update_commits(repo_path)

    def is_stale(self, max_age: timedelta | float) -> bool:
        """Tell whether the view was never loaded or is older than ``max_age``."""
        if self.last_updated is None:
            return True
        elapsed = time.time() - self.last_updated
        if elapsed < 0:
            return True
        return elapsed > _seconds(max_age)


class ViewManager:
    """Holds named views and which of them is current."""

    def __init__(self) -> None:
        self._default_view = DEFAULT_VIEW_NAME
        self._current_view = DEFAULT_VIEW_NAME
        self._views: dict[str, GitView] = {DEFAULT_VIEW_NAME: GitView(ViewFilter())}

    def add_view(self, name: str, filter: ViewFilter) -> None:
        """Add a view, replacing any view of the same name."""
        self._views[name] = GitView(filter)

    def remove_view(self, name: str) -> None:
        """Remove a view; the default view cannot be removed."""
        if name == self._default_view:
            raise ValueError("Cannot remove default view")
        if name == self._current_view:
            self._current_view = self._default_view
        self._views.pop(name, None)

    def switch_view(self, name: str) -> None:
        """Make the named view current."""
        if name not in self._views:
            raise KeyError(f"View '{name}' not found")
        self._current_view = name

    def current_view(self) -> GitView | None:
        """Return the current view."""
        return self._views.get(self._current_view)

    def current_view_name(self) -> str:
        """Return the name of the current view."""
        return self._current_view

    def get_view(self, name: str) -> GitView | None:
        """Return the named view, or None."""
        return self._views.get(name)

    def view_names(self) -> list[str]:
        """Return the names of all views."""
        return list(self._views)

    def update_current_view(self, repo_path: str | Path) -> None:
        """Reload the commits of the current view."""
        view = self.current_view()
        if view is None:
            raise LookupError("No current view")
        view.update_commits(repo_path)

    def refresh_view(self, name: str, repo_path: str | Path) -> None:
        """Reload the commits of the named view."""
        view = self.get_view(name)
        if view is None:
            raise KeyError(f"View '{name}' not found")
        view.refresh(repo_path)

    def refresh_all_views(self, repo_path: str | Path) -> None:
        """Reload every view, logging the ones that fail."""
        for name in list(self._views):
            try:
                self.refresh_view(name, repo_path)
            except Exception as exc:  # noqa: BLE001 - one failing view must not stop the rest
                logger.warning("Failed to refresh view '%s': %s", name, exc)

    def cleanup_stale_views(self, max_age: timedelta | float) -> None:
        """Drop the loaded commits of views older than ``max_age``."""
        for view in self._views.values():
            if view.is_stale(max_age):
                view.commits.clear()
                view.last_updated = None


@dataclass
class ViewPreset:
    """A ready-made named filter."""

    name: str
    filter: ViewFilter

    @classmethod
    def common_presets(cls) -> list[ViewPreset]:
        """Return the built-in presets."""
        return [
            cls(
                name="Recent",
                filter=ViewFilter(
                    name="Recent",
                    description="Commits from the last 30 days",
                    date_from="30.days.ago",
                    max_commits=500,
                ),
            ),
            cls(
                name="My Commits",
                filter=ViewFilter(
                    name="My Commits",
                    description="Commits by current user",
                    max_commits=1000,
                ),
            ),
            cls(
                name="No Merges",
                filter=ViewFilter(
                    name="No Merges",
                    description="All commits excluding merges",
                    include_merges=False,
                    max_commits=1000,
                ),
            ),
            cls(
                name="Bug Fixes",
                filter=ViewFilter(
                    name="Bug Fixes",
                    description="Commits containing 'fix' or 'bug'",
                    message_filter="fix|bug",
                    use_regex=True,
                    case_sensitive=False,
                    max_commits=500,
                ),
            ),
            cls(
                name="Features",
                filter=ViewFilter(
                    name="Features",
                    description="Commits containing 'feat' or 'feature'",
                    message_filter="feat|feature",
                    use_regex=True,
                    case_sensitive=False,
                    max_commits=500,
                ),
            ),
        ]