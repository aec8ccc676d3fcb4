"""Commit, signature and diff data models."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _format_timestamp(when: datetime) -> str:
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_timestamp(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    when = datetime.fromisoformat(text)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


@dataclass
class GitSignature:
    """Name, e-mail address and time of an author or committer."""

    name: str
    email: str
    when: datetime

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping; the time is an RFC 3339 UTC string."""
        return {
            "name": self.name,
            "email": self.email,
            "when": _format_timestamp(self.when),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GitSignature:
        """Build a signature from a mapping produced by :meth:`to_dict`."""
        return cls(
            name=str(_require(data, "name")),
            email=str(_require(data, "email")),
            when=_parse_timestamp(str(_require(data, "when"))),
        )


@dataclass
class GitCommit:
    """A commit as shown in the history view."""

    id: str
    short_id: str
    author: GitSignature
    committer: GitSignature
    message: str
    summary: str
    parent_ids: list[str] = field(default_factory=list)
    tree_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of the commit."""
        return {
            "id": self.id,
            "short_id": self.short_id,
            "author": self.author.to_dict(),
            "committer": self.committer.to_dict(),
            "message": self.message,
            "summary": self.summary,
            "parent_ids": list(self.parent_ids),
            "tree_id": self.tree_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GitCommit:
        """Build a commit from a mapping produced by :meth:`to_dict`."""
        return cls(
            id=str(_require(data, "id")),
            short_id=str(_require(data, "short_id")),
            author=GitSignature.from_dict(_require(data, "author")),
            committer=GitSignature.from_dict(_require(data, "committer")),
            message=str(_require(data, "message")),
            summary=str(_require(data, "summary")),
            parent_ids=[str(p) for p in _require(data, "parent_ids")],
            tree_id=str(_require(data, "tree_id")),
        )

    def to_json(self) -> str:
        """Serialise the commit to a JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> GitCommit:
        """Deserialise a commit from a JSON string."""
        return cls.from_dict(json.loads(text))


class DiffStatus(Enum):
    """How a file changed in a diff."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    IGNORED = "ignored"
    UNTRACKED = "untracked"
    TYPECHANGE = "typechange"


@dataclass
class GitDiffLine:
    """One line of a hunk, with its origin marker (' ', '+' or '-')."""

    origin: str
    content: str
    old_lineno: int | None = None
    new_lineno: int | None = None


@dataclass
class GitHunk:
    """A contiguous block of changes within a file diff."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    header: str
    lines: list[GitDiffLine] = field(default_factory=list)


@dataclass
class GitDiffStats:
    """Summary counts of a diff."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0


@dataclass
class GitDiff:
    """The diff of a single file."""

    old_file: str | None
    new_file: str | None
    hunks: list[GitHunk] = field(default_factory=list)
    stats: GitDiffStats = field(default_factory=GitDiffStats)
    is_binary: bool = False
    status: DiffStatus = DiffStatus.MODIFIED
    similarity: int | None = None