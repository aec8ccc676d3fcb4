import json
from datetime import datetime, timezone

import pytest

from gitkview.models import (
    DiffStatus,
    GitCommit,
    GitDiff,
    GitDiffLine,
    GitDiffStats,
    GitHunk,
    GitSignature,
)


def _sig(name="Test User", email="test@example.com", when=None):
    return GitSignature(
        name=name,
        email=email,
        when=when or datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
    )


def test_git_commit_creation():
    commit = GitCommit(
        id="abc123def456",
        short_id="abc123d",
        author=_sig("John Doe", "john@example.com"),
        committer=_sig(
            "Jane Smith",
            "jane@example.com",
            datetime(2023, 1, 1, 12, 30, 0, tzinfo=timezone.utc),
        ),
        message="Initial commit\n\nThis is the first commit",
        summary="Initial commit",
        parent_ids=[],
        tree_id="tree123",
    )
    data = commit.to_dict()
    assert data["id"] == "abc123def456"
    assert data["short_id"] == "abc123d"
    assert data["author"]["name"] == "John Doe"
    assert data["committer"]["name"] == "Jane Smith"
    assert data["summary"] == "Initial commit"
    assert data["parent_ids"] == []


def test_signature_to_dict_uses_utc_rfc3339():
    data = _sig().to_dict()
    assert data == {
        "name": "Test User",
        "email": "test@example.com",
        "when": "2023-01-01T12:00:00Z",
    }


def test_signature_from_dict_parses_z_suffix():
    sig = GitSignature.from_dict(
        {"name": "A", "email": "a@example.com", "when": "2023-01-01T12:00:00Z"}
    )
    assert sig.when == datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_signature_from_dict_converts_offset_to_utc():
    sig = GitSignature.from_dict(
        {"name": "A", "email": "a@example.com", "when": "2023-01-01T14:00:00+02:00"}
    )
    assert sig.when == datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_signature_missing_field_raises():
    with pytest.raises(ValueError):
        GitSignature.from_dict({"name": "A", "email": "a@example.com"})


def test_serialization():
    signature = _sig()
    commit = GitCommit(
        id="abc123",
        short_id="abc",
        author=signature,
        committer=signature,
        message="Test commit",
        summary="Test commit",
        parent_ids=["parent1"],
        tree_id="tree1",
    )
    serialized = commit.to_json()
    assert "abc123" in serialized
    assert "Test User" in serialized
    assert "test@example.com" in serialized

    deserialized = GitCommit.from_json(serialized)
    assert deserialized.id == commit.id
    assert deserialized.author.name == commit.author.name
    assert deserialized.author.email == commit.author.email
    assert deserialized == commit


def test_json_is_valid_and_keyed():
    commit = GitCommit("c1", "c1", _sig(), _sig(), "m", "m", ["p"], "t")
    parsed = json.loads(commit.to_json())
    assert sorted(parsed) == sorted(
        ["id", "short_id", "author", "committer", "message", "summary", "parent_ids", "tree_id"]
    )


def test_commit_from_dict_missing_field_raises():
    data = GitCommit("c1", "c1", _sig(), _sig(), "m", "m", [], "t").to_dict()
    del data["tree_id"]
    with pytest.raises(ValueError):
        GitCommit.from_dict(data)


def test_commit_with_multiple_parents_round_trip():
    commit = GitCommit(
        id="merge123",
        short_id="merge12",
        author=_sig("Merger", "merger@example.com"),
        committer=_sig("Merger", "merger@example.com"),
        message="Merge branch 'feature'",
        summary="Merge branch 'feature'",
        parent_ids=["parent1", "parent2"],
        tree_id="tree123",
    )
    restored = GitCommit.from_dict(commit.to_dict())
    assert restored.parent_ids == ["parent1", "parent2"]


def test_git_diff_creation():
    hunk = GitHunk(
        old_start=1,
        old_lines=3,
        new_start=1,
        new_lines=4,
        header="@@ -1,3 +1,4 @@",
        lines=[
            GitDiffLine(" ", "line 1", 1, 1),
            GitDiffLine("+", "new line", None, 2),
        ],
    )
    diff = GitDiff(
        old_file="file.txt",
        new_file="file.txt",
        hunks=[hunk],
        stats=GitDiffStats(files_changed=1, insertions=1, deletions=0),
        is_binary=False,
        status=DiffStatus.MODIFIED,
        similarity=None,
    )
    assert diff.old_file == "file.txt"
    assert len(diff.hunks) == 1
    assert diff.hunks[0].lines[1].old_lineno is None
    assert diff.stats.insertions == 1
    assert diff.status is DiffStatus.MODIFIED


def test_binary_diff_defaults():
    diff = GitDiff(old_file="image.png", new_file="image.png", is_binary=True)
    assert diff.hunks == []
    assert diff.stats == GitDiffStats(0, 0, 0)
    assert diff.status is DiffStatus.MODIFIED


def test_diff_status_variants():
    assert [s.name for s in DiffStatus] == [
        "ADDED",
        "DELETED",
        "MODIFIED",
        "RENAMED",
        "COPIED",
        "IGNORED",
        "UNTRACKED",
        "TYPECHANGE",
    ]
    assert DiffStatus("typechange") is DiffStatus.TYPECHANGE