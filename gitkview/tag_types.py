"""Data types describing tags, tag operations and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OperationType(Enum):
    """Kind of repository operation recorded in a history."""

    TAG_CREATE = "tag_create"
    TAG_DELETE = "tag_delete"


@dataclass
class OperationRecord:
    """One entry of an operation history."""

    operation_type: OperationType
    description: str
    timestamp: datetime = field(default_factory=_utc_now)
    original_state: str | None = None
    new_state: str | None = None
    affected_refs: list[str] = field(default_factory=list)


class TagType(Enum):
    """Whether a tag is a plain reference or a tag object with metadata."""

    LIGHTWEIGHT = "lightweight"
    ANNOTATED = "annotated"


class TagSortBy(Enum):
    """Key by which tag listings are ordered."""

    NAME = "name"
    CREATION_DATE = "creation_date"
    COMMIT_DATE = "commit_date"
    VERSION = "version"


class SortOrder(Enum):
    """Direction of a sort."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass
class TagSignature:
    """Name, e-mail address and time of a tagger."""

    name: str
    email: str
    when: datetime = field(default_factory=_utc_now)


@dataclass
class TagInfo:
    """What is known about one tag."""

    name: str
    target_oid: str
    tag_type: TagType
    target_type: str = "commit"
    message: str | None = None
    tagger: TagSignature | None = None
    created_date: datetime | None = None


@dataclass
class TagCreateConfig:
    """Options for creating a tag."""

    tag_type: TagType = TagType.LIGHTWEIGHT
    message: str | None = None
    force_overwrite: bool = False
    sign_tag: bool = False
    tagger: TagSignature | None = None


@dataclass
class TagFilterOptions:
    """Filtering, ordering and limiting of a tag listing."""

    pattern: str | None = None
    include_lightweight: bool = True
    include_annotated: bool = True
    limit: int | None = None
    sort_by: TagSortBy = TagSortBy.NAME
    sort_order: SortOrder = SortOrder.ASCENDING


@dataclass
class TagOperationResult:
    """Outcome of creating or deleting a tag."""

    success: bool
    operation: OperationType
    tag_name: str
    message: str
    tag_type: TagType = TagType.LIGHTWEIGHT
    target_commit: str | None = None
    signature: TagSignature | None = None