"""Validation, matching and ordering rules for tags."""

from __future__ import annotations

import string
from datetime import datetime, timezone
from functools import cmp_to_key

from gitkview.tag_types import SortOrder, TagInfo, TagSortBy

_MAX_REF_NAME_LENGTH = 255
_FORBIDDEN_REF_CHARS = frozenset(" ~^:?*[\\")
_HEX_DIGITS = frozenset(string.hexdigits)
_MIN_COMMIT_ID_LENGTH = 4
_MAX_COMMIT_ID_LENGTH = 64
_U32_MAX = 2**32 - 1


class TagValidationError(ValueError):
    """Raised when a tag name or commit id is not acceptable."""


def validate_ref_name(name: str) -> None:
    """Check that ``name`` is a well-formed reference name."""
    if not name:
        raise TagValidationError("reference name must not be empty")
    if len(name) > _MAX_REF_NAME_LENGTH:
        raise TagValidationError(
            f"reference name is longer than {_MAX_REF_NAME_LENGTH} characters"
        )
    if name == "@":
        raise TagValidationError("reference name must not be '@'")
    if "@{" in name:
        raise TagValidationError("reference name must not contain '@{'")
    if ".." in name:
        raise TagValidationError("reference name must not contain '..'")
    bad = sorted({ch for ch in name if ch in _FORBIDDEN_REF_CHARS})
    if bad:
        raise TagValidationError(
            f"reference name contains forbidden characters: {''.join(bad)!r}"
        )
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in name):
        raise TagValidationError("reference name contains control characters")
    if name.startswith("/") or name.endswith("/"):
        raise TagValidationError("reference name must not start or end with '/'")
    if name.endswith("."):
        raise TagValidationError("reference name must not end with '.'")
    for component in name.split("/"):
        if not component:
            raise TagValidationError("reference name must not contain '//'")
        if component.startswith("."):
            raise TagValidationError("reference name components must not start with '.'")
        if component.endswith(".lock"):
            raise TagValidationError("reference name components must not end with '.lock'")


def validate_commit_id(commit_id: str) -> None:
    """Check that ``commit_id`` looks like a full or abbreviated object id."""
    if not commit_id:
        raise TagValidationError("commit id must not be empty")
    if not _MIN_COMMIT_ID_LENGTH <= len(commit_id) <= _MAX_COMMIT_ID_LENGTH:
        raise TagValidationError(
            f"commit id must be {_MIN_COMMIT_ID_LENGTH} to "
            f"{_MAX_COMMIT_ID_LENGTH} characters long"
        )
    if any(ch not in _HEX_DIGITS for ch in commit_id):
        raise TagValidationError("commit id must contain only hexadecimal digits")


def matches_pattern(tag_name: str, pattern: str) -> bool:
    """Match a tag name against a pattern holding at most one ``*``."""
    parts = pattern.split("*")
    if len(parts) == 2:
        prefix, suffix = parts
        return tag_name.startswith(prefix) and tag_name.endswith(suffix)
    return tag_name == pattern


def _parse_u32(text: str) -> int | None:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    return value if value <= _U32_MAX else None


def _version_parts(tag: str) -> list[int]:
    parsed = (_parse_u32(part) for part in tag.lstrip("v").split("."))
    return [value for value in parsed if value is not None]


def compare_version_tags(a: str, b: str) -> int:
    """Compare two tags as dotted version numbers; return -1, 0 or 1."""
    version_a = _version_parts(a)
    version_b = _version_parts(b)
    for va, vb in zip(version_a, version_b):
        if va != vb:
            return -1 if va < vb else 1
    return (len(version_a) > len(version_b)) - (len(version_a) < len(version_b))


def is_protected_tag(tag_name: str) -> bool:
    """Tell whether a tag is protected from deletion without force."""
    return tag_name.startswith("v") or tag_name.startswith("release-") or tag_name == "latest"


def sort_tags(tags: list[TagInfo], sort_by: TagSortBy, order: SortOrder) -> list[TagInfo]:
    """Sort ``tags`` in place by the given key and direction and return it."""
    descending = order == SortOrder.DESCENDING
    if sort_by == TagSortBy.NAME:
        tags.sort(key=lambda tag: tag.name, reverse=descending)
    elif sort_by == TagSortBy.CREATION_DATE:
        now = datetime.now(timezone.utc)
        tags.sort(
            key=lambda tag: tag.created_date if tag.created_date is not None else now,
            reverse=descending,
        )
    elif sort_by == TagSortBy.COMMIT_DATE:
        tags.sort(key=lambda tag: tag.target_oid, reverse=descending)
    else:
        tags.sort(
            key=cmp_to_key(lambda x, y: compare_version_tags(x.name, y.name)),
            reverse=descending,
        )
    return tags