"""Creating, deleting, inspecting and listing the tags of a repository."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from gitkview.repository import GitCommandError, run_git
from gitkview.tag_rules import (
    TagValidationError,
    is_protected_tag,
    matches_pattern,
    sort_tags,
    validate_commit_id,
    validate_ref_name,
)
from gitkview.tag_types import (
    OperationRecord,
    OperationType,
    TagCreateConfig,
    TagFilterOptions,
    TagInfo,
    TagOperationResult,
    TagSignature,
    TagType,
)

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"
HISTORY_LIMIT = 100
DEFAULT_TAGGER_NAME = "Git User"
DEFAULT_TAGGER_EMAIL = "user@example.com"
DEFAULT_TAG_MESSAGE = "Tag created"

_TAGGER_RE = re.compile(r"^(?P<name>.*?) <(?P<email>[^>]*)> (?P<ts>-?\d+)(?: [+-]\d{4})?$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]{1,64}$")


class TagError(RuntimeError):
    """Raised when a tag cannot be found or a tag lookup is malformed."""


def _tag_ref(tag_name: str) -> str:
    return f"{TAG_REF_PREFIX}{tag_name}"


def _parse_tagger(text: str) -> TagSignature:
    match = _TAGGER_RE.match(text.strip())
    if match is None:
        return TagSignature(name="Unknown", email="unknown@example.com")
    try:
        when = datetime.fromtimestamp(int(match["ts"]), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        when = datetime.now(timezone.utc)
    return TagSignature(
        name=match["name"] or "Unknown",
        email=match["email"] or "unknown@example.com",
        when=when,
    )


class TagManager:
    """Manages the tags of one repository and keeps a history of its operations."""

    def __init__(self, repo_path: str | Path) -> None:
        self.repo_path = Path(repo_path)
        try:
            run_git(self.repo_path, ["rev-parse", "--git-dir"])
        except GitCommandError as exc:
            raise TagError(f"Not a Git repository: {self.repo_path}") from exc
        self._history: list[OperationRecord] = []

    def _git(self, args: list[str]) -> str:
        return run_git(self.repo_path, args)

    def _ref_target(self, tag_name: str) -> str | None:
        try:
            output = self._git(["show-ref", "--verify", _tag_ref(tag_name)])
        except GitCommandError:
            return None
        fields = output.split()
        return fields[0] if fields else None

    def _signature(self, config: TagCreateConfig) -> tuple[str, str]:
        if config.tagger is not None:
            return config.tagger.name, config.tagger.email
        try:
            name = self._git(["config", "user.name"]).strip()
            email = self._git(["config", "user.email"]).strip()
        except GitCommandError:
            return DEFAULT_TAGGER_NAME, DEFAULT_TAGGER_EMAIL
        if name and email:
            return name, email
        return DEFAULT_TAGGER_NAME, DEFAULT_TAGGER_EMAIL

    def _record(self, record: OperationRecord) -> None:
        self._history.append(record)
        del self._history[:-HISTORY_LIMIT]
        logger.info("Recorded tag operation: %s", record.operation_type)

    def create_tag(
        self,
        tag_name: str,
        target_commit: str,
        config: TagCreateConfig | None = None,
    ) -> TagOperationResult:
        """Create a lightweight or annotated tag pointing at ``target_commit``."""
        config = config if config is not None else TagCreateConfig()

        def failure(message: str, name: str = tag_name, target: str | None = None):
            return TagOperationResult(
                success=False,
                operation=OperationType.TAG_CREATE,
                tag_name=name,
                message=message,
                tag_type=config.tag_type,
                target_commit=target,
            )

        try:
            validate_ref_name(tag_name)
        except TagValidationError as exc:
            logger.error("tag creation validation: %s", exc)
            return failure(f"Invalid tag name: {exc}")
        try:
            validate_commit_id(target_commit)
        except TagValidationError as exc:
            logger.error("tag creation validation: %s", exc)
            return failure(f"Invalid commit ID: {exc}")

        if not config.force_overwrite and self._ref_target(tag_name) is not None:
            return failure(
                f"Tag '{tag_name}' already exists. Use force to overwrite.",
                target=target_commit,
            )

        try:
            target_oid = self._git(
                ["rev-parse", "--verify", "-q", f"{target_commit}^{{object}}"]
            ).strip()
        except GitCommandError as exc:
            return failure(f"Target object not found: {exc.message}", target=target_commit)

        name, email = self._signature(config)
        signature: TagSignature | None = None
        ref = _tag_ref(tag_name)
        if config.tag_type == TagType.LIGHTWEIGHT:
            args = ["update-ref", "-m", "Create lightweight tag", ref, target_oid]
            if not config.force_overwrite:
                args.append("")
            try:
                self._git(args)
            except GitCommandError as exc:
                return failure(
                    f"Failed to create lightweight tag: {exc.message}", target=target_commit
                )
        else:
            message = config.message if config.message is not None else DEFAULT_TAG_MESSAGE
            args = [
                "-c", f"user.name={name}",
                "-c", f"user.email={email}",
                "-c", "tag.gpgSign=false",
                "tag", "-a",
            ]
            if config.force_overwrite:
                args.append("-f")
            args += ["-m", message, tag_name, target_oid]
            try:
                self._git(args)
            except GitCommandError as exc:
                return failure(
                    f"Failed to create annotated tag: {exc.message}", target=target_commit
                )
            try:
                signature = self.get_tag_info(tag_name).tagger
            except TagError:
                signature = None
            if signature is None:
                signature = TagSignature(name=name, email=email)

        kind = "annotated" if config.tag_type == TagType.ANNOTATED else "lightweight"
        self._record(
            OperationRecord(
                operation_type=OperationType.TAG_CREATE,
                description=(
                    f"Created {kind} tag '{tag_name}' at commit {target_commit[:8]}"
                ),
                original_state=None,
                new_state=target_oid,
                affected_refs=[ref],
            )
        )
        logger.info("Successfully created %s tag '%s' at commit %s", kind, tag_name, target_commit)
        return TagOperationResult(
            success=True,
            operation=OperationType.TAG_CREATE,
            tag_name=tag_name,
            message="Successfully created tag",
            tag_type=config.tag_type,
            target_commit=target_commit,
            signature=signature,
        )

    def delete_tag(self, tag_name: str, force: bool = False) -> TagOperationResult:
        """Delete a tag; protected tags need ``force``."""

        def failure(message: str, **extra) -> TagOperationResult:
            return TagOperationResult(
                success=False,
                operation=OperationType.TAG_DELETE,
                tag_name=tag_name,
                message=message,
                **extra,
            )

        try:
            validate_ref_name(tag_name)
        except TagValidationError as exc:
            logger.error("tag deletion validation: %s", exc)
            return failure(f"Invalid tag name: {exc}")

        try:
            info = self.get_tag_info(tag_name)
        except TagError:
            return failure(f"Tag '{tag_name}' not found")

        if not force and is_protected_tag(tag_name):
            return failure(
                f"Tag '{tag_name}' is protected. Use force to delete.",
                tag_type=info.tag_type,
                target_commit=info.target_oid,
                signature=info.tagger,
            )

        try:
            self._git(["update-ref", "-d", _tag_ref(tag_name)])
        except GitCommandError as exc:
            message = f"Failed to delete tag: {exc.message}"
            logger.error("Failed to delete tag '%s': %s", tag_name, message)
            return failure(
                message,
                tag_type=info.tag_type,
                target_commit=info.target_oid or None,
                signature=info.tagger,
            )

        self._record(
            OperationRecord(
                operation_type=OperationType.TAG_DELETE,
                description=f"Deleted tag '{tag_name}'",
                original_state=info.target_oid,
                new_state=None,
                affected_refs=[_tag_ref(tag_name)],
            )
        )
        logger.info("Successfully deleted tag '%s'", tag_name)
        return TagOperationResult(
            success=True,
            operation=OperationType.TAG_DELETE,
            tag_name=tag_name,
            message="Successfully deleted tag",
            tag_type=info.tag_type,
            target_commit=info.target_oid,
            signature=info.tagger,
        )

    def get_tag_info(self, tag_name: str) -> TagInfo:
        """Return what is known about a tag; raise TagError if it does not exist."""
        ref_target = self._ref_target(tag_name)
        if ref_target is None:
            raise TagError(f"Tag '{tag_name}' not found")
        try:
            kind = self._git(["cat-file", "-t", ref_target]).strip()
        except GitCommandError as exc:
            raise TagError(f"Tag '{tag_name}' has no readable target: {exc.message}") from exc

        if kind != "tag":
            return TagInfo(
                name=tag_name,
                target_oid=ref_target,
                tag_type=TagType.LIGHTWEIGHT,
                target_type=kind or "any",
            )

        try:
            raw = self._git(["cat-file", "tag", ref_target])
        except GitCommandError as exc:
            raise TagError(f"Cannot read tag object of '{tag_name}': {exc.message}") from exc
        header, _, body = raw.partition("\n\n")
        headers: dict[str, str] = {}
        for line in header.splitlines():
            key, _, value = line.partition(" ")
            headers.setdefault(key, value)
        tagger = _parse_tagger(headers["tagger"]) if "tagger" in headers else None
        return TagInfo(
            name=tag_name,
            target_oid=headers.get("object", ""),
            tag_type=TagType.ANNOTATED,
            target_type=headers.get("type", "any"),
            message=body,
            tagger=tagger,
            created_date=tagger.when if tagger is not None else None,
        )

    def _tag_names(self) -> list[str]:
        output = self._git(["for-each-ref", "--format=%(refname)", TAG_REF_PREFIX])
        return [
            line[len(TAG_REF_PREFIX):]
            for line in output.splitlines()
            if line.startswith(TAG_REF_PREFIX)
        ]

    def _infos(self):
        for name in self._tag_names():
            try:
                yield self.get_tag_info(name)
            except TagError:
                continue

    def list_tags(self, filter: TagFilterOptions | None = None) -> list[TagInfo]:
        """List tags, filtered by pattern and type, sorted and limited."""
        options = filter if filter is not None else TagFilterOptions()
        tags: list[TagInfo] = []
        for name in self._tag_names():
            if options.pattern is not None and not matches_pattern(name, options.pattern):
                continue
            try:
                info = self.get_tag_info(name)
            except TagError:
                continue
            include = (
                options.include_lightweight
                if info.tag_type == TagType.LIGHTWEIGHT
                else options.include_annotated
            )
            if include:
                tags.append(info)
        sort_tags(tags, options.sort_by, options.sort_order)
        if options.limit is not None:
            del tags[options.limit:]
        return tags

    def operation_history(self) -> list[OperationRecord]:
        """Return the recorded operations, oldest first."""
        return list(self._history)

    def get_tags_for_commit(self, commit_id: str) -> list[TagInfo]:
        """Return the tags whose target is the given object id."""
        if not _HEX_RE.match(commit_id):
            raise TagError(f"Invalid object id: {commit_id!r}")
        wanted = commit_id.lower()
        return [info for info in self._infos() if info.target_oid.lower() == wanted]