# gitkview

A Python library for reading and managing a Git repository: commit data
models, named and filtered lists of commits, tag creation and deletion, and
persistent user settings. Every repository operation runs the `git`
command-line program, so `git` must be installed and on `PATH`.

## Installation

```
pip install gitkview
```

To run the test suite:

```
pip install "gitkview[test]"
pytest
```

## Modules

### `gitkview.models`

Dataclasses for commits and diffs:

- `GitSignature` holds a name, an e-mail address and a time. `to_dict()`
  writes the time as an RFC 3339 UTC string, and `from_dict()` reads it back.
- `GitCommit` holds the id, short id, author, committer, message, summary,
  parent ids and tree id. It has `to_dict()`/`from_dict()` and
  `to_json()`/`from_json()`. `from_dict()` raises `ValueError` when a field
  is missing.
- `GitDiff`, `GitHunk`, `GitDiffLine`, `GitDiffStats` and the `DiffStatus`
  enum describe the diff of a file.

### `gitkview.config`

`AppConfig` stores the user's preferences: window size and position, recent
repositories, commit limit, font size, `Theme`, and the nested
`BranchColorSettings` (with its `BranchPattern` list), `DiffSettings`,
`LayoutSettings` and `PerformanceSettings`.

- `AppConfig.load(path=None)` reads the JSON file. If the file is missing or
  unreadable, it returns the defaults.
- `AppConfig.save(path=None)` writes pretty-printed JSON, creating any missing
  directories, and returns the path it wrote.
- When no path is given, both methods use `default_config_path()`, which is in
  the per-user configuration directory.
- `add_recent_repository(path)` moves the path to the front of the list or
  inserts it there. The list is then trimmed to `max_recent_repos`.
  `remove_recent_repository(path)` removes the path from the list.

### `gitkview.repository`

- `run_git(repo_path, args)` runs `git` in the repository and returns its
  standard output. It raises `GitCommandError` if git cannot be started or
  exits with an error.
- `load_commits(repo_path, commit_ids)` returns a `GitCommit` for each id that
  is a full object id of a commit. Other ids are skipped.
- `RepositoryInfo.from_repo(path)` reports the repository's top-level
  directory, name, whether it is bare, the current branch, local branches,
  tags and remotes. `FileEntry` and `TreeEntry` are plain records.

### `gitkview.views`

- `ViewFilter` selects commits by author, committer, message, file, date
  range, branch, maximum count and whether merges are included.
  `to_git_args()` turns the filter into `git rev-list` arguments.
  `matches_commit()` checks the author, committer, message and merge
  criteria against a loaded commit. It matches case-insensitively unless
  `case_sensitive` is set. It treats patterns as plain substrings, even when
  `use_regex` is set.
- `get_commits_from_git_args(repo_path, args)` runs `git rev-list` and loads
  the commits it lists.
- `GitView` pairs a filter with its last loaded commits.
  `update_commits(repo_path)` and `refresh(repo_path)` reload them, and
  `is_stale(max_age)` accepts a `timedelta` or a number of seconds.
- `ViewManager` holds named views, starting with one called `"Default"`. It
  has these methods:
  - `add_view`
  - `remove_view`: the default view cannot be removed (`ValueError`).
  - `switch_view`: an unknown name raises `KeyError`.
  - `current_view`
  - `current_view_name`
  - `get_view`
  - `view_names`
  - `update_current_view`
  - `refresh_view`
  - `refresh_all_views`: logs the views that fail and carries on.
  - `cleanup_stale_views`
- `ViewPreset.common_presets()` returns these ready-made filters: "Recent",
  "My Commits", "No Merges", "Bug Fixes" and "Features".

### `gitkview.tag_types`, `gitkview.tag_rules`, `gitkview.tags`

- `tag_types` defines the records: `TagInfo`, `TagSignature`,
  `TagCreateConfig`, `TagFilterOptions`, `TagOperationResult` and
  `OperationRecord`. It also defines the enums `TagType`, `TagSortBy`,
  `SortOrder` and `OperationType`.
- `tag_rules` provides the rules:
  - `validate_ref_name` and `validate_commit_id` raise `TagValidationError`.
  - `matches_pattern` accepts a pattern with at most one `*`.
  - `compare_version_tags` compares dotted versions such as `v1.2.3`.
  - `is_protected_tag` protects names starting with `v` or `release-`, and
    the name `latest`.
  - `sort_tags` sorts by name, creation date, target id or version.
- `TagManager(repo_path)` raises `TagError` if the path is not in a Git
  repository. It has these methods:
  - `create_tag(tag_name, target_commit, config)` makes a lightweight or
    annotated tag. An annotated tag is never GPG-signed.
  - `delete_tag(tag_name, force)` deletes a tag. Protected tags need
    `force=True`.
  - `get_tag_info(tag_name)` raises `TagError` for an unknown tag.
  - `list_tags(filter)` lists tags.
  - `get_tags_for_commit(commit_id)` finds the tags that point at a given id.
  - `operation_history()` returns the last 100 operations.

  `create_tag` and `delete_tag` do not raise on bad input or a git failure.
  They return a `TagOperationResult` with `success=False` and a message.

## Example

```python
from gitkview.config import AppConfig
from gitkview.repository import RepositoryInfo
from gitkview.tag_types import TagCreateConfig, TagType
from gitkview.tags import TagManager
from gitkview.views import ViewFilter, ViewManager

info = RepositoryInfo.from_repo("/path/to/repo")
print(info.name, info.head_branch, info.branches)

views = ViewManager()
views.add_view("No Merges", ViewFilter(name="No Merges", include_merges=False))
views.switch_view("No Merges")
views.update_current_view("/path/to/repo")
for commit in views.current_view().commits:
    print(commit.short_id, commit.summary)

manager = TagManager("/path/to/repo")
head = views.current_view().commits[0].id
result = manager.create_tag(
    "v1.0.0",
    head,
    TagCreateConfig(tag_type=TagType.ANNOTATED, message="Version 1.0.0"),
)
print(result.success, result.message)

config = AppConfig.load()
config.add_recent_repository("/path/to/repo")
config.save()
```

## What it does not do

gitkview is a library only. It has no command to run, no graphical window and
no commit-graph drawing. The diff classes in `gitkview.models` are data
containers, and nothing in the package computes a diff to fill them. Commits
are loaded all at once, not streamed. Branch, stash and remote operations are
not provided; `RepositoryInfo` only lists branch, tag and remote names.