"""Application configuration with JSON persistence."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from platformdirs import user_config_path

APP_DIR_NAME = "gitk-rust"
CONFIG_FILE_NAME = "config.json"


def default_config_path() -> Path:
    """Return the path of the per-user configuration file."""
    base = user_config_path(APP_DIR_NAME, appauthor=False, roaming=True)
    return base / CONFIG_FILE_NAME


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError):
        raise ValueError(f"missing field {key!r}") from None


class Theme(Enum):
    """Colour theme."""

    LIGHT = "Light"
    DARK = "Dark"
    AUTO = "Auto"


@dataclass
class BranchPattern:
    """A regular expression on branch names and the colour it gets."""

    pattern: str
    color: str
    name: str


def _default_patterns() -> list[BranchPattern]:
    return [
        BranchPattern(pattern="feature/.*", color="#1976D2", name="Feature"),
        BranchPattern(pattern="hotfix/.*", color="#D32F2F", name="Hotfix"),
    ]


@dataclass
class BranchColorSettings:
    """Colours used for branches in the graph."""

    use_branch_colors: bool = True
    main_branch_color: str = "#2E7D32"
    feature_branch_color: str = "#1976D2"
    release_branch_color: str = "#F57C00"
    hotfix_branch_color: str = "#D32F2F"
    custom_patterns: list[BranchPattern] = field(default_factory=_default_patterns)


@dataclass
class DiffSettings:
    """Diff display preferences."""

    context_lines: int = 3
    ignore_whitespace: bool = False
    show_word_diff: bool = True
    syntax_highlighting: bool = True
    max_file_size_kb: int = 1024


@dataclass
class LayoutSettings:
    """Panel layout preferences."""

    default_layout_mode: str = "three_pane"
    left_panel_width_ratio: float = 0.4
    right_panel_width_ratio: float = 0.3
    remember_panel_states: bool = True
    auto_hide_empty_panels: bool = False


@dataclass
class PerformanceSettings:
    """Loading and caching limits."""

    max_commits_to_load: int = 2000
    commit_batch_size: int = 100
    enable_commit_streaming: bool = True
    cache_diffs: bool = True
    max_cached_diffs: int = 50


def _pair(value: Any) -> tuple[float, float]:
    first, second = value
    return (float(first), float(second))


def _plain_from_dict(cls: type, data: dict[str, Any]) -> Any:
    names = cls.__dataclass_fields__  # type: ignore[attr-defined]
    return cls(**{name: _require(data, name) for name in names})


def _plain_to_dict(obj: Any) -> dict[str, Any]:
    return {name: getattr(obj, name) for name in obj.__dataclass_fields__}


@dataclass
class AppConfig:
    """All user preferences of the application."""

    window_size: tuple[float, float] = (1200.0, 800.0)
    window_position: tuple[float, float] | None = None
    recent_repositories: list[Path] = field(default_factory=list)
    max_recent_repos: int = 10
    commit_limit: int = 1000
    font_size: float = 14.0
    theme: Theme = Theme.AUTO
    show_line_numbers: bool = True
    word_wrap: bool = False
    tab_size: int = 4
    auto_refresh_interval: int | None = None
    confirm_destructive_actions: bool = True
    show_relative_dates: bool = True
    compact_view: bool = False
    branch_colors: BranchColorSettings = field(default_factory=BranchColorSettings)
    diff_settings: DiffSettings = field(default_factory=DiffSettings)
    layout_settings: LayoutSettings = field(default_factory=LayoutSettings)
    performance_settings: PerformanceSettings = field(default_factory=PerformanceSettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of the configuration."""
        branch_colors = _plain_to_dict(self.branch_colors)
        branch_colors["custom_patterns"] = [
            _plain_to_dict(p) for p in self.branch_colors.custom_patterns
        ]
        return {
            "window_size": list(self.window_size),
            "window_position": (
                list(self.window_position) if self.window_position is not None else None
            ),
            "recent_repositories": [str(p) for p in self.recent_repositories],
            "max_recent_repos": self.max_recent_repos,
            "commit_limit": self.commit_limit,
            "font_size": self.font_size,
            "theme": self.theme.value,
            "show_line_numbers": self.show_line_numbers,
            "word_wrap": self.word_wrap,
            "tab_size": self.tab_size,
            "auto_refresh_interval": self.auto_refresh_interval,
            "confirm_destructive_actions": self.confirm_destructive_actions,
            "show_relative_dates": self.show_relative_dates,
            "compact_view": self.compact_view,
            "branch_colors": branch_colors,
            "diff_settings": _plain_to_dict(self.diff_settings),
            "layout_settings": _plain_to_dict(self.layout_settings),
            "performance_settings": _plain_to_dict(self.performance_settings),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Build a configuration from a mapping; every field must be present."""
        colors_data = dict(_require(data, "branch_colors"))
        colors_data["custom_patterns"] = [
            _plain_from_dict(BranchPattern, p)
            for p in _require(colors_data, "custom_patterns")
        ]
        position = _require(data, "window_position")
        try:
            theme = Theme(_require(data, "theme"))
            window_size = _pair(_require(data, "window_size"))
            window_position = _pair(position) if position is not None else None
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid configuration: {exc}") from None
        return cls(
            window_size=window_size,
            window_position=window_position,
            recent_repositories=[Path(p) for p in _require(data, "recent_repositories")],
            max_recent_repos=_require(data, "max_recent_repos"),
            commit_limit=_require(data, "commit_limit"),
            font_size=_require(data, "font_size"),
            theme=theme,
            show_line_numbers=_require(data, "show_line_numbers"),
            word_wrap=_require(data, "word_wrap"),
            tab_size=_require(data, "tab_size"),
            auto_refresh_interval=_require(data, "auto_refresh_interval"),
            confirm_destructive_actions=_require(data, "confirm_destructive_actions"),
            show_relative_dates=_require(data, "show_relative_dates"),
            compact_view=_require(data, "compact_view"),
            branch_colors=_plain_from_dict(BranchColorSettings, colors_data),
            diff_settings=_plain_from_dict(DiffSettings, _require(data, "diff_settings")),
            layout_settings=_plain_from_dict(
                LayoutSettings, _require(data, "layout_settings")
            ),
            performance_settings=_plain_from_dict(
                PerformanceSettings, _require(data, "performance_settings")
            ),
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> AppConfig:
        """Read the configuration file; fall back to defaults if it is unusable."""
        config_path = Path(path) if path is not None else default_config_path()
        try:
            content = config_path.read_text(encoding="utf-8")
            return cls.from_dict(json.loads(content))
        except (OSError, ValueError, TypeError, AttributeError):
            return cls()

    def save(self, path: str | Path | None = None) -> Path:
        """Write the configuration as pretty JSON and return the file path."""
        config_path = Path(path) if path is not None else default_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        return config_path

    def add_recent_repository(self, path: str | Path) -> None:
        """Move or insert a repository at the front of the recent list."""
        repo_path = Path(path)
        self.recent_repositories = [p for p in self.recent_repositories if p != repo_path]
        self.recent_repositories.insert(0, repo_path)
        del self.recent_repositories[self.max_recent_repos :]

    def remove_recent_repository(self, path: str | Path) -> None:
        """Drop a repository from the recent list."""
        repo_path = Path(path)
        self.recent_repositories = [p for p in self.recent_repositories if p != repo_path]