import json
from pathlib import Path

import pytest

from gitkview.config import (
    AppConfig,
    BranchPattern,
    Theme,
    default_config_path,
)


def test_configuration_defaults():
    config = AppConfig()
    assert config.window_size == (1200.0, 800.0)
    assert config.show_line_numbers
    assert config.theme is Theme.AUTO
    assert config.branch_colors.custom_patterns[0] == BranchPattern(
        "feature/.*", "#1976D2", "Feature"
    )
    assert config.performance_settings.max_commits_to_load == 2000


def test_configuration_save_and_load(tmp_path):
    config = AppConfig()
    target = tmp_path / "nested" / "config.json"
    written = config.save(target)
    assert written == target
    assert target.exists()

    loaded = AppConfig.load(target)
    assert loaded.font_size == config.font_size
    assert loaded == config


def test_round_trip_with_custom_values(tmp_path):
    config = AppConfig(
        window_position=(10.0, 20.0),
        theme=Theme.DARK,
        auto_refresh_interval=30,
    )
    config.add_recent_repository(Path("/tmp/repo"))
    config.layout_settings.default_layout_mode = "single"
    target = tmp_path / "config.json"
    config.save(target)
    loaded = AppConfig.load(target)
    assert loaded.window_position == (10.0, 20.0)
    assert loaded.theme is Theme.DARK
    assert loaded.recent_repositories == [Path("/tmp/repo")]
    assert loaded.layout_settings.default_layout_mode == "single"


def test_saved_json_uses_field_names(tmp_path):
    target = AppConfig().save(tmp_path / "config.json")
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["theme"] == "Auto"
    assert data["window_size"] == [1200.0, 800.0]
    assert data["window_position"] is None
    assert data["diff_settings"]["context_lines"] == 3


def test_load_missing_file_gives_defaults(tmp_path):
    assert AppConfig.load(tmp_path / "absent.json") == AppConfig()


def test_load_invalid_json_gives_defaults(tmp_path):
    target = tmp_path / "config.json"
    target.write_text("{not json", encoding="utf-8")
    assert AppConfig.load(target) == AppConfig()


def test_load_incomplete_json_gives_defaults(tmp_path):
    target = tmp_path / "config.json"
    target.write_text(json.dumps({"font_size": 20.0}), encoding="utf-8")
    assert AppConfig.load(target).font_size == 14.0


def test_from_dict_missing_field_raises():
    data = AppConfig().to_dict()
    del data["tab_size"]
    with pytest.raises(ValueError):
        AppConfig.from_dict(data)


def test_from_dict_bad_theme_raises():
    data = AppConfig().to_dict()
    data["theme"] = "Purple"
    with pytest.raises(ValueError):
        AppConfig.from_dict(data)


def test_add_recent_repository_moves_to_front():
    config = AppConfig()
    config.add_recent_repository("/a")
    config.add_recent_repository("/b")
    config.add_recent_repository("/a")
    assert config.recent_repositories == [Path("/a"), Path("/b")]


def test_add_recent_repository_truncates():
    config = AppConfig(max_recent_repos=2)
    for name in ("/a", "/b", "/c"):
        config.add_recent_repository(name)
    assert config.recent_repositories == [Path("/c"), Path("/b")]


def test_remove_recent_repository():
    config = AppConfig()
    config.add_recent_repository("/a")
    config.add_recent_repository("/b")
    config.remove_recent_repository(Path("/a"))
    assert config.recent_repositories == [Path("/b")]


def test_default_config_path_name():
    path = default_config_path()
    assert path.name == "config.json"
    assert path.parent.name == "gitk-rust"