from __future__ import annotations

from pathlib import Path

import pytest

from apgscan.config import Config
from apgscan.host import parse_html
from apgscan.query import is_visible
from apgscan.standards import configure_standards, get, reset_standards, table_names
from apgscan.types import AnalyzerConfig, Confidence


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_without_file_uses_defaults(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = Config.load()
    assert config.path is None
    assert config.analyzer_config() == AnalyzerConfig()
    assert config.min_duration() == 0.5
    assert config.watch_patterns() == ["*.html", "*.htm"]
    assert config.debounce() == 0.5


def test_load_explicit_missing_path_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        Config.load(tmp_path / "nope.toml")


def test_load_apgscan_toml(tmp_path) -> None:
    path = _write(
        tmp_path / "apgscan.toml",
        """
[analyzer]
enabled_types = ["dialog"]
min_confidence = "medium"
include_suggestions = false

[scan]
min_duration_ms = 250

[watch]
patterns = "*.xhtml"
debounce_ms = 100
""",
    )
    config = Config.load(path)
    assert config.root == tmp_path
    assert config.analyzer_config() == AnalyzerConfig(
        enabled_types=("dialog",),
        min_confidence=Confidence.MEDIUM,
        include_suggestions=False,
    )
    assert config.min_duration() == 0.25
    assert config.watch_patterns() == ["*.xhtml"]
    assert config.debounce() == 0.1


def test_flag_overrides_win_and_none_is_ignored(tmp_path) -> None:
    path = _write(tmp_path / "apgscan.toml", '[analyzer]\nmin_confidence = "high"\n')
    config = Config.load(path)
    assert config.analyzer_config(min_confidence=None).min_confidence is Confidence.HIGH
    assert config.analyzer_config(min_confidence="low").min_confidence is Confidence.LOW


def test_find_walks_up_to_pyproject_tool_table(tmp_path) -> None:
    _write(tmp_path / "pyproject.toml", '[project]\nname = "site"\n\n[tool.apgscan.scan]\nmin_duration_ms = 0\n')
    nested = tmp_path / "pages" / "admin"
    nested.mkdir(parents=True)
    found = Config.find(nested)
    assert found == (tmp_path / "pyproject.toml").resolve()
    config = Config.load(found)
    assert config.min_duration() == 0.0


def test_find_skips_pyproject_without_tool_table(tmp_path) -> None:
    _write(tmp_path / "apgscan.toml", "")
    package = tmp_path / "site"
    package.mkdir()
    _write(package / "pyproject.toml", '[project]\nname = "site"\n')
    assert Config.find(package) == (tmp_path / "apgscan.toml").resolve()


def test_apgscan_toml_preferred_over_pyproject_in_same_folder(tmp_path) -> None:
    _write(tmp_path / "pyproject.toml", "[tool.apgscan]\n")
    _write(tmp_path / "apgscan.toml", "")
    assert Config.find(tmp_path).name == "apgscan.toml"


def test_invalid_toml_is_reported_as_value_error(tmp_path) -> None:
    path = _write(tmp_path / "apgscan.toml", "[analyzer\n")
    with pytest.raises(ValueError):
        Config.load(path)


def test_negative_min_duration_rejected(tmp_path) -> None:
    config = Config.load(_write(tmp_path / "apgscan.toml", "[scan]\nmin_duration_ms = -5\n"))
    with pytest.raises(ValueError):
        config.min_duration()


def test_standards_section_extends_hidden_classes(tmp_path) -> None:
    path = _write(tmp_path / "apgscan.toml", '[standards]\nhidden_classes = ["is-closed"]\n')
    node = parse_html('<div class="is-closed"></div>').div
    assert is_visible(node)
    Config.load(path).apply_standards()
    assert not is_visible(node)
    assert get("hidden_classes") == ["is-closed"]


def test_build_session_carries_file_settings(tmp_path) -> None:
    path = _write(
        tmp_path / "apgscan.toml",
        '[analyzer]\ninclude_suggestions = false\n\n[scan]\nmin_duration_ms = 0\n',
    )
    session = Config.load(path).build_session()
    assert session.min_duration == 0.0
    assert session.config.include_suggestions is False
    override = Config.load(path).build_session(min_duration=1.5)
    assert override.min_duration == 1.5


def test_configure_standards_merges_mappings_and_rejects_unknown_tables() -> None:
    configure_standards({"input_type_roles": {"color": "button"}})
    assert get("input_type_roles")["color"] == "button"
    assert get("input_type_roles")["checkbox"] == "checkbox"
    with pytest.raises(ValueError):
        configure_standards({"not_a_table": {}})
    with pytest.raises(KeyError):
        get("not_a_table")
    reset_standards()
    assert "color" not in get("input_type_roles")
    assert set(table_names()) >= {"implicit_roles", "input_type_roles", "hidden_classes"}


def test_find_skips_unparsable_pyproject(tmp_path) -> None:
    _write(tmp_path / "apgscan.toml", "")
    project = tmp_path / "project"
    project.mkdir()
    _write(project / "pyproject.toml", "[tool.apgscan\n")
    assert Config.find(project) == (tmp_path / "apgscan.toml").resolve()
