from __future__ import annotations

import json
import logging

import pytest

from mandelview.cli import build_parser, main, settings_from_args
from mandelview.settings import Settings, load_settings


def _write(tmp_path, payload) -> str:
    path = tmp_path / "settings.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return str(path)


def test_defaults_when_no_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("mandelview.settings.DEFAULT_SETTINGS_PATH", str(tmp_path / "missing.json"))
    assert load_settings() == Settings()


def test_file_overrides_defaults(tmp_path) -> None:
    path = _write(tmp_path, {"width": 320, "height": 200, "palette": "Ocean", "highlight_cursor": False})
    settings = load_settings(path)
    assert (settings.width, settings.height) == (320, 200)
    assert settings.palette == "Ocean"
    assert settings.highlight_cursor is False
    assert settings.max_iterations == Settings().max_iterations


def test_unknown_keys_are_ignored_with_warning(tmp_path, caplog) -> None:
    path = _write(tmp_path, {"fps": 30, "colour": "red"})
    with caplog.at_level(logging.WARNING, logger="mandelview.settings"):
        settings = load_settings(path)
    assert settings.fps == 30
    assert "colour" in caplog.text


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "[1, 2, 3]",
        {"max_iterations": 0},
        {"width": "wide"},
        {"palette": "Plaid"},
        {"max_iterations": 2.5},
        {"width": 10.5},
        {"fps": True},
        {"highlight_cursor": "yes"},
    ],
)
def test_bad_files_fall_back_to_defaults(tmp_path, caplog, payload) -> None:
    path = _write(tmp_path, payload)
    with caplog.at_level(logging.WARNING, logger="mandelview.settings"):
        assert load_settings(path) == Settings()
    assert caplog.records


def test_explicit_missing_file_warns(tmp_path, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="mandelview.settings"):
        assert load_settings(str(tmp_path / "nope.json")) == Settings()
    assert "not found" in caplog.text


def test_command_line_overrides_file(tmp_path) -> None:
    path = _write(tmp_path, {"width": 320, "max_iterations": 64})
    opt = build_parser().parse_args(
        ["--settings", path, "--iterations", "128", "--palette", "Hot", "--no-cursor"]
    )
    settings = settings_from_args(opt)
    assert settings.width == 320
    assert settings.max_iterations == 128
    assert settings.palette == "Hot"
    assert settings.highlight_cursor is False


def test_invalid_command_line_value_exits(tmp_path) -> None:
    path = _write(tmp_path, {})
    with pytest.raises(SystemExit):
        main(["--settings", path, "--iterations", "0"])


def test_fractional_iterations_never_reach_the_renderer(tmp_path) -> None:
    settings = load_settings(_write(tmp_path, {"max_iterations": 2.5, "width": 320}))
    assert settings == Settings()
    assert isinstance(settings.max_iterations, int)


def test_undecodable_file_falls_back_to_defaults(tmp_path, caplog) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(b'{"fps": "\xff\xfe"}')
    with caplog.at_level(logging.WARNING, logger="mandelview.settings"):
        assert load_settings(str(path)) == Settings()
    assert "Could not read" in caplog.text


def test_directory_path_falls_back_to_defaults(tmp_path, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="mandelview.settings"):
        assert load_settings(str(tmp_path)) == Settings()
    assert "Could not read" in caplog.text
