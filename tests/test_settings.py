import json
import logging

import pytest

from sortmovies.errors import ConfigError
from sortmovies.settings import DEFAULTS, load_settings


def write(path, obj):
    path.write_text(json.dumps(obj) if not isinstance(obj, str) else obj)
    return str(path)


def test_defaults_without_a_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_settings() == DEFAULTS


def test_default_file_in_working_directory_is_used(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write(tmp_path / "sortmovies.json", {"fps": 24})
    assert load_settings()["fps"] == 24


def test_file_values_override_defaults(tmp_path, caplog):
    path = write(tmp_path / "s.json", {"width": 640, "sound": False, "sustain": 1, "seed": 9})
    with caplog.at_level(logging.INFO, logger="sortmovies.settings"):
        cfg = load_settings(path)
    assert cfg["width"] == 640
    assert cfg["sound"] is False
    assert cfg["sustain"] == 1.0 and isinstance(cfg["sustain"], float)
    assert cfg["seed"] == 9
    assert cfg["height"] == DEFAULTS["height"]
    assert "loaded settings" in caplog.text


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_settings(str(tmp_path / "nope.json"))


@pytest.mark.parametrize("content, message", [
    ("{not json", "could not read"),
    ("[1, 2]", "JSON object"),
    ({"colour": "red"}, "unknown setting"),
    ({"width": "wide"}, "integer"),
    ({"width": True}, "integer"),
    ({"sound": 1}, "true/false"),
    ({"sustain": "long"}, "number"),
    ({"dataset": 3}, "str"),
    ({"seed": 1.5}, "integer or null"),
    ({"fps": 0}, "positive"),
])
def test_bad_settings(tmp_path, content, message):
    path = write(tmp_path / "bad.json", content)
    with pytest.raises(ConfigError, match=message):
        load_settings(path)
