import json

import pytest

from sortmovies import app, encoder
from sortmovies.app import build_parser, main, resolve_config


@pytest.fixture(autouse=True)
def clean_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_list(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "tournament" in out
    assert "Trinity Rotation" in out


def test_algorithm_is_required():
    with pytest.raises(SystemExit):
        main([])


def test_unknown_algorithm():
    with pytest.raises(SystemExit):
        main(["bogo"])


@pytest.mark.parametrize("key", ["heap", "radix_merge", "tournament", "rotate"])
def test_dry_run(key, capsys):
    assert main([key, "--size", "64", "--seed", "5"]) == 0
    out = capsys.readouterr().out
    assert "64 items finished" in out


def test_dry_run_respects_max_frames(capsys):
    assert main(["quick", "--size", "200", "--max-frames", "3"]) == 0
    assert "stopped after 3 steps" in capsys.readouterr().out


def test_flags_override_config_file(tmp_path):
    cfg_path = tmp_path / "c.json"
    cfg_path.write_text(json.dumps({"size": 10, "fps": 12, "dataset": "sorted"}))
    args = build_parser().parse_args(["merge", "--config", str(cfg_path), "--size", "20", "--no-sound"])
    cfg = resolve_config(args)
    assert cfg["size"] == 20
    assert cfg["fps"] == 12
    assert cfg["dataset"] == "sorted"
    assert cfg["sound"] is False


def test_bad_config_is_reported(tmp_path, capsys):
    assert main(["merge", "--config", str(tmp_path / "missing.json")]) == 1


def test_negative_size():
    assert main(["merge", "--size", "-3"]) == 1


def test_out_writes_through_ffmpeg(monkeypatch, tmp_path):
    calls = []

    class Recorder:
        def __init__(self, path, width, height, fps, ffmpeg="ffmpeg", sample_rate=44100):
            calls.append((path, width, height, fps, ffmpeg))

        def write_video(self, movie, max_frames=None):
            movie.run(max_frames)
            return movie.steps + 1

    monkeypatch.setattr(app, "FfmpegWriter", Recorder)
    out = str(tmp_path / "m.mp4")
    assert main(["merge", "--out", out, "--size", "16", "--width", "64", "--height", "48"]) == 0
    assert calls == [(out, 64, 48, 60, "ffmpeg")]


def test_missing_ffmpeg_is_reported(monkeypatch, tmp_path):
    monkeypatch.setattr(encoder.shutil, "which", lambda name: None)
    assert main(["merge", "--out", str(tmp_path / "m.mp4"), "--size", "8"]) == 1


def test_preview_plays_headless(capsys):
    assert main(["heap", "--preview", "--size", "8", "--no-sound",
                 "--width", "80", "--height", "60", "--max-frames", "3"]) == 0
    assert "stopped after 3 steps" in capsys.readouterr().out
