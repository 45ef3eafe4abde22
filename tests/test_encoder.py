import logging
import subprocess

import pytest

from sortmovies import encoder
from sortmovies.audio import ToneTrack
from sortmovies.encoder import FfmpegWriter
from sortmovies.errors import EncoderError
from sortmovies.quicksort import QuickSortMovie
from sortmovies.engine import Span
from sortmovies.registry import get_movie

W, H = 64, 36


class FakeStdin:
    def __init__(self):
        self.chunks = []
        self.closed = False

    def write(self, data):
        self.chunks.append(bytes(data))

    def close(self):
        self.closed = True


class FakePopen:
    instances = []
    returncode = 0

    def __init__(self, cmd, stdin=None):
        self.cmd = cmd
        self.stdin = FakeStdin()
        FakePopen.instances.append(self)

    def wait(self):
        return self.returncode


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    FakePopen.instances = []
    FakePopen.returncode = 0
    runs = []

    def fake_run(cmd, **kwargs):
        runs.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(encoder.shutil, "which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(encoder.subprocess, "Popen", FakePopen)
    monkeypatch.setattr(encoder.subprocess, "run", fake_run)
    return runs


def test_missing_ffmpeg(monkeypatch, tmp_path):
    monkeypatch.setattr(encoder.shutil, "which", lambda name: None)
    with pytest.raises(EncoderError, match="not found"):
        FfmpegWriter(str(tmp_path / "a.mp4"), W, H, 30)


def test_writes_one_frame_per_advance(fake_ffmpeg, tmp_path):
    movie = get_movie("merge", bytes(range(16, 0, -1)), "video")
    writer = FfmpegWriter(str(tmp_path / "a.mp4"), W, H, 30)
    frames = writer.write_video(movie)

    proc = FakePopen.instances[0]
    assert frames == movie.steps + 1
    assert len(proc.stdin.chunks) == frames
    assert all(len(c) == W * H * 3 for c in proc.stdin.chunks)
    assert proc.stdin.closed
    assert proc.cmd[-1] == str(tmp_path / "a.mp4")
    assert "rgb24" in proc.cmd and f"{W}x{H}" in proc.cmd
    assert fake_ffmpeg == []  # no audio, no mux pass


def test_max_frames_truncates(fake_ffmpeg, tmp_path):
    movie = get_movie("heap", bytes(range(64)), "video")
    frames = FfmpegWriter(str(tmp_path / "a.mp4"), W, H, 30).write_video(movie, max_frames=5)
    assert frames == 5
    assert movie.steps == 5
    assert not movie.done


def test_audio_is_muxed_in_a_second_pass(fake_ffmpeg, tmp_path):
    out = tmp_path / "b.mp4"
    movie = get_movie("quick", bytes(range(30, 0, -1)), "video", tone=ToneTrack(fps=30))
    FfmpegWriter(str(out), W, H, 30).write_video(movie)

    video_cmd = FakePopen.instances[0].cmd
    assert video_cmd[-1] == str(tmp_path / "b.video.mp4")
    assert len(fake_ffmpeg) == 1
    mux = fake_ffmpeg[0]
    assert "aac" in mux and mux[-1] == str(out)
    wav = mux[mux.index("-i", mux.index("-i") + 1) + 1]
    assert wav.endswith(".wav")
    assert not (tmp_path / "b.video.mp4").exists()


def test_invariant_violation_ends_the_video(fake_ffmpeg, tmp_path, caplog):
    movie = QuickSortMovie("bad", bytes(range(10)))
    movie.stack = [Span(0, 40)]
    with caplog.at_level(logging.ERROR, logger="sortmovies.encoder"):
        frames = FfmpegWriter(str(tmp_path / "c.mp4"), W, H, 30).write_video(movie)
    assert frames == 1
    assert movie.failure is not None
    assert "stopped at frame 0" in caplog.text


def test_ffmpeg_failure(fake_ffmpeg, tmp_path):
    FakePopen.returncode = 1
    movie = get_movie("heap", bytes(4), "video")
    with pytest.raises(EncoderError, match="status 1"):
        FfmpegWriter(str(tmp_path / "d.mp4"), W, H, 30).write_video(movie)
