import logging
import os
import shutil
import subprocess
import tempfile
import wave

from . import settings
from .errors import EncoderError, InvariantViolation
from .surface import PygameSurface

logger = logging.getLogger(__name__)


class FfmpegWriter:
    """
    Pull frames from a movie and pipe them into ffmpeg as raw rgb24.

    Video goes straight to `path`. If the movie carried a tone track the
    samples are written to a temporary WAV afterwards and muxed in with a
    second ffmpeg pass.
    """

    def __init__(self, path, width=settings.WINDOW_WIDTH, height=settings.WINDOW_HEIGHT,
                 fps=settings.FPS, ffmpeg="ffmpeg", sample_rate=settings.SAMPLE_RATE):
        self.path        = os.path.abspath(path)
        self.width       = width
        self.height      = height
        self.fps         = fps
        self.sample_rate = sample_rate
        self.ffmpeg      = shutil.which(ffmpeg)
        if self.ffmpeg is None:
            raise EncoderError(f"{ffmpeg} not found on PATH; install ffmpeg to write videos")

    def video_command(self, path):
        return [self.ffmpeg, "-y", "-loglevel", "error",
                "-f", "rawvideo", "-pix_fmt", "rgb24",
                "-s", f"{self.width}x{self.height}", "-r", str(self.fps),
                "-i", "-", "-an",
                "-c:v", "libx264", "-pix_fmt", "yuv420p", path]

    def mux_command(self, video_path, wav_path):
        return [self.ffmpeg, "-y", "-loglevel", "error",
                "-i", video_path, "-i", wav_path,
                "-c:v", "copy", "-c:a", "aac", "-shortest", self.path]

    def write_video(self, movie, max_frames=None) -> int:
        """
        Returns the number of frames written. A movie that runs to the end
        gets one extra frame showing the finished buffer.
        """
        surface = PygameSurface(self.width, self.height)
        has_audio = movie.tone is not None
        video_path = self.path
        if has_audio:
            root, ext = os.path.splitext(self.path)
            video_path = f"{root}.video{ext or '.mp4'}"

        logger.info("encoding %s (%d items) to %s", movie.title, movie.n, self.path)
        proc = subprocess.Popen(self.video_command(video_path), stdin=subprocess.PIPE)
        frames = 0
        try:
            while max_frames is None or frames < max_frames:
                finished = movie.done
                try:
                    movie.advance(frames, surface)
                except InvariantViolation as e:
                    logger.error("%s stopped at frame %d: %s", movie.title, frames, e)
                    finished = True
                proc.stdin.write(surface.frame_bytes())
                frames += 1
                if finished:
                    break
        except BrokenPipeError as e:
            raise EncoderError(f"ffmpeg exited early while writing {video_path}") from e
        finally:
            try:
                proc.stdin.close()
            except BrokenPipeError:
                pass
            code = proc.wait()
        if code != 0:
            logger.error("ffmpeg exited with status %d", code)
            raise EncoderError(f"ffmpeg failed with status {code}")

        if has_audio:
            self.mux_audio(video_path, movie.audio_samples())
        logger.info("wrote %d frames (%d steps) to %s", frames, movie.steps, self.path)
        return frames

    def mux_audio(self, video_path, pcm):
        fd, wav_path = tempfile.mkstemp(suffix=".wav")
        os.close(fd)
        try:
            with wave.open(wav_path, "wb") as w:
                w.setnchannels(1)
                w.setsampwidth(2)
                w.setframerate(self.sample_rate)
                w.writeframes(pcm)
            proc = subprocess.run(self.mux_command(video_path, wav_path),
                                  capture_output=True, text=True)
            if proc.returncode != 0:
                logger.error("ffmpeg mux failed:\n%s", proc.stderr)
                raise EncoderError(f"ffmpeg mux failed with status {proc.returncode}")
        finally:
            os.remove(wav_path)
            if os.path.exists(video_path):
                os.remove(video_path)
