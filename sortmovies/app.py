import argparse
import logging
import sys

import numpy as np
import pygame

from . import settings
from .audio import ToneTrack
from .datasets import DATASETS
from .encoder import FfmpegWriter
from .errors import ConfigError, EncoderError, InvariantViolation
from .registry import ALGORITHMS, get_movie
from .surface import PygameSurface

logger = logging.getLogger(__name__)

# CLI flag -> settings key; None means "not given, keep the settings value"
OVERRIDES = {
    "size":    "size",
    "dataset": "dataset",
    "seed":    "seed",
    "places":  "places",
    "width":   "width",
    "height":  "height",
    "fps":     "fps",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sortmovies",
        description="Render sorting algorithms to video, one primitive operation per frame.",
    )
    parser.add_argument("algorithm", nargs="?", choices=[k for _, k in ALGORITHMS],
                        help="algorithm key (see --list)")
    parser.add_argument("--size", type=int, help="number of 8-bit keys")
    parser.add_argument("--dataset", choices=sorted(DATASETS), help="input data shape")
    parser.add_argument("--seed", type=int, help="random seed for the dataset")
    parser.add_argument("--places", type=int, help="rotation distance (rotate only)")
    parser.add_argument("--out", metavar="FILE", help="write an mp4 here")
    parser.add_argument("--max-frames", type=int, help="stop after this many frames")
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--fps", type=int)
    parser.add_argument("--config", metavar="FILE",
                        help=f"JSON settings file (default: ./{settings.SETTINGS_JSON} if present)")
    parser.add_argument("--no-sound", action="store_true", help="leave the tone track out")
    parser.add_argument("--preview", action="store_true", help="play in a window; ESC stops")
    parser.add_argument("--list", action="store_true", help="list algorithms and exit")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def resolve_config(args) -> dict:
    cfg = settings.load_settings(args.config)
    for flag, key in OVERRIDES.items():
        value = getattr(args, flag)
        if value is not None:
            cfg[key] = value
    if args.no_sound:
        cfg["sound"] = False
    if cfg["size"] < 0:
        raise ConfigError(f"size must not be negative, got {cfg['size']}")
    if cfg["dataset"] not in DATASETS:
        raise ConfigError(f"unknown dataset {cfg['dataset']!r}")
    return cfg


def make_movie(key, cfg):
    data = DATASETS[cfg["dataset"]](cfg["size"], cfg["seed"])
    tone = ToneTrack.from_settings(cfg) if cfg["sound"] else None
    return get_movie(key, data, cfg["dataset"], tone=tone, places=cfg["places"])


# ============================================================
# ========================= PREVIEW ==========================
# ============================================================

def _open_mixer(cfg):
    try:
        pygame.mixer.pre_init(cfg["sample_rate"], -16, 2, 512)
        pygame.mixer.init()
    except pygame.error as e:
        logger.warning("no audio device, preview is silent: %s", e)
        return None
    return pygame.mixer.Channel(1)


def preview(movie, cfg, max_frames=None):
    """
    Play the movie in a window at the configured frame rate. The window
    only listens for "stop" (ESC or closing it).
    """
    pygame.init()
    screen = pygame.display.set_mode((cfg["width"], cfg["height"]))
    pygame.display.set_caption(f"sortmovies: {movie.title}")
    surface = PygameSurface(cfg["width"], cfg["height"], screen)
    channel = _open_mixer(cfg) if movie.tone is not None else None
    clock = pygame.time.Clock()

    frame = 0
    try:
        while max_frames is None or frame < max_frames:
            clock.tick(cfg["fps"])
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT: return frame
                if ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE: return frame
            finished = movie.done
            try:
                movie.advance(frame, surface)
            except InvariantViolation as e:
                logger.error("%s stopped at frame %d: %s", movie.title, frame, e)
                finished = True
            if channel is not None and len(movie.tone.last_pcm):
                pcm = movie.tone.last_pcm
                channel.queue(pygame.mixer.Sound(buffer=np.column_stack((pcm, pcm)).tobytes()))
            pygame.display.flip()
            frame += 1
            if finished:
                pygame.time.wait(1800)
                break
    finally:
        pygame.quit()
    return frame


# ============================================================
# =========================== MAIN ===========================
# ============================================================

def summary(movie) -> str:
    state = "failed" if movie.failure is not None else ("finished" if movie.done else "stopped")
    return f"{movie.title}: {movie.n} items {state} after {movie.steps} steps ({movie.counters})"


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        for name, key in ALGORITHMS:
            print(f"{key:16} {name}")
        return 0
    if args.algorithm is None:
        parser.error("an algorithm is required (see --list)")

    try:
        cfg = resolve_config(args)
        if not (args.out or args.preview):
            cfg["sound"] = False  # nothing would hear it
        movie = make_movie(args.algorithm, cfg)
        if args.out:
            writer = FfmpegWriter(args.out, cfg["width"], cfg["height"], cfg["fps"],
                                  ffmpeg=cfg["ffmpeg"], sample_rate=cfg["sample_rate"])
            writer.write_video(movie, args.max_frames)
        elif args.preview:
            preview(movie, cfg, args.max_frames)
        else:
            movie.run(args.max_frames)
    except (ConfigError, EncoderError) as e:
        logger.error("%s", e)
        return 1
    except InvariantViolation as e:
        logger.error("%s", e)
        print(summary(movie))
        return 1

    print(summary(movie))
    return 1 if movie.failure is not None else 0


if __name__ == "__main__":
    sys.exit(main())
