import json
import logging
import os

from .errors import ConfigError

logger = logging.getLogger(__name__)

# ============================================================
# ===================== USER SETTINGS ========================
# ============================================================

WINDOW_WIDTH  = 1280
WINDOW_HEIGHT = 720
FPS           = 60

BACKGROUND_COLOR = (0, 0, 0)
DATA_BG_COLOR    = (0, 0, 160)
POINT_COLOR      = (173, 216, 230)
TEXT_COLOR       = (245, 245, 245)

# cursor / marker colours, shared by every movie so they read the same way
CURSOR_LEFT   = (255, 0, 255)
CURSOR_RIGHT  = (255, 0, 0)
CURSOR_MID    = (0, 139, 139)
CURSOR_SPAN   = (0, 255, 255)
CURSOR_STACK  = (255, 165, 0)
CURSOR_MARK   = (0, 128, 0)
CURSOR_GOLD   = (255, 215, 0)

# ============================================================
# ====================== SOUND SETTINGS ======================
# ============================================================
#
# The tone track is an offline version of a live oscillator engine: one
# note is triggered per frame for the key touched on that step.

ENABLE_SOUND   = True
SAMPLE_RATE    = 44100
FREQ_LOW       = 120.0
FREQ_HIGH      = 1200.0
SOUND_SUSTAIN  = 0.10
SOUND_ATTACK   = 0.004
SOUND_RELEASE  = 0.040
HARMONIC_BLEND = 0.08
MAX_VOICES     = 24
VOICE_STEAL_FADE = 64

# JSON file read from the working directory when no --config is given
SETTINGS_JSON = "sortmovies.json"

DEFAULTS = {
    "width":          WINDOW_WIDTH,
    "height":         WINDOW_HEIGHT,
    "fps":            FPS,
    "sound":          ENABLE_SOUND,
    "sample_rate":    SAMPLE_RATE,
    "freq_low":       FREQ_LOW,
    "freq_high":      FREQ_HIGH,
    "sustain":        SOUND_SUSTAIN,
    "attack":         SOUND_ATTACK,
    "release":        SOUND_RELEASE,
    "harmonic_blend": HARMONIC_BLEND,
    "max_voices":     MAX_VOICES,
    "size":           512,
    "dataset":        "random",
    "seed":           None,
    "places":         256,
    "ffmpeg":         "ffmpeg",
}


def _check_type(key, value, default):
    if default is None:
        if value is not None and not isinstance(value, int):
            raise ConfigError(f"{key}: expected an integer or null, got {value!r}")
        return value
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigError(f"{key}: expected true/false, got {value!r}")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key}: expected an integer, got {value!r}")
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{key}: expected a number, got {value!r}")
        return float(value)
    if not isinstance(value, type(default)):
        raise ConfigError(f"{key}: expected {type(default).__name__}, got {value!r}")
    return value


def load_settings(path=None) -> dict:
    """
    Defaults overridden by a JSON object read from `path`.
    With no path, `sortmovies.json` in the working directory is used if it
    exists; an explicit path that does not exist is an error.
    """
    settings = dict(DEFAULTS)
    explicit = path is not None
    if path is None:
        path = SETTINGS_JSON
    if not os.path.exists(path):
        if explicit:
            raise ConfigError(f"settings file not found: {path}")
        return settings

    try:
        with open(path) as f:
            loaded = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"could not read {path}: {e}") from e
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path}: expected a JSON object at the top level")

    for key, value in loaded.items():
        if key not in DEFAULTS:
            raise ConfigError(f"{path}: unknown setting {key!r}")
        settings[key] = _check_type(key, value, DEFAULTS[key])

    if settings["width"] <= 0 or settings["height"] <= 0 or settings["fps"] <= 0:
        raise ConfigError(f"{path}: width, height and fps must be positive")
    logger.info("loaded settings from %s", path)
    return settings
