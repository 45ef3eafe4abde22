import math

import numpy as np

from . import settings

# ============================================================
# ======================= TONE TRACK =========================
# ============================================================
#
# HOW THE TONE TRACK WORKS
# ========================
#
# Every video frame may trigger one note (the key the machine touched on
# that step). Each note is an _Osc. Per frame, all live oscillators are
# mixed into exactly one frame's worth of samples, so audio and video stay
# locked together no matter how the frames are pulled.
#
# WAVEFORM:  wave[t] = sin(2pi * phase[t]) + HARMONIC_BLEND * sin(4pi * phase[t])
#
# ENVELOPE (raised cosine, no clicks):
#   Attack:  env[t] = 0.5 * (1 - cos(pi * t / A))         t in [0, A)
#   Release: env[t] = 0.5 * (1 + cos(pi * (t-start) / R))  t in [max_age-R, max_age)
#
# VOICE STEALING: past max_voices, the oldest voice gets a short release.
#
# NORMALISATION: mix / sqrt(n_voices), keeps loudness steady.
#
# Frames rarely hold a whole number of samples (44100 / 60 = 735 exactly,
# but 44100 / 24 = 1837.5), so the fractional remainder is carried forward.

TWO_PI = 2.0 * math.pi


class _Osc:
    """
    Single oscillator voice.

    freq    : float  frequency in Hz
    phase   : float  current phase in [0, 1)
    age     : int    samples rendered so far
    max_age : int    total lifetime in samples
    attack  : int    attack length in samples
    release : int    release length in samples
    """
    __slots__ = ('freq', 'phase', 'age', 'max_age', 'attack', 'release')

    def __init__(self, freq, max_age, attack, release):
        self.freq    = freq
        self.phase   = 0.0
        self.age     = 0
        self.max_age = max_age
        self.attack  = attack
        self.release = release


class ToneTrack:
    def __init__(self, fps=settings.FPS, sample_rate=settings.SAMPLE_RATE,
                 freq_low=settings.FREQ_LOW, freq_high=settings.FREQ_HIGH,
                 sustain=settings.SOUND_SUSTAIN, attack=settings.SOUND_ATTACK,
                 release=settings.SOUND_RELEASE, harmonic_blend=settings.HARMONIC_BLEND,
                 max_voices=settings.MAX_VOICES):
        self.fps          = fps
        self.sample_rate  = sample_rate
        self.freq_low     = freq_low
        self.freq_high    = freq_high
        self.harmonic     = harmonic_blend
        self.max_voices   = max_voices
        self.sustain_smp  = max(1, int(sustain * sample_rate))
        self.attack_smp   = max(1, int(attack * sample_rate))
        self.release_smp  = max(1, int(release * sample_rate))
        self._oscs        = []
        self._chunks      = []
        self._carry       = 0.0
        self.last_pcm     = np.zeros(0, dtype=np.int16)
        self.samples      = 0      # position counter: total samples rendered

    @classmethod
    def from_settings(cls, cfg):
        return cls(fps=cfg["fps"], sample_rate=cfg["sample_rate"],
                   freq_low=cfg["freq_low"], freq_high=cfg["freq_high"],
                   sustain=cfg["sustain"], attack=cfg["attack"],
                   release=cfg["release"], harmonic_blend=cfg["harmonic_blend"],
                   max_voices=cfg["max_voices"])

    def trigger(self, value: int, max_value: int = 255):
        """
        Start a note for a key. Maps value linearly onto [freq_low, freq_high].
        """
        ratio = value / max_value
        freq  = self.freq_low + ratio * (self.freq_high - self.freq_low)
        osc   = _Osc(freq, self.sustain_smp, self.attack_smp, self.release_smp)
        if len(self._oscs) >= self.max_voices:
            oldest = self._oscs[0]
            steal_release  = min(settings.VOICE_STEAL_FADE, oldest.release)
            oldest.max_age = min(oldest.max_age, oldest.age + steal_release)
            oldest.release = steal_release
        self._oscs.append(osc)

    def _frame_length(self):
        exact = self.sample_rate / self.fps + self._carry
        n = int(exact)
        self._carry = exact - n
        return n

    def _gen_chunk(self, size) -> np.ndarray:
        """
        Mix `size` samples (one video frame's worth) from the live voices and
        age them by the same amount. Voices past their release are dropped.
        """
        buf = np.zeros(size, dtype=np.float64)
        if size == 0:
            return buf
        idx = np.arange(size, dtype=np.float64)

        alive = []
        for o in self._oscs:
            abs_age = idx + o.age

            phases = (o.phase + idx * (o.freq / self.sample_rate)) % 1.0
            wave = np.sin(TWO_PI * phases)
            if self.harmonic > 0.0:
                wave += self.harmonic * np.sin(TWO_PI * 2.0 * phases)

            env = np.ones(size, dtype=np.float64)
            a_mask = abs_age < o.attack
            if np.any(a_mask):
                env[a_mask] = 0.5 * (1.0 - np.cos(math.pi * abs_age[a_mask] / o.attack))

            rel_start = o.max_age - o.release
            r_mask = abs_age >= rel_start
            if np.any(r_mask):
                env[r_mask] = 0.5 * (1.0 + np.cos(
                    math.pi * (abs_age[r_mask] - rel_start) / o.release
                ))
                env[r_mask] = np.maximum(0.0, env[r_mask])
            env[abs_age >= o.max_age] = 0.0

            buf += wave * env

            o.phase = (o.phase + size * (o.freq / self.sample_rate)) % 1.0
            o.age  += size
            if o.age < o.max_age:
                alive.append(o)

        self._oscs = alive
        n_voices = max(1, len(alive))
        buf /= math.sqrt(n_voices) * (1.0 + self.harmonic)
        return buf

    def render_frame(self) -> np.ndarray:
        """Mix one video frame of audio; returns int16 samples."""
        mono = self._gen_chunk(self._frame_length())
        pcm  = (np.clip(mono, -1.0, 1.0) * 32767 * 0.85).astype(np.int16)
        self._chunks.append(pcm)
        self.last_pcm = pcm
        self.samples += len(pcm)
        return pcm

    def pcm_bytes(self) -> bytes:
        """Everything rendered so far: mono, signed 16-bit little-endian."""
        if not self._chunks:
            return b""
        return np.concatenate(self._chunks).astype("<i2").tobytes()
