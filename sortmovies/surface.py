"""
Drawing surfaces.

A movie only ever calls three things on the surface it is handed:

    clear(color)
    fill_rect(x, y, w, h, color)
    draw_text(text, x, y, color=None, size="small")

and reads `width` / `height`. Anything offering those can be drawn on.
`PygameSurface` is the real one (frames for the encoder and the preview
window); `RecordingSurface` just remembers what was asked of it.
"""
import pygame

from . import settings


def value_to_color(value, max_value=255):
    r = value / max_value
    if r < 0.25: return (0, int(255 * r * 4), 255)
    if r < 0.5:  return (0, 255, int(255 * (1 - (r - 0.25) * 4)))
    if r < 0.75: return (int(255 * (r - 0.5) * 4), 255, 0)
    return (255, int(255 * (1 - (r - 0.75) * 4)), 0)


def build_fonts():
    pygame.font.init()

    def tf(names, sz):
        for n in names:
            if pygame.font.match_font(n):
                return pygame.font.SysFont(n, sz)
        return pygame.font.SysFont(None, sz)

    mono = ["Consolas", "DejaVu Sans Mono", "Courier New"]
    sans = ["Segoe UI", "DejaVu Sans", "Arial"]
    return dict(title=tf(sans, 26), small=tf(sans, 18), tiny=tf(mono, 12))


class PygameSurface:
    """Off-screen pygame surface. Needs no display, so it works headless."""

    def __init__(self, width, height, surface=None):
        self.width   = width
        self.height  = height
        self.surface = surface if surface is not None else pygame.Surface((width, height))
        self._fonts  = None

    @property
    def fonts(self):
        if self._fonts is None:
            self._fonts = build_fonts()
        return self._fonts

    def clear(self, color):
        self.surface.fill(color)

    def fill_rect(self, x, y, w, h, color):
        w, h = int(w), int(h)
        if w <= 0 or h <= 0:
            return
        pygame.draw.rect(self.surface, color, (int(x), int(y), w, h))

    def draw_text(self, text, x, y, color=None, size="small"):
        f = self.fonts[size]
        self.surface.blit(f.render(text, True, color or settings.TEXT_COLOR), (int(x), int(y)))

    def frame_bytes(self) -> bytes:
        """Packed RGB24, row-major; what ffmpeg's rawvideo/rgb24 input expects."""
        return pygame.image.tobytes(self.surface, "RGB")


class RecordingSurface:
    """Remembers every call. Used by tests and by dry runs."""

    def __init__(self, width=settings.WINDOW_WIDTH, height=settings.WINDOW_HEIGHT):
        self.width  = width
        self.height = height
        self.calls  = []
        self.clears = 0

    def clear(self, color):
        self.clears += 1
        self.calls.append(("clear", color))

    def fill_rect(self, x, y, w, h, color):
        self.calls.append(("fill_rect", x, y, w, h, color))

    def draw_text(self, text, x, y, color=None, size="small"):
        self.calls.append(("draw_text", text, x, y))

    @property
    def texts(self):
        """Text drawn since the most recent clear."""
        out = []
        for call in self.calls:
            if call[0] == "clear":
                out = []
            elif call[0] == "draw_text":
                out.append(call[1])
        return out
