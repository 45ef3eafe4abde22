from .engine import SortMovie, Span
from .errors import ConfigError, EncoderError, InvariantViolation, SortMovieError
from .registry import ALGORITHMS, get_movie

__version__ = "0.1.0"
