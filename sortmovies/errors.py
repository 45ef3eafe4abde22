class SortMovieError(Exception):
    """Base class for everything this package raises on purpose."""


class InvariantViolation(SortMovieError):
    """
    A machine reached a state its algorithm can never legitimately reach
    (index out of bounds, overlapping or inverted span, heap slot filled
    twice ...). The machine is finished after this; callers treat it as
    "no more frames".
    """


class ConfigError(SortMovieError):
    pass


class EncoderError(SortMovieError):
    pass
