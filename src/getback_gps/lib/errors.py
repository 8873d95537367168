from __future__ import annotations

__all__ = ["InvalidArgumentError"]


class InvalidArgumentError(ValueError):
    """
    Raised when a caller passes an argument the library cannot work with:
    a missing coordinate or converter, or a smoothing factor outside
    [0.0, 1.0].

    The message names the offending parameter. Nothing is retried or
    recovered internally; the caller has to supply a valid argument.
    """

    pass
