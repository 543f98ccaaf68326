"""
Exceptions raised by escapetime.

All of these are precondition failures: they are raised synchronously
when a render is requested (or a value is parsed), never in the middle
of a render.
"""


class RenderError(ValueError):
    """Base class for invalid render requests."""


class InvalidRegion(RenderError):
    """Region bounds are non-finite or have min >= max on an axis."""


class InvalidIterationBound(RenderError):
    """max_iter is not a positive integer."""


class InvalidIterationPolicy(RenderError):
    """Unknown iteration policy name or id."""


class InvalidPalette(RenderError):
    """Unknown palette name."""


class InvalidColor(RenderError):
    """Color text is not of the form #RRGGBB."""


class InvalidSupersample(RenderError):
    """Supersampling factor is smaller than 1."""


class InvalidSurface(RenderError):
    """Surface has no usable (positive) width and height."""
