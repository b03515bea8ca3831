"""Exceptions raised by the grid building pipeline."""


class BeadGridError(Exception):
    """Base class for failures scoped to a single grid build."""


class DecodeError(BeadGridError):
    """The source image could not be fetched or decoded."""


class SurfaceUnavailableError(BeadGridError):
    """No pixel surface could be allocated for sampling."""
