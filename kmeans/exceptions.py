"""
Exceptions raised by the K-means package.
"""


class KMeansError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(KMeansError, ValueError):
    """Malformed dataset shape or clustering parameter.

    Raised before any iteration runs; no partial result exists.
    """


class DatasetFormatError(KMeansError, ValueError):
    """Text input that cannot be turned into a numeric matrix."""


class NotFittedError(KMeansError, AttributeError):
    """Results were requested before the run reached a terminal state."""


class EngineStateError(KMeansError, RuntimeError):
    """A step was requested that the engine's current state does not allow."""
