"""Centralized error classes for upstage."""


class UploadError(Exception):
    """Base class for upload failures."""

    pass


class ConfigurationError(UploadError):
    """Raised when packaging or deployment configuration is invalid."""

    pass


class InvalidArgumentError(UploadError, ValueError):
    """Raised when an upload step is called without a usable argument."""

    pass


class ArtifactReadError(UploadError):
    """Raised when a local artifact cannot be read."""

    pass


class RemoteError(UploadError):
    """Raised when the object store rejects a request or cannot be reached."""

    pass
