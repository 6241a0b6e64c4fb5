"""
This module contains the exceptions raised by bcartifacts.
"""


class BcArtifactsException(Exception):
    """
    Base class for all bcartifacts errors.
    """

    def __init__(self, message: str):
        super().__init__(message)


class InvalidArtifactUrlError(BcArtifactsException):
    """Raised when an artifact URL cannot be mapped into the cache folder."""


class SasTokenError(BcArtifactsException):
    """Raised when the SAS token embedded in an artifact URL cannot be used."""


class InvalidSasTokenError(SasTokenError):
    """Raised when a signed URL has no readable expiry."""


class ExpiredSasTokenError(SasTokenError):
    """Raised when the SAS token embedded in an artifact URL has expired."""


class ArtifactDownloadError(BcArtifactsException):
    """Raised when a file could not be downloaded."""


class ArchiveError(BcArtifactsException):
    """Raised when a downloaded archive could not be expanded."""


class ManifestError(BcArtifactsException):
    """Raised when an artifact manifest is missing or unreadable."""


class RedirectLoopError(BcArtifactsException):
    """
    Raised when manifest redirections revisit a URL or exceed the configured
    number of hops.
    """
