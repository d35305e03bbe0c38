from typing import Dict, Optional


class BlobSampleException(Exception):
    """Base exception for the blob storage sample."""

    def __init__(self, message: str, error_code: str = None, details: Optional[Dict] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ConfigError(BlobSampleException):
    """Raised when credentials or settings are missing or invalid."""
    pass


class TransportError(BlobSampleException):
    """Raised when the storage client fails; the cause is passed through untouched."""
    pass


class CreateError(BlobSampleException):
    """Raised when a blob cannot be created, e.g. it exists with another blob type."""
    pass


class AppendError(BlobSampleException):
    """Raised when the service rejects an append block."""
    pass


class CommitError(BlobSampleException):
    """Raised when a block list references blocks the blob does not have."""
    pass


class ValidationException(BlobSampleException):
    """Raised when a request is rejected locally, before it is transmitted."""
    pass


class InvalidSizeError(ValidationException):
    """Raised when a page blob length is not a multiple of 512."""
    pass


class AlignmentError(ValidationException):
    """Raised when a page range is not aligned to 512-byte boundaries."""
    pass


class RangeError(ValidationException):
    """Raised when a page write extends past the declared blob length."""
    pass


class AlreadyExistsError(BlobSampleException):
    """Raised when a download target already exists on the local filesystem."""
    pass


class VerificationError(BlobSampleException):
    """Raised when read-back content or block states do not match what was written."""
    pass


class LocalIOError(BlobSampleException):
    """Raised when a local output file cannot be written."""
    pass
