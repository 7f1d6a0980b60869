"""
Custom exceptions for B2 client operations.

These cover failures detected locally, before or instead of a network call.
Errors reported by the server are raised as ``B2APIError`` (see
``b2py.core.api.errors``).
"""
from typing import Optional


class B2Exception(Exception):
    """Base exception for all locally detected b2py errors."""
    pass


class B2ConfigurationError(B2Exception):
    """Raised when an operation needs a session that has not been established."""
    pass


class B2BucketPermissionError(B2ConfigurationError):
    """Raised when an application key is not restricted to the expected bucket."""
    
    def __init__(
        self,
        message: str,
        bucket_id: Optional[str] = None,
        allowed_bucket_id: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            bucket_id: Bucket the caller asked for
            allowed_bucket_id: Bucket the key is restricted to (None if unrestricted)
        """
        self.bucket_id = bucket_id
        self.allowed_bucket_id = allowed_bucket_id
        super().__init__(message)


class B2LargeFileStateError(B2Exception):
    """Raised when a large-file operation is not valid in the upload's current state."""
    
    def __init__(self, message: str, file_id: Optional[str] = None) -> None:
        self.file_id = file_id
        super().__init__(message)
