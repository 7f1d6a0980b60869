"""
b2py - Async, typed Python client for Backblaze B2 cloud storage.

Usage:
    >>> from b2py import B2Client
    >>> 
    >>> async with B2Client() as b2:
    ...     await b2.authorize(key_id, application_key)
    ...     for bucket in await b2.list_buckets():
    ...         print(bucket.bucket_name)
"""
import logging
from .client import B2Client
from .bucket import B2Bucket

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    AsyncAPIClient,
    AsyncAuthService,
    B2APIError,
    ResponseStream,
)

# Models
from .core.api import (
    AllowedCapabilities,
    AuthorizationResult,
    BucketInfo,
    BucketType,
    DownloadAuthorization,
    FileListPage,
    FileRecord,
    ListFilesOptions,
    PartRecord,
    ResponseType,
    TransferProgress,
    UploadTicket,
)
from .core.upload import LargeFileUpload, LargeFileState, LargeFileCoordinator, AUTO_CONTENT_TYPE
from .core.exceptions import (
    B2Exception,
    B2ConfigurationError,
    B2BucketPermissionError,
    B2LargeFileStateError,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for b2py modules.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'b2py',
        'b2py.api',
        'b2py.auth',
        'b2py.client',
        'b2py.bucket',
        'b2py.upload',
        'b2py.upload.file',
        'b2py.upload.large_file',
        'b2py.upload.coordinator',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'B2Client',
    'B2Bucket',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'AsyncAPIClient',
    'AsyncAuthService',
    'ResponseStream',
    'AllowedCapabilities',
    'AuthorizationResult',
    'BucketInfo',
    'BucketType',
    'DownloadAuthorization',
    'FileListPage',
    'FileRecord',
    'ListFilesOptions',
    'PartRecord',
    'ResponseType',
    'TransferProgress',
    'UploadTicket',
    'LargeFileUpload',
    'LargeFileState',
    'LargeFileCoordinator',
    'AUTO_CONTENT_TYPE',
    'B2Exception',
    'B2ConfigurationError',
    'B2BucketPermissionError',
    'B2LargeFileStateError',
    'B2APIError',
    'setup_logging',
]
