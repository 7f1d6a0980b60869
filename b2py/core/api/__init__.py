"""B2 API module."""
from .errors import B2APIError
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig
from .models import (
    AllowedCapabilities,
    AuthorizationResult,
    BucketInfo,
    BucketType,
    DownloadAuthorization,
    FileListPage,
    FileRecord,
    ListFilesOptions,
    PartRecord,
    ProgressCallback,
    ResponseType,
    TransferProgress,
    UploadTicket,
)
from .async_client import AsyncAPIClient, ResponseStream
from .async_auth import AsyncAuthService

__all__ = [
    # Client
    'AsyncAPIClient',
    'AsyncAuthService',
    'ResponseStream',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    
    # Models
    'AllowedCapabilities',
    'AuthorizationResult',
    'BucketInfo',
    'BucketType',
    'DownloadAuthorization',
    'FileListPage',
    'FileRecord',
    'ListFilesOptions',
    'PartRecord',
    'ProgressCallback',
    'ResponseType',
    'TransferProgress',
    'UploadTicket',
    
    # Errors
    'B2APIError',
]
