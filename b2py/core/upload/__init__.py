"""
Upload module for B2 file uploads.

Request models for single-shot and part uploads, the tracked large-file
state object, and a coordinator that uploads local files as large files.
"""
from .models import AUTO_CONTENT_TYPE, UploadRequest, PartUploadRequest
from .large_file import LargeFileUpload, LargeFileState
from .coordinator import LargeFileCoordinator
from .protocols import ChunkingStrategy, FileReaderProtocol, LargeFileApiProtocol
from .services import FileValidator, AsyncFileReader
from .strategies import FixedSizeChunkingStrategy

__all__ = [
    # Models
    'AUTO_CONTENT_TYPE',
    'UploadRequest',
    'PartUploadRequest',
    
    # Large files
    'LargeFileUpload',
    'LargeFileState',
    'LargeFileCoordinator',
    
    # Protocols
    'ChunkingStrategy',
    'FileReaderProtocol',
    'LargeFileApiProtocol',
    
    # Services
    'FileValidator',
    'AsyncFileReader',
    'FixedSizeChunkingStrategy',
]
