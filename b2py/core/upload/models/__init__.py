"""Upload data models."""
from .upload_models import AUTO_CONTENT_TYPE, UploadRequest, PartUploadRequest

__all__ = [
    'AUTO_CONTENT_TYPE',
    'UploadRequest',
    'PartUploadRequest',
]
