"""
Data models for upload module.

Each request model knows the exact header set its endpoint expects.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from ...crypto import sha1_hex
from ...utils import url_encode_filename

AUTO_CONTENT_TYPE = 'b2/x-auto'


@dataclass(frozen=True)
class UploadRequest:
    """
    Single-shot upload of a whole file.
    
    Attributes:
        upload_url: Ticket URL from get_upload_url
        upload_auth_token: Ticket token (not the session token)
        file_name: Full B2 file name, may contain '/'
        data: File contents
        content_type: MIME type, "b2/x-auto" lets the server detect it
        content_sha1: Hex SHA-1 of data, computed when omitted
        file_info: Custom metadata sent as X-Bz-Info-* headers
    """
    upload_url: str
    upload_auth_token: str
    file_name: str
    data: bytes
    content_type: Optional[str] = None
    content_sha1: Optional[str] = None
    file_info: Dict[str, str] = field(default_factory=dict)
    
    def headers(self) -> Dict[str, str]:
        headers = {
            'Authorization': self.upload_auth_token,
            'Content-Type': self.content_type or AUTO_CONTENT_TYPE,
            'Content-Length': str(len(self.data)),
            'X-Bz-File-Name': url_encode_filename(self.file_name),
            'X-Bz-Content-Sha1': self.content_sha1 or sha1_hex(self.data),
        }
        for key, value in self.file_info.items():
            headers[f'X-Bz-Info-{key}'] = url_encode_filename(str(value))
        return headers


@dataclass(frozen=True)
class PartUploadRequest:
    """
    Upload of one large-file part.
    
    The checksum is always computed from ``data``; the finish call needs it.
    
    Attributes:
        upload_url: Ticket URL from get_upload_part_url
        upload_auth_token: Ticket token
        part_number: 1-based part index (server accepts 1..10000)
        data: Part contents
    """
    upload_url: str
    upload_auth_token: str
    part_number: int
    data: bytes
    
    @property
    def content_sha1(self) -> str:
        return sha1_hex(self.data)
    
    def headers(self) -> Dict[str, str]:
        return {
            'Authorization': self.upload_auth_token,
            'Content-Length': str(len(self.data)),
            'X-Bz-Part-Number': str(self.part_number),
            'X-Bz-Content-Sha1': self.content_sha1,
        }
