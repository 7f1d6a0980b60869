"""
Data models for B2 API requests and responses.

Response models keep the decoded JSON document in ``raw`` so fields this
module does not map are still reachable.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, List, Callable


class BucketType(str, Enum):
    """Storage/visibility classes accepted by the bucket endpoints."""
    ALL_PUBLIC = 'allPublic'
    ALL_PRIVATE = 'allPrivate'
    SNAPSHOT = 'snapshot'


class ResponseType(str, Enum):
    """How a download body is handed back to the caller."""
    BYTES = 'bytes'
    JSON = 'json'
    TEXT = 'text'
    STREAM = 'stream'


@dataclass(frozen=True)
class AllowedCapabilities:
    """
    Restrictions attached to the application key used for authorization.

    Attributes:
        bucket_id: Bucket the key is limited to (None if unrestricted)
        bucket_name: Name of that bucket
        capabilities: Granted capability names
        name_prefix: File name prefix the key is limited to
    """
    bucket_id: Optional[str] = None
    bucket_name: Optional[str] = None
    capabilities: List[str] = field(default_factory=list)
    name_prefix: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AllowedCapabilities':
        data = data or {}
        return cls(
            bucket_id=data.get('bucketId'),
            bucket_name=data.get('bucketName'),
            capabilities=list(data.get('capabilities') or []),
            name_prefix=data.get('namePrefix')
        )


@dataclass(frozen=True)
class AuthorizationResult:
    """
    Session established by ``b2_authorize_account``.

    Attributes:
        account_id: Account the key belongs to
        authorization_token: Session token sent as Authorization on API calls
        api_url: Base URL for API calls
        download_url: Base URL for downloads
        recommended_part_size: Suggested large-file part size in bytes
        absolute_minimum_part_size: Smallest accepted part (except the last)
        allowed: Key restrictions
        raw: Full decoded response
    """
    account_id: str
    authorization_token: str
    api_url: str
    download_url: str
    recommended_part_size: Optional[int] = None
    absolute_minimum_part_size: Optional[int] = None
    allowed: AllowedCapabilities = field(default_factory=AllowedCapabilities)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], account_id: str) -> 'AuthorizationResult':
        """
        Create from a ``b2_authorize_account`` response.

        Args:
            data: Decoded response
            account_id: Key id used to authorize, used when the response omits accountId
        """
        return cls(
            account_id=data.get('accountId') or account_id,
            authorization_token=data['authorizationToken'],
            api_url=data['apiUrl'],
            download_url=data['downloadUrl'],
            recommended_part_size=data.get('recommendedPartSize'),
            absolute_minimum_part_size=data.get('absoluteMinimumPartSize'),
            allowed=AllowedCapabilities.from_dict(data.get('allowed')),
            raw=data
        )


@dataclass(frozen=True)
class BucketInfo:
    """Bucket as returned by the bucket endpoints."""
    bucket_id: str
    bucket_name: str
    bucket_type: Optional[str] = None
    account_id: Optional[str] = None
    bucket_info: Dict[str, Any] = field(default_factory=dict)
    revision: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BucketInfo':
        return cls(
            bucket_id=data.get('bucketId', ''),
            bucket_name=data.get('bucketName', ''),
            bucket_type=data.get('bucketType'),
            account_id=data.get('accountId'),
            bucket_info=data.get('bucketInfo') or {},
            revision=data.get('revision'),
            raw=data
        )


@dataclass(frozen=True)
class UploadTicket:
    """
    Short-lived upload credential.

    Returned by ``b2_get_upload_url`` (``bucket_id`` set) or
    ``b2_get_upload_part_url`` (``file_id`` set). Request a new one per upload.
    """
    upload_url: str
    authorization_token: str
    bucket_id: Optional[str] = None
    file_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadTicket':
        return cls(
            upload_url=data['uploadUrl'],
            authorization_token=data['authorizationToken'],
            bucket_id=data.get('bucketId'),
            file_id=data.get('fileId')
        )


@dataclass(frozen=True)
class FileRecord:
    """
    File metadata returned by the server.

    Attributes:
        file_id: File version id
        file_name: Full file name
        content_length: Size in bytes
        content_sha1: Hex SHA-1 ("none" for large files)
        content_type: MIME type
        upload_timestamp: Milliseconds since epoch
        action: "upload", "start", "hide" or "folder"
        bucket_id: Owning bucket
        file_info: Custom file info
        raw: Full decoded response
    """
    file_id: Optional[str]
    file_name: str
    content_length: int = 0
    content_sha1: Optional[str] = None
    content_type: Optional[str] = None
    upload_timestamp: Optional[int] = None
    action: Optional[str] = None
    bucket_id: Optional[str] = None
    file_info: Dict[str, str] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileRecord':
        return cls(
            file_id=data.get('fileId'),
            file_name=data.get('fileName', ''),
            content_length=data.get('contentLength') or data.get('size') or 0,
            content_sha1=data.get('contentSha1'),
            content_type=data.get('contentType'),
            upload_timestamp=data.get('uploadTimestamp'),
            action=data.get('action'),
            bucket_id=data.get('bucketId'),
            file_info=data.get('fileInfo') or {},
            raw=data
        )


@dataclass(frozen=True)
class FileListPage:
    """
    One page of a file listing.

    Pass ``next_file_name`` (and ``next_file_id`` for versions) back as the
    start cursor to fetch the next page; both are None on the last page.
    """
    files: List[FileRecord]
    next_file_name: Optional[str] = None
    next_file_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_more(self) -> bool:
        return self.next_file_name is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileListPage':
        return cls(
            files=[FileRecord.from_dict(item) for item in data.get('files', [])],
            next_file_name=data.get('nextFileName'),
            next_file_id=data.get('nextFileId'),
            raw=data
        )


@dataclass(frozen=True)
class PartRecord:
    """Result of uploading one large-file part."""
    file_id: str
    part_number: int
    content_length: int
    content_sha1: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PartRecord':
        return cls(
            file_id=data.get('fileId', ''),
            part_number=data.get('partNumber', 0),
            content_length=data.get('contentLength', 0),
            content_sha1=data.get('contentSha1', ''),
            raw=data
        )


@dataclass(frozen=True)
class DownloadAuthorization:
    """Token granting download access to files under a name prefix."""
    bucket_id: str
    file_name_prefix: str
    authorization_token: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DownloadAuthorization':
        return cls(
            bucket_id=data.get('bucketId', ''),
            file_name_prefix=data.get('fileNamePrefix', ''),
            authorization_token=data['authorizationToken'],
            raw=data
        )


@dataclass
class ListFilesOptions:
    """
    Pagination and filtering for file listings.

    Attributes:
        start_file_name: First file name to return (cursor)
        start_file_id: First file id to return, versions listing only (cursor)
        max_file_count: Page size; the server enforces its own limits
        prefix: Only names starting with this prefix
        delimiter: Fold names after this delimiter into folder entries
    """
    start_file_name: Optional[str] = None
    start_file_id: Optional[str] = None
    max_file_count: Optional[int] = None
    prefix: Optional[str] = None
    delimiter: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        """Request body fragment, omitting unset fields."""
        fields = {
            'startFileName': self.start_file_name,
            'startFileId': self.start_file_id,
            'maxFileCount': self.max_file_count,
            'prefix': self.prefix,
            'delimiter': self.delimiter,
        }
        return {key: value for key, value in fields.items() if value is not None}

    def after(self, page: FileListPage) -> 'ListFilesOptions':
        """Options for the page following ``page``."""
        return ListFilesOptions(
            start_file_name=page.next_file_name,
            start_file_id=page.next_file_id,
            max_file_count=self.max_file_count,
            prefix=self.prefix,
            delimiter=self.delimiter
        )


@dataclass(frozen=True)
class TransferProgress:
    """
    Progress notification for an upload or download.

    Attributes:
        loaded: Bytes transferred so far
        total: Total bytes, if known
    """
    loaded: int
    total: Optional[int] = None

    @property
    def percentage(self) -> Optional[float]:
        if not self.total:
            return None
        return (self.loaded / self.total) * 100


ProgressCallback = Callable[[TransferProgress], None]
