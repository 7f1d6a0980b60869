"""
B2Bucket - a client pinned to one bucket.

Simplifies the common case of an application key restricted to a single
bucket: the bucket id is supplied once at authorization and injected into
every call.

Example:
    >>> async with B2Bucket() as bucket:
    ...     await bucket.authorize(key_id, application_key, bucket_id)
    ...     record = await bucket.upload("notes/today.txt", b"hello")
"""
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

import aiohttp

from .client import B2Client
from .core.api import (
    APIConfig,
    AuthorizationResult,
    DownloadAuthorization,
    FileListPage,
    FileRecord,
    ListFilesOptions,
    PartRecord,
    ProgressCallback,
    ResponseType,
    UploadTicket,
)
from .core.exceptions import B2ConfigurationError, B2BucketPermissionError
from .core.logging import get_logger
from .core.upload import LargeFileUpload, LargeFileCoordinator, AsyncFileReader, FileValidator

logger = get_logger('b2py.bucket')


class B2Bucket:
    """
    Bucket-scoped facade over ``B2Client``.

    ``authorize`` fails with ``B2BucketPermissionError`` unless the key is
    restricted to the requested bucket. Every other call raises
    ``B2ConfigurationError`` until ``authorize`` has succeeded.
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        client: Optional[B2Client] = None,
        session: Optional[aiohttp.ClientSession] = None,
        transfer_session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Args:
            config: API configuration, used when no client is given
            client: Existing session client to wrap
            session: Optional HTTP session for API calls and downloads
            transfer_session: Optional HTTP session for uploads
        """
        self._client = client or B2Client(
            config, session=session, transfer_session=transfer_session
        )
        self._bucket_id: Optional[str] = None
        self._bucket_name: Optional[str] = None
        self._file_reader = AsyncFileReader()
        self._validator = FileValidator()

    async def __aenter__(self) -> 'B2Bucket':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self._client.close()

    @property
    def client(self) -> B2Client:
        """Wrapped session client."""
        return self._client

    @property
    def bucket_id(self) -> str:
        """
        Bucket all calls are pinned to.

        Raises:
            B2ConfigurationError: Before a successful authorize()
        """
        return self._require_bucket()

    def _require_bucket(self) -> str:
        if self._bucket_id is None:
            raise B2ConfigurationError(
                "Bucket is not authorized; call authorize() first"
            )
        return self._bucket_id

    @property
    def bucket_name(self) -> Optional[str]:
        """Bucket name reported by the server at authorization."""
        return self._bucket_name

    async def authorize(
        self,
        key_id: str,
        application_key: str,
        bucket_id: str
    ) -> AuthorizationResult:
        """
        Authorize with a key restricted to ``bucket_id``.

        Args:
            key_id: Application key id
            application_key: Application key secret
            bucket_id: Bucket the key must be restricted to

        Returns:
            AuthorizationResult of the underlying session

        Raises:
            B2BucketPermissionError: If the key is unrestricted or restricted
                to another bucket
        """
        self._bucket_id = None
        self._bucket_name = None

        result = await self._client.authorize(key_id, application_key)
        allowed_bucket_id = result.allowed.bucket_id

        if not allowed_bucket_id or allowed_bucket_id != bucket_id:
            logger.error(
                f"Key {key_id} is restricted to bucket {allowed_bucket_id}, expected {bucket_id}"
            )
            raise B2BucketPermissionError(
                f"Allowed bucket does not match provided bucket id! "
                f"Bucket id returned: {allowed_bucket_id}",
                bucket_id=bucket_id,
                allowed_bucket_id=allowed_bucket_id
            )

        self._bucket_id = bucket_id
        self._bucket_name = result.allowed.bucket_name
        logger.info(f"Authorized for bucket {self._bucket_name or bucket_id}")
        return result

    # Uploads

    async def get_upload_url(self) -> UploadTicket:
        return await self._client.get_upload_url(self.bucket_id)

    async def upload_file(
        self,
        upload_url: str,
        upload_auth_token: str,
        file_name: str,
        data: bytes,
        content_type: Optional[str] = None,
        content_sha1: Optional[str] = None,
        file_info: Optional[Dict[str, str]] = None,
        progress: Optional[ProgressCallback] = None
    ) -> FileRecord:
        self._require_bucket()
        return await self._client.upload_file(
            upload_url,
            upload_auth_token,
            file_name,
            data,
            content_type=content_type,
            content_sha1=content_sha1,
            file_info=file_info,
            progress=progress
        )

    async def upload(
        self,
        file_name: str,
        data: bytes,
        content_type: Optional[str] = None,
        content_sha1: Optional[str] = None,
        file_info: Optional[Dict[str, str]] = None,
        progress: Optional[ProgressCallback] = None
    ) -> FileRecord:
        """Get a fresh upload ticket and upload ``data`` with it."""
        ticket = await self.get_upload_url()
        return await self.upload_file(
            ticket.upload_url,
            ticket.authorization_token,
            file_name,
            data,
            content_type=content_type,
            content_sha1=content_sha1,
            file_info=file_info,
            progress=progress
        )

    async def upload_path(
        self,
        file_path: Union[str, Path],
        file_name: Optional[str] = None,
        content_type: Optional[str] = None,
        file_info: Optional[Dict[str, str]] = None,
        progress: Optional[ProgressCallback] = None
    ) -> FileRecord:
        """
        Upload a local file in one request.

        Args:
            file_path: Local file
            file_name: B2 file name (defaults to the local name)
        """
        self._require_bucket()
        path, _ = self._validator.validate(file_path)
        data = await self._file_reader.read_file(path)
        return await self.upload(
            file_name or path.name,
            data,
            content_type=content_type,
            file_info=file_info,
            progress=progress
        )

    async def upload_large_path(
        self,
        file_path: Union[str, Path],
        file_name: Optional[str] = None,
        content_type: Optional[str] = None,
        part_size: Optional[int] = None,
        file_info: Optional[Dict[str, str]] = None,
        max_concurrent_uploads: int = 4,
        progress: Optional[ProgressCallback] = None
    ) -> FileRecord:
        """Upload a local file as a large file, in parts."""
        coordinator = LargeFileCoordinator(
            self._client,
            max_concurrent_uploads=max_concurrent_uploads,
            progress_callback=progress
        )
        return await coordinator.upload(
            file_path,
            self.bucket_id,
            file_name=file_name,
            content_type=content_type,
            part_size=part_size,
            file_info=file_info
        )

    # Query and manipulate files

    async def list_file_names(self, options: Optional[ListFilesOptions] = None) -> FileListPage:
        return await self._client.list_file_names(self.bucket_id, options)

    async def list_file_versions(self, options: Optional[ListFilesOptions] = None) -> FileListPage:
        return await self._client.list_file_versions(self.bucket_id, options)

    async def hide_file(self, file_name: str) -> FileRecord:
        return await self._client.hide_file(self.bucket_id, file_name)

    async def get_file_info(self, file_id: str) -> FileRecord:
        self._require_bucket()
        return await self._client.get_file_info(file_id)

    async def delete_file_version(self, file_id: str, file_name: str) -> FileRecord:
        self._require_bucket()
        return await self._client.delete_file_version(file_id, file_name)

    # Downloads

    async def get_download_authorization(
        self,
        file_name_prefix: str,
        valid_duration_in_seconds: int,
        b2_content_disposition: Optional[str] = None
    ) -> DownloadAuthorization:
        """
        Get a download token for files under ``file_name_prefix``.

        ``valid_duration_in_seconds`` is passed through as given; B2 accepts
        1 to 604800.
        """
        return await self._client.get_download_authorization(
            self.bucket_id,
            file_name_prefix,
            valid_duration_in_seconds,
            b2_content_disposition=b2_content_disposition
        )

    async def download_file_by_name(
        self,
        file_name: str,
        bucket_name: Optional[str] = None,
        response_type: Union[ResponseType, str] = ResponseType.BYTES,
        progress: Optional[ProgressCallback] = None
    ) -> Any:
        """
        Download by name. ``bucket_name`` defaults to the name reported at
        authorization.
        """
        self._require_bucket()
        name = bucket_name or self._bucket_name
        if not name:
            raise B2ConfigurationError(
                "Bucket name unknown; pass bucket_name explicitly"
            )
        return await self._client.download_file_by_name(
            name, file_name, response_type=response_type, progress=progress
        )

    async def download_file_by_id(
        self,
        file_id: str,
        response_type: Union[ResponseType, str] = ResponseType.BYTES,
        progress: Optional[ProgressCallback] = None
    ) -> Any:
        self._require_bucket()
        return await self._client.download_file_by_id(
            file_id, response_type=response_type, progress=progress
        )

    # Large files

    async def start_large_file(
        self,
        file_name: str,
        content_type: Optional[str] = None,
        file_info: Optional[Dict[str, str]] = None
    ) -> LargeFileUpload:
        return await self._client.start_large_file(
            self.bucket_id, file_name, content_type=content_type, file_info=file_info
        )

    async def get_upload_part_url(self, file_id: str) -> UploadTicket:
        self._require_bucket()
        return await self._client.get_upload_part_url(file_id)

    async def upload_part(
        self,
        upload_url: str,
        upload_auth_token: str,
        part_number: int,
        data: bytes,
        progress: Optional[ProgressCallback] = None
    ) -> PartRecord:
        self._require_bucket()
        return await self._client.upload_part(
            upload_url, upload_auth_token, part_number, data, progress=progress
        )

    async def finish_large_file(self, file_id: str, part_sha1_array: List[str]) -> FileRecord:
        self._require_bucket()
        return await self._client.finish_large_file(file_id, part_sha1_array)

    async def cancel_large_file(self, file_id: str) -> Dict[str, Any]:
        self._require_bucket()
        return await self._client.cancel_large_file(file_id)

    async def list_unfinished_large_files(
        self,
        name_prefix: Optional[str] = None,
        start_file_id: Optional[str] = None,
        max_file_count: Optional[int] = None
    ) -> FileListPage:
        return await self._client.list_unfinished_large_files(
            self.bucket_id,
            name_prefix=name_prefix,
            start_file_id=start_file_id,
            max_file_count=max_file_count
        )
