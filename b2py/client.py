"""
B2Client - typed async client for the Backblaze B2 API.

Example:
    >>> async with B2Client() as b2:
    ...     await b2.authorize(key_id, application_key)
    ...     buckets = await b2.list_buckets()
"""
from typing import Optional, List, Dict, Any, Union

import aiohttp

from .core.api import (
    AsyncAPIClient,
    AsyncAuthService,
    APIConfig,
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
    UploadTicket,
)
from .core.logging import get_logger
from .core.upload import AUTO_CONTENT_TYPE, LargeFileUpload, UploadRequest, PartUploadRequest
from .core.utils import url_encode_filename

logger = get_logger('b2py.client')


class B2Client:
    """
    Session client: one coroutine per B2 endpoint.

    ``authorize`` must complete before any other call; until then every
    operation raises ``B2ConfigurationError`` without touching the network.
    Non-2xx responses raise ``B2APIError``; transport failures propagate as
    aiohttp raises them. Nothing is retried.

    Uploads go to the ticket's URL over a separate bare HTTP session, so the
    session token is never sent to upload hosts.
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        transfer_session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Args:
            config: API configuration
            session: Optional HTTP session for API calls and downloads
            transfer_session: Optional HTTP session for uploads
        """
        self._config = config or APIConfig.default()
        self._api = AsyncAPIClient(self._config, session=session, transfer_session=transfer_session)
        self._auth = AsyncAuthService(self._api)

    async def __aenter__(self) -> 'B2Client':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying HTTP sessions."""
        await self._api.close()

    @property
    def api(self) -> AsyncAPIClient:
        """Underlying transport client."""
        return self._api

    @property
    def authorization(self) -> Optional[AuthorizationResult]:
        """Current session, None before authorize()."""
        return self._api.authorization

    @property
    def account_id(self) -> Optional[str]:
        auth = self._api.authorization
        return auth.account_id if auth else None

    @property
    def download_url(self) -> Optional[str]:
        auth = self._api.authorization
        return auth.download_url if auth else None

    # Authorization

    async def authorize(self, key_id: str, application_key: str) -> AuthorizationResult:
        """
        Authorize with an application key.

        With the master key, ``key_id`` is the account id. With a normal
        application key, use the key id and key returned when it was created.
        Any previous session is replaced.

        Do not call this while other operations on the client are in flight.
        """
        return await self._auth.authorize(key_id, application_key)

    # Buckets

    async def create_bucket(
        self,
        bucket_name: str,
        bucket_type: Union[BucketType, str]
    ) -> BucketInfo:
        auth = self._api.require_authorization()
        data = await self._api.call('b2_create_bucket', {
            'accountId': auth.account_id,
            'bucketName': bucket_name,
            'bucketType': BucketType(bucket_type).value,
        })
        return BucketInfo.from_dict(data)

    async def delete_bucket(self, bucket_id: str) -> BucketInfo:
        auth = self._api.require_authorization()
        data = await self._api.call('b2_delete_bucket', {
            'accountId': auth.account_id,
            'bucketId': bucket_id,
        })
        return BucketInfo.from_dict(data)

    async def list_buckets(self) -> List[BucketInfo]:
        auth = self._api.require_authorization()
        data = await self._api.call('b2_list_buckets', {'accountId': auth.account_id})
        return [BucketInfo.from_dict(item) for item in data.get('buckets', [])]

    async def update_bucket(
        self,
        bucket_id: str,
        bucket_type: Union[BucketType, str]
    ) -> BucketInfo:
        auth = self._api.require_authorization()
        data = await self._api.call('b2_update_bucket', {
            'accountId': auth.account_id,
            'bucketId': bucket_id,
            'bucketType': BucketType(bucket_type).value,
        })
        return BucketInfo.from_dict(data)

    # Uploads

    async def get_upload_url(self, bucket_id: str) -> UploadTicket:
        """Get an upload ticket for one single-shot upload into a bucket."""
        data = await self._api.call('b2_get_upload_url', {'bucketId': bucket_id})
        return UploadTicket.from_dict(data)

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
        """
        Upload a whole file using an upload ticket.

        Args:
            upload_url: Ticket URL
            upload_auth_token: Ticket token
            file_name: B2 file name; '/' separates virtual folders
            data: File contents
            content_type: MIME type, defaults to "b2/x-auto"
            content_sha1: Hex SHA-1 of data, computed when omitted
            file_info: Custom metadata (X-Bz-Info-*)
            progress: Optional progress callback

        Returns:
            FileRecord of the new file version
        """
        request = UploadRequest(
            upload_url=upload_url,
            upload_auth_token=upload_auth_token,
            file_name=file_name,
            data=data,
            content_type=content_type,
            content_sha1=content_sha1,
            file_info=dict(file_info or {})
        )
        response = await self._api.upload(
            request.upload_url, request.headers(), request.data, progress=progress
        )
        logger.debug(f"Uploaded {file_name} ({len(data)} bytes)")
        return FileRecord.from_dict(response)

    # Query and manipulate files

    async def list_file_names(
        self,
        bucket_id: str,
        options: Optional[ListFilesOptions] = None
    ) -> FileListPage:
        """
        List one page of file names. Loop with ``options.after(page)``
        while ``page.has_more``.
        """
        body = {'bucketId': bucket_id, **(options or ListFilesOptions()).to_body()}
        body.pop('startFileId', None)
        data = await self._api.call('b2_list_file_names', body)
        return FileListPage.from_dict(data)

    async def list_file_versions(
        self,
        bucket_id: str,
        options: Optional[ListFilesOptions] = None
    ) -> FileListPage:
        """List one page of file versions, including hidden ones."""
        body = {'bucketId': bucket_id, **(options or ListFilesOptions()).to_body()}
        data = await self._api.call('b2_list_file_versions', body)
        return FileListPage.from_dict(data)

    async def hide_file(self, bucket_id: str, file_name: str) -> FileRecord:
        data = await self._api.call('b2_hide_file', {
            'bucketId': bucket_id,
            'fileName': file_name,
        })
        return FileRecord.from_dict(data)

    async def get_file_info(self, file_id: str) -> FileRecord:
        data = await self._api.call('b2_get_file_info', {'fileId': file_id})
        return FileRecord.from_dict(data)

    async def delete_file_version(self, file_id: str, file_name: str) -> FileRecord:
        data = await self._api.call('b2_delete_file_version', {
            'fileId': file_id,
            'fileName': file_name,
        })
        return FileRecord.from_dict(data)

    # Downloads

    async def get_download_authorization(
        self,
        bucket_id: str,
        file_name_prefix: str,
        valid_duration_in_seconds: int,
        b2_content_disposition: Optional[str] = None
    ) -> DownloadAuthorization:
        """
        Get a token for downloading files under a prefix from a private bucket.

        Args:
            bucket_id: Bucket to grant access to
            file_name_prefix: Names the token is valid for, e.g. "pets/"
            valid_duration_in_seconds: Token lifetime; B2 accepts 1 to 604800
                and rejects anything else (not checked here)
            b2_content_disposition: If set, downloads using the token must
                send the same value (RFC 6266 grammar)
        """
        body: Dict[str, Any] = {
            'bucketId': bucket_id,
            'fileNamePrefix': file_name_prefix,
            'validDurationInSeconds': valid_duration_in_seconds,
        }
        if b2_content_disposition is not None:
            body['b2ContentDisposition'] = b2_content_disposition
        data = await self._api.call('b2_get_download_authorization', body)
        return DownloadAuthorization.from_dict(data)

    async def download_file_by_name(
        self,
        bucket_name: str,
        file_name: str,
        response_type: Union[ResponseType, str] = ResponseType.BYTES,
        progress: Optional[ProgressCallback] = None
    ) -> Any:
        """
        Download a file by bucket and file name.

        Returns:
            Body decoded according to ``response_type``
        """
        url = self._api.download_url(f"/file/{bucket_name}/{url_encode_filename(file_name)}")
        return await self._api.download(url, response_type=response_type, progress=progress)

    async def download_file_by_id(
        self,
        file_id: str,
        response_type: Union[ResponseType, str] = ResponseType.BYTES,
        progress: Optional[ProgressCallback] = None
    ) -> Any:
        """Download a file version by id."""
        url = self._api.download_url(f"{self._config.api_path}/b2_download_file_by_id")
        return await self._api.download(
            url,
            params={'fileId': file_id},
            response_type=response_type,
            progress=progress
        )

    # Large files

    async def start_large_file(
        self,
        bucket_id: str,
        file_name: str,
        content_type: Optional[str] = None,
        file_info: Optional[Dict[str, str]] = None
    ) -> LargeFileUpload:
        """
        Start a large file.

        Returns:
            LargeFileUpload tracking the new upload
        """
        body: Dict[str, Any] = {
            'bucketId': bucket_id,
            'fileName': file_name,
            'contentType': content_type or AUTO_CONTENT_TYPE,
        }
        if file_info:
            body['fileInfo'] = dict(file_info)
        data = await self._api.call('b2_start_large_file', body)
        record = FileRecord.from_dict(data)
        logger.info(f"Started large file {file_name} ({record.file_id})")
        return LargeFileUpload(self, record)

    async def get_upload_part_url(self, file_id: str) -> UploadTicket:
        """Get an upload ticket for parts of a large file."""
        data = await self._api.call('b2_get_upload_part_url', {'fileId': file_id})
        return UploadTicket.from_dict(data)

    async def upload_part(
        self,
        upload_url: str,
        upload_auth_token: str,
        part_number: int,
        data: bytes,
        progress: Optional[ProgressCallback] = None
    ) -> PartRecord:
        """
        Upload one part of a large file.

        Keep the returned ``content_sha1``; finish_large_file needs every
        part's checksum in part order.

        Args:
            upload_url: Part ticket URL
            upload_auth_token: Part ticket token
            part_number: 1 to 10000, checked by the server
            data: Part contents
            progress: Optional progress callback
        """
        request = PartUploadRequest(
            upload_url=upload_url,
            upload_auth_token=upload_auth_token,
            part_number=part_number,
            data=data
        )
        headers = request.headers()
        response = await self._api.upload(
            request.upload_url, headers, request.data, progress=progress
        )
        response.setdefault('contentSha1', headers['X-Bz-Content-Sha1'])
        response.setdefault('partNumber', part_number)
        return PartRecord.from_dict(response)

    async def finish_large_file(self, file_id: str, part_sha1_array: List[str]) -> FileRecord:
        """Assemble uploaded parts; checksums must be in part order."""
        data = await self._api.call('b2_finish_large_file', {
            'fileId': file_id,
            'partSha1Array': list(part_sha1_array),
        })
        return FileRecord.from_dict(data)

    async def cancel_large_file(self, file_id: str) -> Dict[str, Any]:
        """Cancel an unfinished large file and delete its parts."""
        return await self._api.call('b2_cancel_large_file', {'fileId': file_id})

    async def list_parts(
        self,
        file_id: str,
        start_part_number: Optional[int] = None,
        max_part_count: Optional[int] = None
    ) -> Dict[str, Any]:
        """List uploaded parts of an unfinished large file."""
        body: Dict[str, Any] = {'fileId': file_id}
        if start_part_number is not None:
            body['startPartNumber'] = start_part_number
        if max_part_count is not None:
            body['maxPartCount'] = max_part_count
        return await self._api.call('b2_list_parts', body)

    async def list_unfinished_large_files(
        self,
        bucket_id: str,
        name_prefix: Optional[str] = None,
        start_file_id: Optional[str] = None,
        max_file_count: Optional[int] = None
    ) -> FileListPage:
        """List large files that were started but neither finished nor cancelled."""
        body: Dict[str, Any] = {'bucketId': bucket_id}
        if name_prefix is not None:
            body['namePrefix'] = name_prefix
        if start_file_id is not None:
            body['startFileId'] = start_file_id
        if max_file_count is not None:
            body['maxFileCount'] = max_file_count
        data = await self._api.call('b2_list_unfinished_large_files', body)
        return FileListPage.from_dict(data)
