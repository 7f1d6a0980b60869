"""
Async B2 API transport.

Owns the HTTP sessions and knows how to talk to each kind of B2 endpoint:
the account authorization URL, the versioned JSON API, ticket-based upload
URLs and the download host.
"""
import json
import logging
from contextlib import AsyncExitStack
from typing import Dict, Optional, Any, AsyncIterator, Union

import aiohttp

from .config import APIConfig
from .errors import B2APIError
from .models import AuthorizationResult, ResponseType, TransferProgress, ProgressCallback
from ..exceptions import B2ConfigurationError
from ..logging import get_logger
from ..utils import basic_auth_header


class ResponseStream:
    """
    Download body as an async iterator of byte chunks.

    The connection is released when the body is exhausted, when iteration
    fails, on ``aclose()``, or on leaving ``async with``, whether or not any
    chunk was read.

    Example:
        >>> async with await b2.download_file_by_id(file_id, response_type='stream') as stream:
        ...     async for chunk in stream:
        ...         out.write(chunk)
    """

    def __init__(
        self,
        response: aiohttp.ClientResponse,
        exit_stack: AsyncExitStack,
        chunk_size: int,
        progress: Optional[ProgressCallback] = None
    ):
        self._response = response
        self._exit_stack = exit_stack
        self._chunks = response.content.iter_chunked(chunk_size)
        self._progress = progress
        self._loaded = 0
        self._closed = False

    @property
    def response(self) -> aiohttp.ClientResponse:
        """Underlying response, for status and headers."""
        return self._response

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> 'ResponseStream':
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        try:
            chunk = await self._chunks.__anext__()
        except BaseException:
            await self.aclose()
            raise

        self._loaded += len(chunk)
        if self._progress is not None:
            total = self._response.content_length
            self._progress(TransferProgress(loaded=self._loaded, total=total))
        return chunk

    async def aclose(self) -> None:
        """Release the connection; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._exit_stack.aclose()

    async def __aenter__(self) -> 'ResponseStream':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


class AsyncAPIClient:
    """
    Asynchronous B2 API transport.

    Two HTTP sessions are kept apart on purpose:

    - the API session carries the account session token and is used for
      JSON API calls and downloads;
    - the transfer session is bare and is used for uploads, which must only
      carry the upload ticket's token.

    Both are created lazily and can be injected for testing.

    Example:
        >>> async with AsyncAPIClient() as api:
        ...     data = await api.get_authorization('keyId', 'applicationKey')
    """

    # Upload endpoints signal some failures through redirects; never follow them
    MAX_UPLOAD_REDIRECTS = 0

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        transfer_session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize async API client.

        Args:
            config: API configuration (uses defaults if not provided)
            session: Optional HTTP session for API calls and downloads
            transfer_session: Optional HTTP session for uploads
        """
        self._config = config or APIConfig.default()
        self._session = session
        self._transfer_session = transfer_session
        self._owns_session = session is None
        self._owns_transfer_session = transfer_session is None
        self._authorization: Optional[AuthorizationResult] = None

        self._logger = get_logger('b2py.api')
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def authorization(self) -> Optional[AuthorizationResult]:
        """Current session, None before authorization."""
        return self._authorization

    @authorization.setter
    def authorization(self, value: Optional[AuthorizationResult]):
        self._authorization = value

    @property
    def is_authorized(self) -> bool:
        """True once a session is installed."""
        return self._authorization is not None

    def require_authorization(self) -> AuthorizationResult:
        """
        Return the current session or fail before any network I/O.

        Raises:
            B2ConfigurationError: If authorize() has not completed
        """
        if not self.is_authorized:
            raise B2ConfigurationError(
                "Client is not authorized; call authorize() first"
            )
        return self._authorization

    async def __aenter__(self) -> 'AsyncAPIClient':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _new_session(self) -> aiohttp.ClientSession:
        connector = aiohttp.TCPConnector(**self._config.get_connector_kwargs())
        return aiohttp.ClientSession(
            connector=connector,
            **self._config.get_session_kwargs()
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure the API session is created and open."""
        if self._session is None or self._session.closed:
            self._session = self._new_session()
            self._owns_session = True
        return self._session

    async def _ensure_transfer_session(self) -> aiohttp.ClientSession:
        """Ensure the bare upload session is created and open."""
        if self._transfer_session is None or self._transfer_session.closed:
            self._transfer_session = self._new_session()
            self._owns_transfer_session = True
        return self._transfer_session

    async def close(self):
        """Close the sessions this client created."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None

        if (self._owns_transfer_session and self._transfer_session
                and not self._transfer_session.closed):
            await self._transfer_session.close()
            self._transfer_session = None

    def _proxy(self) -> Optional[str]:
        return self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None

    def api_url(self, endpoint: str) -> str:
        """Absolute URL of a versioned API endpoint, e.g. ``b2_list_buckets``."""
        auth = self.require_authorization()
        return f"{auth.api_url}{self._config.api_path}/{endpoint}"

    def download_url(self, path: str) -> str:
        """Absolute URL on the download host."""
        auth = self.require_authorization()
        return f"{auth.download_url}{path}"

    async def get_authorization(self, key_id: str, application_key: str) -> Dict[str, Any]:
        """
        Exchange credentials for a session.

        Args:
            key_id: Account id or application key id
            application_key: Application key secret

        Returns:
            Decoded ``b2_authorize_account`` response
        """
        session = await self._ensure_session()
        headers = {'Authorization': basic_auth_header(key_id, application_key)}

        self._logger.debug(f"GET {self._config.auth_url}")
        async with session.get(
            self._config.auth_url,
            headers=headers,
            proxy=self._proxy()
        ) as response:
            self._logger.debug(f"Authorization response: {response.status}")
            await self._raise_for_status(response)
            return self._decode_json(await response.read())

    async def call(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a JSON body to a versioned API endpoint with the session token.

        Args:
            endpoint: Endpoint name, e.g. ``b2_list_buckets``
            body: JSON request body

        Returns:
            Decoded JSON response

        Raises:
            B2ConfigurationError: If not authorized
            B2APIError: On a non-2xx response
        """
        auth = self.require_authorization()
        url = self.api_url(endpoint)
        session = await self._ensure_session()

        self._logger.debug(f"POST {endpoint}")
        async with session.post(
            url,
            data=json.dumps(body),
            headers={
                'Authorization': auth.authorization_token,
                'Content-Type': 'application/json',
            },
            proxy=self._proxy()
        ) as response:
            self._logger.debug(f"{endpoint} -> {response.status}")
            await self._raise_for_status(response)
            return self._decode_json(await response.read())

    async def upload(
        self,
        url: str,
        headers: Dict[str, str],
        data: bytes,
        progress: Optional[ProgressCallback] = None
    ) -> Dict[str, Any]:
        """
        POST raw bytes to a ticket upload URL.

        Uses the bare transfer session, so only the ticket token in
        ``headers`` authorizes the request. Redirects are not followed.

        Args:
            url: Upload URL from the ticket
            headers: Complete header set, including Authorization and Content-Length
            data: Payload
            progress: Optional progress callback

        Returns:
            Decoded JSON response
        """
        self.require_authorization()
        session = await self._ensure_transfer_session()

        payload: Union[bytes, AsyncIterator[bytes]] = data
        if progress is not None:
            payload = self._iter_payload(data, progress)

        self._logger.debug(f"Uploading {len(data)} bytes")
        async with session.post(
            url,
            data=payload,
            headers=headers,
            allow_redirects=False,
            max_redirects=self.MAX_UPLOAD_REDIRECTS,
            proxy=self._proxy()
        ) as response:
            self._logger.debug(f"Upload response: {response.status}")
            await self._raise_for_status(response)
            return self._decode_json(await response.read())

    async def download(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        response_type: ResponseType = ResponseType.BYTES,
        progress: Optional[ProgressCallback] = None
    ) -> Any:
        """
        GET a file from the download host with the session token.

        Args:
            url: Absolute download URL
            params: Query parameters
            response_type: How to hand back the body
            progress: Optional progress callback

        Returns:
            bytes, decoded JSON, str, or a ResponseStream for STREAM
        """
        auth = self.require_authorization()
        session = await self._ensure_session()
        headers = {'Authorization': auth.authorization_token}
        response_type = ResponseType(response_type)

        self._logger.debug(f"GET {url} ({response_type.value})")
        if response_type is ResponseType.STREAM:
            async with AsyncExitStack() as stack:
                response = await stack.enter_async_context(session.get(
                    url, params=params, headers=headers, proxy=self._proxy()
                ))
                await self._raise_for_status(response)
                # Ownership of the response moves to the stream
                return ResponseStream(
                    response,
                    stack.pop_all(),
                    self._config.download_chunk_size,
                    progress
                )

        async with session.get(
            url, params=params, headers=headers, proxy=self._proxy()
        ) as response:
            await self._raise_for_status(response)
            body = await self._read_body(response, progress)

        if response_type is ResponseType.JSON:
            return self._decode_json(body)
        if response_type is ResponseType.TEXT:
            return body.decode(response.charset or 'utf-8')
        return body

    @staticmethod
    def _is_success(status: int) -> bool:
        return 200 <= status < 300

    async def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        """Raise B2APIError with the untouched body for any non-2xx status."""
        if self._is_success(response.status):
            return

        raw = await response.read()
        self._logger.warning(f"B2 request failed with status {response.status}")
        raise B2APIError(
            response.request_info,
            response.history,
            status=response.status,
            message=response.reason or '',
            headers=response.headers,
            raw_body=raw or b''
        )

    @staticmethod
    def _decode_json(body: bytes) -> Any:
        if not body:
            return {}
        return json.loads(body)

    async def _iter_payload(
        self,
        data: bytes,
        progress: ProgressCallback
    ) -> AsyncIterator[bytes]:
        """Yield the payload in slices, reporting each one."""
        total = len(data)
        chunk_size = self._config.upload_chunk_size
        view = memoryview(data)
        loaded = 0

        progress(TransferProgress(loaded=0, total=total))
        while loaded < total:
            chunk = bytes(view[loaded:loaded + chunk_size])
            yield chunk
            loaded += len(chunk)
            progress(TransferProgress(loaded=loaded, total=total))

    async def _read_body(
        self,
        response: aiohttp.ClientResponse,
        progress: Optional[ProgressCallback]
    ) -> bytes:
        if progress is None:
            return await response.read()

        chunks = []
        async for chunk in self._iter_chunks(response, progress):
            chunks.append(chunk)
        return b''.join(chunks)

    async def _iter_chunks(
        self,
        response: aiohttp.ClientResponse,
        progress: Optional[ProgressCallback]
    ) -> AsyncIterator[bytes]:
        total = response.content_length
        loaded = 0
        async for chunk in response.content.iter_chunked(self._config.download_chunk_size):
            loaded += len(chunk)
            if progress is not None:
                progress(TransferProgress(loaded=loaded, total=total))
            yield chunk
