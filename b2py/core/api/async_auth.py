"""
Async authorization service.

Exchanges an application key for a B2 session and installs it on the
transport client.
"""
import asyncio
from typing import Optional

from .async_client import AsyncAPIClient
from .models import AuthorizationResult
from ..logging import get_logger


class AsyncAuthService:
    """
    Asynchronous authorization service.

    Concurrent ``authorize`` calls on the same service are serialized. Other
    operations are not blocked: re-authorizing while requests are in flight
    swaps the session underneath them, so callers should avoid doing that.
    """

    def __init__(self, client: AsyncAPIClient):
        """
        Initialize auth service.

        Args:
            client: Async API client that receives the session
        """
        self._client = client
        # Created on first use so it binds to the running loop
        self._lock: Optional[asyncio.Lock] = None
        self._logger = get_logger('b2py.auth')

    @property
    def authorization(self) -> Optional[AuthorizationResult]:
        return self._client.authorization

    async def authorize(self, key_id: str, application_key: str) -> AuthorizationResult:
        """
        Authorize with B2.

        Either the master key (key id = account id) or a normal application
        key can be used.

        Args:
            key_id: Account id or application key id
            application_key: Application key secret

        Returns:
            AuthorizationResult describing the new session

        Raises:
            ValueError: If a credential is empty
            B2APIError: If B2 rejects the credentials
        """
        if not key_id or not application_key:
            raise ValueError("key_id and application_key must be non-empty")

        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            self._logger.info(f"Authorizing key {key_id}")
            data = await self._client.get_authorization(key_id, application_key)
            result = AuthorizationResult.from_dict(data, account_id=key_id)

            # Replaces any previous session
            self._client.authorization = result
            self._logger.info(f"Authorized account {result.account_id} at {result.api_url}")
            return result
