"""B2 API error responses."""
import json
from typing import Any, Optional

import aiohttp


class B2APIError(aiohttp.ClientResponseError):
    """
    Raised for any non-2xx response from a B2 endpoint.
    
    This is an ``aiohttp.ClientResponseError``, so callers handling transport
    errors generically still catch it. The response body is kept byte for byte
    in ``raw_body`` and as text in ``body``. When it is B2's JSON error
    document the ``code`` and ``message`` fields are exposed as
    ``error_code`` and ``error_message``.
    """
    
    def __init__(
        self,
        request_info: Any,
        history: tuple,
        *,
        status: int,
        message: str = '',
        headers: Any = None,
        body: Optional[str] = None,
        raw_body: bytes = b''
    ):
        super().__init__(
            request_info,
            history,
            status=status,
            message=message,
            headers=headers
        )
        if body is None:
            body = raw_body.decode('utf-8', errors='replace')
        elif not raw_body:
            raw_body = body.encode('utf-8')
        self.raw_body = raw_body
        self.body = body
        self.error_code: Optional[str] = None
        self.error_message: Optional[str] = None
        
        try:
            document = json.loads(body) if body else None
        except ValueError:
            document = None
        if isinstance(document, dict):
            self.error_code = document.get('code')
            self.error_message = document.get('message')
    
    def __str__(self) -> str:
        detail = self.error_message or self.message or self.body
        if self.error_code:
            return f"B2 API error {self.status} ({self.error_code}): {detail}"
        return f"B2 API error {self.status}: {detail}"
