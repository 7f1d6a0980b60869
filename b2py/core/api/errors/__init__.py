"""B2 API errors and exceptions."""
from .api_errors import B2APIError

__all__ = [
    'B2APIError',
]
