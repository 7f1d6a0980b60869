import base64
from urllib.parse import quote

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~"
_SEGMENT_SAFE = "!'()*"


def url_encode_filename(file_name: str) -> str:
    """Percent-encodes each '/'-separated segment of a B2 file name."""
    return '/'.join(quote(segment, safe=_SEGMENT_SAFE) for segment in file_name.split('/'))


def basic_auth_header(key_id: str, application_key: str) -> str:
    """Builds the HTTP Basic Authorization value for an application key."""
    token = base64.b64encode(f"{key_id}:{application_key}".encode('utf-8')).decode('ascii')
    return f"Basic {token}"
