"""SHA-1 content checksums as required by X-Bz-Content-Sha1."""
from typing import Union

from Crypto.Hash import SHA1


def sha1_hex(data: Union[bytes, bytearray, memoryview]) -> str:
    """
    Computes the hex SHA-1 digest of a payload.
    
    Args:
        data: Payload bytes
        
    Returns:
        40-character lowercase hex digest
    """
    return SHA1.new(bytes(data)).hexdigest()
