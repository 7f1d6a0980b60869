"""
Protocol definitions for upload module.

The large-file state object and coordinator depend on these interfaces
rather than on ``B2Client`` directly.
"""
from pathlib import Path
from typing import Protocol, List, Tuple, Optional, Dict, Any

from ..api.models import UploadTicket, PartRecord, FileRecord, ProgressCallback


class ChunkingStrategy(Protocol):
    """Protocol for splitting a file into parts."""
    
    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """
        Calculate part boundaries for a file.
        
        Args:
            file_size: Total file size in bytes
            
        Returns:
            List of (start, end) tuples
        """
        ...


class FileReaderProtocol(Protocol):
    """Protocol for file reading operations."""
    
    async def read_chunk(self, file_path: Path, start: int, end: int) -> Optional[bytes]:
        ...
    
    async def read_file(self, file_path: Path) -> Optional[bytes]:
        ...


class LargeFileApiProtocol(Protocol):
    """The subset of the session client used by a large-file upload."""
    
    async def get_upload_part_url(self, file_id: str) -> UploadTicket:
        ...
    
    async def upload_part(
        self,
        upload_url: str,
        upload_auth_token: str,
        part_number: int,
        data: bytes,
        progress: Optional[ProgressCallback] = None
    ) -> PartRecord:
        ...
    
    async def finish_large_file(self, file_id: str, part_sha1_array: List[str]) -> FileRecord:
        ...
    
    async def cancel_large_file(self, file_id: str) -> Dict[str, Any]:
        ...
