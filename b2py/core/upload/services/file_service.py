"""
File validation and reading services.
"""
from pathlib import Path
from typing import Tuple, Optional, Union
import logging

import aiofiles


class FileValidator:
    """
    Validates local files before upload.
    """
    
    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Tuple of (validated Path, file size in bytes)
            
        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path
        
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        
        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")
        
        return path, path.stat().st_size


class AsyncFileReader:
    """
    Asynchronous file reader for part-based reading.
    
    Uses aiofiles for non-blocking I/O. Read errors propagate to the caller.
    """
    
    def __init__(self):
        self._logger = logging.getLogger('b2py.upload.file')
    
    async def read_chunk(self, file_path: Path, start: int, end: int) -> Optional[bytes]:
        """
        Read the byte range [start, end) of a file.
        
        Returns:
            Chunk data, or None past end of file
        """
        async with aiofiles.open(file_path, 'rb') as f:
            await f.seek(start)
            data = await f.read(end - start)
        
        if data:
            self._logger.debug(f"Read chunk: {start}-{end} ({len(data)} bytes)")
        return data if data else None
    
    async def read_file(self, file_path: Path) -> bytes:
        """Read an entire file."""
        async with aiofiles.open(file_path, 'rb') as f:
            return await f.read()
