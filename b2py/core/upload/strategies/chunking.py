"""
Part-splitting strategies for large-file uploads.
"""
from abc import ABC, abstractmethod
from typing import List, Tuple


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""
    
    @abstractmethod
    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """Calculate chunk boundaries."""
        pass


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Splits a file into equal parts; the last part holds the remainder.
    
    B2 accepts at most 10000 parts, and every part but the last must be at
    least the account's absoluteMinimumPartSize.
    """
    
    DEFAULT_CHUNK_SIZE = 100 * 1000 * 1000  # B2's recommendedPartSize
    MAX_PARTS = 10000
    
    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with part size.
        
        Args:
            chunk_size: Size of each part in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size
    
    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """
        Calculate fixed-size part boundaries.
        
        Args:
            file_size: Total file size in bytes
            
        Returns:
            List of (start, end) tuples
            
        Raises:
            ValueError: If the file would need more than MAX_PARTS parts
        """
        if file_size == 0:
            return []
        
        chunks = []
        position = 0
        
        while position < file_size:
            end = min(position + self.chunk_size, file_size)
            chunks.append((position, end))
            position = end
        
        if len(chunks) > self.MAX_PARTS:
            raise ValueError(
                f"File of {file_size} bytes needs {len(chunks)} parts of "
                f"{self.chunk_size} bytes; at most {self.MAX_PARTS} are allowed"
            )
        
        return chunks
