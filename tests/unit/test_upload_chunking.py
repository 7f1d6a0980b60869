"""Tests for chunking strategies."""
import pytest
from b2py.core.upload.strategies.chunking import FixedSizeChunkingStrategy


class TestFixedSizeChunkingStrategy:
    """Test suite for FixedSizeChunkingStrategy."""
    
    def test_default_chunk_size(self):
        """Test default part size matches B2's recommendation."""
        strategy = FixedSizeChunkingStrategy()
        assert strategy.chunk_size == 100 * 1000 * 1000
    
    def test_empty_file(self):
        """Test chunking empty file."""
        strategy = FixedSizeChunkingStrategy(chunk_size=10)
        assert strategy.calculate_chunks(0) == []
    
    def test_exact_multiple(self):
        """Test file that divides evenly."""
        strategy = FixedSizeChunkingStrategy(chunk_size=10)
        
        assert strategy.calculate_chunks(30) == [(0, 10), (10, 20), (20, 30)]
    
    def test_remainder_in_last_chunk(self):
        """Test last part holds the remainder."""
        strategy = FixedSizeChunkingStrategy(chunk_size=10)
        chunks = strategy.calculate_chunks(25)
        
        assert chunks[-1] == (20, 25)
        assert len(chunks) == 3
    
    def test_chunks_cover_file(self):
        """Test chunks are contiguous and cover the whole file."""
        strategy = FixedSizeChunkingStrategy(chunk_size=7)
        chunks = strategy.calculate_chunks(100)
        
        assert chunks[0][0] == 0
        assert chunks[-1][1] == 100
        for (_, end), (start, _) in zip(chunks, chunks[1:]):
            assert end == start
    
    def test_too_many_parts(self):
        """Test files needing more than 10000 parts are rejected."""
        strategy = FixedSizeChunkingStrategy(chunk_size=1)
        
        with pytest.raises(ValueError):
            strategy.calculate_chunks(10001)
    
    def test_invalid_chunk_size(self):
        """Test non-positive part size raises error."""
        with pytest.raises(ValueError):
            FixedSizeChunkingStrategy(chunk_size=0)
