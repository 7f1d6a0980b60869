"""Tests for LargeFileCoordinator."""
import pytest

from b2py import B2APIError, LargeFileCoordinator
from b2py.core.upload.strategies import FixedSizeChunkingStrategy

from fakes import APPLICATION_KEY, BUCKET_ID, KEY_ID


class TestLargeFileCoordinator:
    """Test suite for LargeFileCoordinator."""
    
    @pytest.fixture
    def source(self, tmp_path):
        """Local file of 25 bytes."""
        path = tmp_path / "source.bin"
        path.write_bytes(bytes(range(25)))
        return path
    
    @pytest.mark.asyncio
    async def test_upload(self, client, server, source):
        """Test a file is uploaded in parts and finished."""
        await client.authorize(KEY_ID, APPLICATION_KEY)
        events = []
        coordinator = LargeFileCoordinator(
            client, max_concurrent_uploads=2, progress_callback=events.append
        )
        
        record = await coordinator.upload(source, BUCKET_ID, part_size=10)
        
        assert record.file_name == 'source.bin'
        assert record.content_length == 25
        large = server.large_files[record.file_id]
        assert sorted(large['parts']) == [1, 2, 3]
        assert large['sizes'] == {1: 10, 2: 10, 3: 5}
        assert events[-1].loaded == 25
        assert events[-1].total == 25
    
    @pytest.mark.asyncio
    async def test_failure_cancels(self, client, server, source):
        """Test a failed part cancels the large file and re-raises."""
        await client.authorize(KEY_ID, APPLICATION_KEY)
        server.fail_part_numbers.add(2)
        coordinator = LargeFileCoordinator(client, max_concurrent_uploads=1)
        
        with pytest.raises(B2APIError) as exc_info:
            await coordinator.upload(source, BUCKET_ID, file_name='x.bin', part_size=10)
        
        assert exc_info.value.status == 503
        (large,) = server.large_files.values()
        assert large['state'] == 'cancelled'
        assert 'b2_finish_large_file' not in server.api_calls
    
    @pytest.mark.asyncio
    async def test_single_part_file_rejected(self, client, server, source):
        """Test files that fit in one part are refused before starting."""
        await client.authorize(KEY_ID, APPLICATION_KEY)
        coordinator = LargeFileCoordinator(client)
        
        with pytest.raises(ValueError):
            await coordinator.upload(source, BUCKET_ID, part_size=100)
        assert server.large_files == {}
    
    @pytest.mark.asyncio
    async def test_custom_chunking(self, client, server, source):
        """Test an injected chunking strategy decides the parts."""
        await client.authorize(KEY_ID, APPLICATION_KEY)
        coordinator = LargeFileCoordinator(
            client, chunking_strategy=FixedSizeChunkingStrategy(chunk_size=5)
        )
        
        record = await coordinator.upload(source, BUCKET_ID)
        
        assert len(server.large_files[record.file_id]['parts']) == 5
    
    @pytest.mark.asyncio
    async def test_part_size_with_custom_chunking(self, client, server, source):
        """Test part_size and an injected chunking strategy cannot be combined."""
        await client.authorize(KEY_ID, APPLICATION_KEY)
        coordinator = LargeFileCoordinator(
            client, chunking_strategy=FixedSizeChunkingStrategy(chunk_size=5)
        )
        
        with pytest.raises(ValueError):
            await coordinator.upload(source, BUCKET_ID, part_size=10)
        assert server.large_files == {}
    
    @pytest.mark.asyncio
    async def test_resolve_part_size(self, client):
        """Test part size falls back to the session and respects its minimum."""
        await client.authorize(KEY_ID, APPLICATION_KEY)
        coordinator = LargeFileCoordinator(client)
        
        assert coordinator.resolve_part_size() == 100000000
        assert coordinator.resolve_part_size(3) == 5
        assert coordinator.resolve_part_size(50) == 50
    
    def test_invalid_concurrency(self, client):
        """Test concurrency must be positive."""
        with pytest.raises(ValueError):
            LargeFileCoordinator(client, max_concurrent_uploads=0)
    
    @pytest.mark.asyncio
    async def test_missing_file(self, client, tmp_path):
        """Test missing local files raise before any request."""
        await client.authorize(KEY_ID, APPLICATION_KEY)
        coordinator = LargeFileCoordinator(client)
        
        with pytest.raises(FileNotFoundError):
            await coordinator.upload(tmp_path / "missing.bin", BUCKET_ID)
