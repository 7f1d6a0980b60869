"""Tests for the bucket-scoped facade."""
import pytest

from b2py import B2Bucket, B2BucketPermissionError, B2ConfigurationError

from fakes import APPLICATION_KEY, BUCKET_ID, BUCKET_NAME, KEY_ID


class TestBucketAuthorize:
    """Test suite for B2Bucket.authorize."""
    
    @pytest.mark.asyncio
    async def test_authorize(self, bucket):
        """Test matching restriction pins the bucket."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        assert bucket.bucket_id == BUCKET_ID
        assert bucket.bucket_name == BUCKET_NAME
    
    @pytest.mark.asyncio
    async def test_mismatched_bucket(self, bucket):
        """Test a key restricted to another bucket is refused."""
        with pytest.raises(B2BucketPermissionError) as exc_info:
            await bucket.authorize(KEY_ID, APPLICATION_KEY, 'other-bucket')
        
        error = exc_info.value
        assert error.bucket_id == 'other-bucket'
        assert error.allowed_bucket_id == BUCKET_ID
        assert 'Allowed bucket does not match provided bucket id!' in str(error)
        with pytest.raises(B2ConfigurationError):
            bucket.bucket_id
    
    @pytest.mark.asyncio
    async def test_unrestricted_key(self, bucket, server):
        """Test an unrestricted key is refused."""
        server.allowed = {'capabilities': ['listBuckets']}
        
        with pytest.raises(B2BucketPermissionError) as exc_info:
            await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        assert exc_info.value.allowed_bucket_id is None
    
    @pytest.mark.asyncio
    async def test_failed_reauthorize_clears_bucket(self, bucket, server):
        """Test a refused re-authorization unpins the previous bucket."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        with pytest.raises(B2BucketPermissionError):
            await bucket.authorize(KEY_ID, APPLICATION_KEY, 'other-bucket')
        with pytest.raises(B2ConfigurationError):
            await bucket.get_upload_url()
    
    @pytest.mark.asyncio
    async def test_calls_before_authorize(self, bucket, server):
        """Test operations fail locally before authorize()."""
        with pytest.raises(B2ConfigurationError):
            await bucket.get_upload_url()
        with pytest.raises(B2ConfigurationError):
            await bucket.list_file_names()
        with pytest.raises(B2ConfigurationError):
            await bucket.get_file_info('f1')
        with pytest.raises(B2ConfigurationError):
            await bucket.download_file_by_name('a.txt')
        
        assert server.session.requests == []
    
    @pytest.mark.asyncio
    async def test_unknown_bucket_name(self, bucket, server):
        """Test downloading by name needs a bucket name."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        bucket._bucket_name = None
        
        with pytest.raises(B2ConfigurationError):
            await bucket.download_file_by_name('a.txt')


class TestBucketOperations:
    """Test suite for bucket-id injection."""
    
    @pytest.fixture
    def source(self, tmp_path):
        """Local file."""
        path = tmp_path / "report.csv"
        path.write_bytes(b"a,b\n1,2\n")
        return path
    
    @pytest.mark.asyncio
    async def test_bucket_id_injected(self, bucket, server):
        """Test the pinned bucket id is sent on bucket-scoped calls."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        await bucket.get_upload_url()
        await bucket.list_file_names()
        await bucket.list_file_versions()
        await bucket.hide_file('a.txt')
        await bucket.get_download_authorization('pets/', 60)
        await bucket.list_unfinished_large_files()
        
        bodies = [request.json() for request in server.session.requests[1:]]
        assert all(body['bucketId'] == BUCKET_ID for body in bodies)
        assert len(bodies) == 6
    
    @pytest.mark.asyncio
    async def test_upload(self, bucket, server):
        """Test upload fetches a ticket and sends the file."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        record = await bucket.upload('notes/a.txt', b'hello', content_type='text/plain')
        
        assert record.file_name == 'notes/a.txt'
        assert record.bucket_id == BUCKET_ID
        assert record.content_type == 'text/plain'
        assert server.api_calls[-1] == 'b2_get_upload_url'
    
    @pytest.mark.asyncio
    async def test_upload_path(self, bucket, server, source):
        """Test a local file is uploaded under its own name by default."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        record = await bucket.upload_path(source)
        
        assert record.file_name == 'report.csv'
        assert record.content_length == 8
        assert server.transfer_session.requests[-1].data == b"a,b\n1,2\n"
    
    @pytest.mark.asyncio
    async def test_upload_large_path(self, bucket, server, source):
        """Test a local file is uploaded as a large file."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        record = await bucket.upload_large_path(source, file_name='big.csv', part_size=5)
        
        assert record.file_name == 'big.csv'
        assert len(server.large_files[record.file_id]['parts']) == 2
    
    @pytest.mark.asyncio
    async def test_download_defaults_to_bucket_name(self, bucket, server):
        """Test download by name uses the authorized bucket's name."""
        server.files[f'/file/{BUCKET_NAME}/a.txt'] = b'x'
        server.files['/file/other/a.txt'] = b'y'
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        assert await bucket.download_file_by_name('a.txt') == b'x'
        assert await bucket.download_file_by_name('a.txt', bucket_name='other') == b'y'
    
    @pytest.mark.asyncio
    async def test_large_file_through_bucket(self, bucket, server):
        """Test the manual large-file flow through the facade."""
        await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        upload = await bucket.start_large_file('movie.mp4')
        ticket = await bucket.get_upload_part_url(upload.file_id)
        first = await bucket.upload_part(ticket.upload_url, ticket.authorization_token, 1, b'abc')
        second = await bucket.upload_part(ticket.upload_url, ticket.authorization_token, 2, b'def')
        record = await bucket.finish_large_file(
            upload.file_id, [first.content_sha1, second.content_sha1]
        )
        
        assert record.file_name == 'movie.mp4'
        assert server.large_files[upload.file_id]['state'] == 'finished'
    
    @pytest.mark.asyncio
    async def test_context_manager_keeps_injected_session(self, server):
        """Test leaving the context does not close caller-supplied sessions."""
        async with B2Bucket(session=server.session, transfer_session=server.transfer_session) as bucket:
            await bucket.authorize(KEY_ID, APPLICATION_KEY, BUCKET_ID)
        
        assert not server.session.closed
