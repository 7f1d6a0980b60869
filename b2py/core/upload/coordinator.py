"""
Large-file upload coordinator.

Uploads a local file through the large-file protocol: start, upload parts
with bounded concurrency, finish. A failed upload is cancelled on the server
before the error is re-raised.
"""
import asyncio
from pathlib import Path
from typing import Optional, Union, Dict, List, Tuple, Callable, TYPE_CHECKING

from .large_file import LargeFileUpload
from .protocols import ChunkingStrategy, FileReaderProtocol
from .services import FileValidator, AsyncFileReader
from .strategies import FixedSizeChunkingStrategy
from ..api.models import FileRecord, TransferProgress
from ..logging import get_logger

if TYPE_CHECKING:
    from ...client import B2Client

logger = get_logger('b2py.upload.coordinator')


class LargeFileCoordinator:
    """
    Coordinates uploading a local file as a B2 large file.

    Example:
        >>> coordinator = LargeFileCoordinator(client, max_concurrent_uploads=4)
        >>> record = await coordinator.upload("backup.tar", bucket_id)
    """

    def __init__(
        self,
        api: 'B2Client',
        chunking_strategy: Optional[ChunkingStrategy] = None,
        file_reader: Optional[FileReaderProtocol] = None,
        max_concurrent_uploads: int = 4,
        progress_callback: Optional[Callable[[TransferProgress], None]] = None
    ):
        """
        Initialize upload coordinator.

        Args:
            api: Authorized session client
            chunking_strategy: Part splitting; defaults to fixed parts sized from the session
            file_reader: File reader implementation
            max_concurrent_uploads: Parts uploaded at the same time
            progress_callback: Called after each completed part
        """
        if max_concurrent_uploads < 1:
            raise ValueError("max_concurrent_uploads must be at least 1")
        self._api = api
        self._chunking = chunking_strategy
        self._file_reader = file_reader or AsyncFileReader()
        self._validator = FileValidator()
        self._max_concurrent = max_concurrent_uploads
        self._progress_callback = progress_callback

    def resolve_part_size(self, part_size: Optional[int] = None) -> int:
        """
        Part size to use: explicit, else the session's recommendation.

        Never smaller than the session's absolute minimum.
        """
        auth = self._api.authorization
        size = part_size or (auth.recommended_part_size if auth else None)
        size = size or FixedSizeChunkingStrategy.DEFAULT_CHUNK_SIZE

        minimum = auth.absolute_minimum_part_size if auth else None
        if minimum and size < minimum:
            logger.debug(f"Raising part size {size} to account minimum {minimum}")
            size = minimum
        return size

    async def upload(
        self,
        file_path: Union[str, Path],
        bucket_id: str,
        file_name: Optional[str] = None,
        content_type: Optional[str] = None,
        part_size: Optional[int] = None,
        file_info: Optional[Dict[str, str]] = None
    ) -> FileRecord:
        """
        Upload a local file as a large file.

        Args:
            file_path: Local file
            bucket_id: Target bucket
            file_name: B2 file name (defaults to the local name)
            content_type: MIME type (defaults to b2/x-auto)
            part_size: Bytes per part; not allowed with an injected chunking strategy
            file_info: Custom file info

        Returns:
            FileRecord of the assembled file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file fits in fewer than two parts, or if
                part_size is given alongside a chunking strategy
        """
        if part_size is not None and self._chunking is not None:
            raise ValueError(
                "part_size cannot be combined with a custom chunking strategy"
            )
        path, file_size = self._validator.validate(file_path)
        chunking = self._chunking or FixedSizeChunkingStrategy(self.resolve_part_size(part_size))
        chunks = chunking.calculate_chunks(file_size)

        if len(chunks) < 2:
            raise ValueError(
                f"{path.name} ({file_size} bytes) fits in a single part; use upload_file instead"
            )

        logger.info(f"Starting large upload: {path.name} ({file_size} bytes, {len(chunks)} parts)")
        large_file = await self._api.start_large_file(
            bucket_id,
            file_name or path.name,
            content_type=content_type,
            file_info=file_info
        )

        try:
            await self._upload_parts(large_file, path, chunks, file_size)
            return await large_file.finish()
        except Exception as e:
            logger.error(f"Large upload of {path.name} failed: {e}")
            await self._cancel_quietly(large_file)
            raise

    async def _upload_parts(
        self,
        large_file: LargeFileUpload,
        path: Path,
        chunks: List[Tuple[int, int]],
        file_size: int
    ) -> None:
        semaphore = asyncio.Semaphore(self._max_concurrent)
        uploaded = 0

        async def upload_one(part_number: int, start: int, end: int) -> None:
            nonlocal uploaded
            async with semaphore:
                data = await self._file_reader.read_chunk(path, start, end)
                if not data:
                    raise ValueError(f"Could not read bytes {start}-{end} of {path}")
                await large_file.upload_part(data, part_number=part_number)
            uploaded += end - start
            if self._progress_callback:
                self._progress_callback(TransferProgress(loaded=uploaded, total=file_size))

        tasks = [
            asyncio.ensure_future(upload_one(index + 1, start, end))
            for index, (start, end) in enumerate(chunks)
        ]
        try:
            await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _cancel_quietly(self, large_file: LargeFileUpload) -> None:
        """Cancel after a failure; a cancel error must not mask the original one."""
        if large_file.state.is_terminal:
            return
        try:
            await large_file.cancel()
        except Exception as cancel_error:
            logger.error(f"Could not cancel large file {large_file.file_id}: {cancel_error}")
