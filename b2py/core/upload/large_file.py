"""
Large-file upload state.

``b2_start_large_file`` opens a server-side upload that is completed by
submitting every part's SHA-1 in part order. ``LargeFileUpload`` tracks that
protocol so an upload cannot be finished twice, fed parts after it was
cancelled, or finished with a gap in its part numbers.
"""
from enum import Enum
from typing import Dict, List, Optional, Any, Set

from .protocols import LargeFileApiProtocol
from ..api.models import FileRecord, PartRecord, ProgressCallback
from ..exceptions import B2LargeFileStateError
from ..logging import get_logger


class LargeFileState(str, Enum):
    """Lifecycle of a large-file upload."""
    STARTED = 'started'
    UPLOADING = 'uploading'
    FINISHED = 'finished'
    CANCELLED = 'cancelled'

    @property
    def is_terminal(self) -> bool:
        return self in (LargeFileState.FINISHED, LargeFileState.CANCELLED)


class LargeFileUpload:
    """
    A started large file.

    Parts may be uploaded concurrently; each ``upload_part`` call fetches its
    own upload ticket.

    Example:
        >>> upload = await client.start_large_file(bucket_id, 'video.mp4')
        >>> await upload.upload_part(first_100mb)
        >>> await upload.upload_part(rest)
        >>> record = await upload.finish()
    """

    def __init__(self, api: LargeFileApiProtocol, record: FileRecord):
        """
        Args:
            api: Session client used for part tickets, uploads and finish/cancel
            record: Response of b2_start_large_file
        """
        if not record.file_id:
            raise ValueError("start_large_file response has no fileId")
        self._api = api
        self._record = record
        self._state = LargeFileState.STARTED
        self._part_sha1s: Dict[int, str] = {}
        self._pending_parts: Set[int] = set()
        self._logger = get_logger('b2py.upload.large_file')

    @property
    def file_id(self) -> str:
        return self._record.file_id

    @property
    def file_name(self) -> str:
        return self._record.file_name

    @property
    def record(self) -> FileRecord:
        """The b2_start_large_file response."""
        return self._record

    @property
    def state(self) -> LargeFileState:
        return self._state

    @property
    def part_sha1_array(self) -> List[str]:
        """Recorded part checksums ordered by part number."""
        return [self._part_sha1s[number] for number in sorted(self._part_sha1s)]

    def _require_open(self, operation: str) -> None:
        if self._state.is_terminal:
            raise B2LargeFileStateError(
                f"Cannot {operation} large file {self.file_id}: upload is {self._state.value}",
                file_id=self.file_id
            )

    def _claim_part_number(self, part_number: Optional[int]) -> int:
        """Reserve a part number until its upload succeeds or fails."""
        if part_number is None:
            taken = self._part_sha1s.keys() | self._pending_parts
            part_number = max(taken, default=0) + 1
        self._pending_parts.add(part_number)
        return part_number

    async def upload_part(
        self,
        data: bytes,
        part_number: Optional[int] = None,
        progress: Optional[ProgressCallback] = None
    ) -> PartRecord:
        """
        Upload one part.

        Args:
            data: Part contents
            part_number: 1-based part number, defaults to one past the highest
                uploaded or in-flight part. A failed part's number can be reused.
            progress: Optional progress callback

        Returns:
            PartRecord with the part's SHA-1

        Raises:
            B2LargeFileStateError: If the upload was finished or cancelled
        """
        self._require_open('upload a part to')
        number = self._claim_part_number(part_number)
        self._state = LargeFileState.UPLOADING

        try:
            ticket = await self._api.get_upload_part_url(self.file_id)
            part = await self._api.upload_part(
                ticket.upload_url,
                ticket.authorization_token,
                number,
                data,
                progress=progress
            )
            self._part_sha1s[number] = part.content_sha1
        finally:
            # A failed number is free again for a retry
            self._pending_parts.discard(number)
        self._logger.debug(f"Part {number} of {self.file_id} uploaded ({len(data)} bytes)")
        return part

    async def finish(self) -> FileRecord:
        """
        Assemble the uploaded parts into the final file.

        Raises:
            B2LargeFileStateError: If the upload is not open, parts are still
                uploading, or part numbers are not 1..N
        """
        self._require_open('finish')
        if self._pending_parts:
            raise B2LargeFileStateError(
                f"Large file {self.file_id} has parts still uploading: "
                f"{sorted(self._pending_parts)}",
                file_id=self.file_id
            )
        numbers = sorted(self._part_sha1s)
        if numbers != list(range(1, len(numbers) + 1)):
            raise B2LargeFileStateError(
                f"Large file {self.file_id} has non-contiguous parts: {numbers}",
                file_id=self.file_id
            )

        record = await self._api.finish_large_file(self.file_id, self.part_sha1_array)
        self._state = LargeFileState.FINISHED
        self._logger.info(f"Finished large file {self.file_name} ({len(numbers)} parts)")
        return record

    async def cancel(self) -> Dict[str, Any]:
        """
        Cancel the upload and release its parts on the server.

        Raises:
            B2LargeFileStateError: If the upload is already finished or cancelled
        """
        self._require_open('cancel')
        response = await self._api.cancel_large_file(self.file_id)
        self._state = LargeFileState.CANCELLED
        self._logger.info(f"Cancelled large file {self.file_name}")
        return response

    def __repr__(self) -> str:
        return (
            f"LargeFileUpload(file_id={self.file_id!r}, file_name={self.file_name!r}, "
            f"state={self._state.value}, parts={len(self._part_sha1s)})"
        )
