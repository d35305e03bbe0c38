from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple
from loguru import logger

from ...exceptions import (
    AppendError,
    CommitError,
    CreateError,
    RangeError,
    TransportError,
)
from ...models import (
    BlobItem,
    BlobKind,
    BlockInfo,
    BlockList,
    BlockListFilter,
    BlockState,
    PageRange,
    PageWriteMode,
    PublicAccess,
)
from ...utils.validation import PAGE_SIZE, validate_page_blob_size, validate_page_data, validate_page_range
from ..base import BlobStorageProvider

# Limits published for append blobs by the storage service
MAX_APPEND_BLOCKS = 50_000
MAX_APPEND_BLOCK_SIZE = 100 * 1024 * 1024


@dataclass
class _Blob:
    kind: BlobKind
    content_type: Optional[str] = None
    content: bytearray = field(default_factory=bytearray)
    committed_blocks: List[Tuple[str, bytes]] = field(default_factory=list)
    uncommitted_blocks: Dict[str, bytes] = field(default_factory=dict)
    append_count: int = 0
    pages: Set[int] = field(default_factory=set)


@dataclass
class _Container:
    access: PublicAccess
    blobs: Dict[str, _Blob] = field(default_factory=dict)


class InMemoryBlobStorageProvider(BlobStorageProvider):
    """Blob service semantics kept in process memory.

    Used for dry runs and tests. Service-side rules (blob type conflicts,
    append limits, block list resolution, page range coalescing) are applied
    here the way the storage service applies them.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize the in-memory provider.

        Args:
            config: {
                        "max_append_blocks": int -> block count limit per append blob
                        "max_append_block_size": int -> largest single append block, in bytes
                    }
        """
        self.config = config or {}
        self.max_append_blocks = self.config.get("max_append_blocks", MAX_APPEND_BLOCKS)
        self.max_append_block_size = self.config.get("max_append_block_size", MAX_APPEND_BLOCK_SIZE)
        self._containers: Dict[str, _Container] = {}
        logger.debug("InMemoryBlobStorageProvider initialized")

    def _container(self, name: str) -> _Container:
        if name not in self._containers:
            raise TransportError(f"Container '{name}' not found", error_code="ContainerNotFound")
        return self._containers[name]

    def _blob(self, container: str, name: str, kind: BlobKind = None) -> _Blob:
        blobs = self._container(container).blobs
        if name not in blobs:
            raise TransportError(f"Blob '{name}' not found in '{container}'", error_code="BlobNotFound")
        blob = blobs[name]
        if kind is not None and blob.kind != kind:
            raise TransportError(
                f"Blob '{name}' is a {blob.kind.value}, not a {kind.value}", error_code="InvalidBlobType"
            )
        return blob

    def _create(self, container: str, name: str, kind: BlobKind, content_type: str = None) -> _Blob:
        blobs = self._container(container).blobs
        existing = blobs.get(name)
        if existing is not None and existing.kind != kind:
            raise CreateError(
                f"Blob '{name}' already exists as a {existing.kind.value}",
                error_code="InvalidBlobType",
                details={"existing": existing.kind.value, "requested": kind.value},
            )
        blob = _Blob(kind=kind, content_type=content_type)
        blobs[name] = blob
        return blob

    async def create_container_if_not_exists(self, name: str, access: PublicAccess = PublicAccess.PRIVATE) -> bool:
        if name in self._containers:
            return False
        self._containers[name] = _Container(access=access)
        return True

    async def delete_container(self, name: str) -> None:
        self._container(name)
        del self._containers[name]

    async def put_append_blob(self, container: str, name: str, content_type: str = None) -> None:
        self._create(container, name, BlobKind.APPEND, content_type)

    async def append_block(self, container: str, name: str, data: bytes) -> None:
        blobs = self._container(container).blobs
        blob = blobs.get(name)
        if blob is None or blob.kind != BlobKind.APPEND:
            raise AppendError(f"Blob '{name}' is not an append blob", error_code="InvalidBlobType")
        if len(data) > self.max_append_block_size:
            raise AppendError(
                f"Append block of {len(data)} bytes exceeds {self.max_append_block_size}",
                error_code="RequestBodyTooLarge",
            )
        if blob.append_count >= self.max_append_blocks:
            raise AppendError(
                f"Append blob '{name}' already holds {blob.append_count} blocks",
                error_code="BlockCountExceedsLimit",
            )
        blob.content.extend(data)
        blob.append_count += 1

    async def create_block_blob(self, container: str, name: str, content_type: str = None) -> None:
        self._create(container, name, BlobKind.BLOCK, content_type)

    async def put_block(self, container: str, name: str, block_id: str, data: bytes) -> None:
        blob = self._blob(container, name, BlobKind.BLOCK)
        # Staging an id again replaces the earlier uncommitted block
        blob.uncommitted_blocks.pop(block_id, None)
        blob.uncommitted_blocks[block_id] = bytes(data)

    async def get_block_list(
        self, container: str, name: str, block_filter: BlockListFilter = BlockListFilter.ALL
    ) -> BlockList:
        blob = self._blob(container, name, BlobKind.BLOCK)
        block_list = BlockList()
        if block_filter in (BlockListFilter.ALL, BlockListFilter.COMMITTED):
            block_list.committed = [
                BlockInfo(block_id=block_id, size=len(data), state=BlockState.COMMITTED)
                for block_id, data in blob.committed_blocks
            ]
        if block_filter in (BlockListFilter.ALL, BlockListFilter.UNCOMMITTED):
            block_list.uncommitted = [
                BlockInfo(block_id=block_id, size=len(data), state=BlockState.UNCOMMITTED)
                for block_id, data in blob.uncommitted_blocks.items()
            ]
        return block_list

    async def put_block_list(self, container: str, name: str, block_ids: Sequence[str]) -> None:
        blob = self._blob(container, name, BlobKind.BLOCK)
        committed = dict(blob.committed_blocks)
        resolved = []
        for block_id in block_ids:
            # Latest wins: a staged block shadows a committed one with the same id
            if block_id in blob.uncommitted_blocks:
                resolved.append((block_id, blob.uncommitted_blocks[block_id]))
            elif block_id in committed:
                resolved.append((block_id, committed[block_id]))
            else:
                raise CommitError(
                    f"Block '{block_id}' is not staged or committed on '{name}'",
                    error_code="InvalidBlockList",
                    details={"block_id": block_id},
                )
        blob.committed_blocks = resolved
        blob.uncommitted_blocks.clear()
        blob.content = bytearray(b"".join(data for _, data in resolved))

    async def put_page_blob(self, container: str, name: str, length: int, content_type: str = None) -> None:
        validate_page_blob_size(length)
        blob = self._create(container, name, BlobKind.PAGE, content_type)
        blob.content = bytearray(length)

    async def write_range(
        self,
        container: str,
        name: str,
        start: int,
        end: int,
        mode: PageWriteMode = PageWriteMode.UPDATE,
        data: bytes = None,
    ) -> None:
        validate_page_range(start, end)
        blob = self._blob(container, name, BlobKind.PAGE)
        if end >= len(blob.content):
            raise RangeError(
                f"Page range [{start}, {end}] extends past blob length {len(blob.content)}",
                error_code="InvalidPageRange",
            )
        pages = range(start // PAGE_SIZE, (end + 1) // PAGE_SIZE)
        if mode == PageWriteMode.CLEAR:
            blob.content[start:end + 1] = bytes(end - start + 1)
            blob.pages.difference_update(pages)
        else:
            validate_page_data(start, end, data or b"")
            blob.content[start:end + 1] = data
            blob.pages.update(pages)

    async def get_page_ranges(self, container: str, name: str) -> List[PageRange]:
        blob = self._blob(container, name, BlobKind.PAGE)
        ranges = []
        run_start = previous = None
        for page in sorted(blob.pages):
            if previous is not None and page == previous + 1:
                previous = page
                continue
            if run_start is not None:
                ranges.append(PageRange(start=run_start * PAGE_SIZE, end=(previous + 1) * PAGE_SIZE - 1))
            run_start = previous = page
        if run_start is not None:
            ranges.append(PageRange(start=run_start * PAGE_SIZE, end=(previous + 1) * PAGE_SIZE - 1))
        return ranges

    async def get_blob(self, container: str, name: str) -> bytes:
        return bytes(self._blob(container, name).content)

    async def list_blob_items(self, container: str) -> List[BlobItem]:
        blobs = self._container(container).blobs
        return [
            BlobItem(name=name, kind=blob.kind, size=len(blob.content))
            for name, blob in sorted(blobs.items())
        ]

    async def close(self):
        """No-op for the in-memory provider (for interface consistency)."""
        logger.debug("InMemoryBlobStorageProvider closed (no-op).")
