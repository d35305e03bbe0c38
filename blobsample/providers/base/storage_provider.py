from abc import ABC, abstractmethod
from typing import List, Sequence

from ...models import (
    BlobItem,
    BlockList,
    BlockListFilter,
    PageRange,
    PageWriteMode,
    PublicAccess,
)


class BlobStorageProvider(ABC):
    """Abstract base class for blob storage providers.

    Implementations own transport, authentication and retries. Every method
    raises a BlobSampleException subclass on failure.
    """

    @abstractmethod
    async def create_container_if_not_exists(self, name: str, access: PublicAccess = PublicAccess.PRIVATE) -> bool:
        """Create a container; return False if it already existed."""
        pass

    @abstractmethod
    async def delete_container(self, name: str) -> None:
        """Delete a container and every blob in it."""
        pass

    @abstractmethod
    async def put_append_blob(self, container: str, name: str, content_type: str = None) -> None:
        """Create an empty append blob."""
        pass

    @abstractmethod
    async def append_block(self, container: str, name: str, data: bytes) -> None:
        """Append one block of any length to an append blob."""
        pass

    @abstractmethod
    async def create_block_blob(self, container: str, name: str, content_type: str = None) -> None:
        """Create an empty block blob."""
        pass

    @abstractmethod
    async def put_block(self, container: str, name: str, block_id: str, data: bytes) -> None:
        """Stage an uncommitted block."""
        pass

    @abstractmethod
    async def get_block_list(
        self, container: str, name: str, block_filter: BlockListFilter = BlockListFilter.ALL
    ) -> BlockList:
        """List committed and/or uncommitted blocks of a block blob."""
        pass

    @abstractmethod
    async def put_block_list(self, container: str, name: str, block_ids: Sequence[str]) -> None:
        """Commit the given blocks, in order, as the blob's content."""
        pass

    @abstractmethod
    async def put_page_blob(self, container: str, name: str, length: int, content_type: str = None) -> None:
        """Create a zero-filled page blob of a fixed, 512-aligned length."""
        pass

    @abstractmethod
    async def write_range(
        self,
        container: str,
        name: str,
        start: int,
        end: int,
        mode: PageWriteMode = PageWriteMode.UPDATE,
        data: bytes = None,
    ) -> None:
        """Overwrite (UPDATE) or zero (CLEAR) the inclusive page range [start, end]."""
        pass

    @abstractmethod
    async def get_page_ranges(self, container: str, name: str) -> List[PageRange]:
        """Return the valid page ranges of a page blob as computed by the service."""
        pass

    @abstractmethod
    async def get_blob(self, container: str, name: str) -> bytes:
        """Read a blob's full content."""
        pass

    @abstractmethod
    async def list_blob_items(self, container: str) -> List[BlobItem]:
        """List every blob in a container."""
        pass

    async def list_blobs(self, container: str) -> List[str]:
        """List blob names in a container."""
        return [item.name for item in await self.list_blob_items(container)]

    @abstractmethod
    async def close(self):
        """Close the underlying client and cleanup."""
        pass
