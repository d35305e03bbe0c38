from typing import Any, Dict, List, Optional, Sequence, Type
from azure.core.exceptions import AzureError, HttpResponseError, ResourceExistsError
from azure.storage.blob import BlobBlock, BlobType, ContentSettings
from azure.storage.blob.aio import BlobServiceClient
from loguru import logger

from ...config.settings import StorageConfig
from ...exceptions import (
    AppendError,
    BlobSampleException,
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
from ...utils.error_handler import convert_exceptions, ErrorHandler
from ...utils.validation import validate_page_blob_size, validate_page_data, validate_page_range
from ..base import BlobStorageProvider
from ..credentials import StorageCredentials

# Service error codes that carry a specific meaning for the sample workflows
CREATE_ERROR_CODES = {"InvalidBlobType", "BlobAlreadyExists"}
APPEND_ERROR_CODES = {
    "BlockCountExceedsLimit",
    "MaxBlobSizeConditionNotMet",
    "AppendPositionConditionNotMet",
    "InvalidBlobType",
    "RequestBodyTooLarge",
}
COMMIT_ERROR_CODES = {"InvalidBlockList", "InvalidBlockId"}
PAGE_RANGE_ERROR_CODES = {"InvalidPageRange"}


def _raise_mapped(error: HttpResponseError, codes: set, target: Type[BlobSampleException], operation: str):
    """Re-raise ``error`` as ``target`` when its service error code is in ``codes``."""
    if error.error_code in codes:
        raise target(
            f"{operation} failed: {error.error_code}",
            error_code=error.error_code,
            details={"original_exception": type(error).__name__, "message": str(error)},
        ) from error
    raise error


class AzureBlobStorageProvider(BlobStorageProvider):
    """Azure Blob Storage provider implementation."""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize Azure Blob Storage Provider.

        Args:
            config: StorageConfig fields as a dictionary. Credentials are resolved
                lazily on first use, so a misconfigured provider fails with
                ConfigError at the first remote call.
        """
        self.config = StorageConfig(**config)
        self.service_client = None

    def _initialize(self):
        """Create the service client with explicit transport timeouts."""
        if self.service_client is not None:
            return

        client_args = StorageCredentials.resolve(self.config)
        transport_kwargs = {
            "connection_timeout": self.config.connection_timeout,
            "read_timeout": self.config.read_timeout,
        }
        try:
            if "connection_string" in client_args:
                self.service_client = BlobServiceClient.from_connection_string(
                    client_args["connection_string"], **transport_kwargs
                )
            else:
                self.service_client = BlobServiceClient(
                    account_url=client_args["account_url"],
                    credential=client_args["credential"],
                    **transport_kwargs,
                )
            logger.info(f"Initialized blob service client for {self.service_client.url}")
        except (AzureError, ValueError) as e:
            raise ErrorHandler.transport_error(e, "create_client") from e

    def _ensure_initialized(self):
        if self.service_client is None:
            self._initialize()

    def _blob_client(self, container: str, name: str):
        self._ensure_initialized()
        return self.service_client.get_blob_client(container=container, blob=name)

    def _content_settings(self, content_type: str = None):
        return ContentSettings(content_type=content_type) if content_type else None

    @property
    def timeout(self) -> int:
        return self.config.request_timeout

    @convert_exceptions({AzureError: TransportError})
    async def create_container_if_not_exists(self, name: str, access: PublicAccess = PublicAccess.PRIVATE) -> bool:
        self._ensure_initialized()
        public_access = None if access == PublicAccess.PRIVATE else access.value
        async with self.service_client.get_container_client(name) as client:
            try:
                await client.create_container(public_access=public_access, timeout=self.timeout)
            except ResourceExistsError:
                logger.debug(f"Container {name} already exists")
                return False
        logger.debug(f"Created container {name} with {access.value} access")
        return True

    @convert_exceptions({AzureError: TransportError})
    async def delete_container(self, name: str) -> None:
        self._ensure_initialized()
        async with self.service_client.get_container_client(name) as client:
            await client.delete_container(timeout=self.timeout)

    @convert_exceptions({AzureError: TransportError})
    async def put_append_blob(self, container: str, name: str, content_type: str = None) -> None:
        async with self._blob_client(container, name) as client:
            try:
                await client.create_append_blob(
                    content_settings=self._content_settings(content_type), timeout=self.timeout
                )
            except HttpResponseError as e:
                _raise_mapped(e, CREATE_ERROR_CODES, CreateError, "Create append blob")

    @convert_exceptions({AzureError: TransportError})
    async def append_block(self, container: str, name: str, data: bytes) -> None:
        async with self._blob_client(container, name) as client:
            try:
                await client.append_block(data, length=len(data), timeout=self.timeout)
            except HttpResponseError as e:
                _raise_mapped(e, APPEND_ERROR_CODES, AppendError, "Append block")

    @convert_exceptions({AzureError: TransportError})
    async def create_block_blob(self, container: str, name: str, content_type: str = None) -> None:
        async with self._blob_client(container, name) as client:
            try:
                await client.upload_blob(
                    b"",
                    blob_type=BlobType.BLOCKBLOB,
                    overwrite=True,
                    content_settings=self._content_settings(content_type),
                    timeout=self.timeout,
                )
            except HttpResponseError as e:
                _raise_mapped(e, CREATE_ERROR_CODES, CreateError, "Create block blob")

    @convert_exceptions({AzureError: TransportError})
    async def put_block(self, container: str, name: str, block_id: str, data: bytes) -> None:
        async with self._blob_client(container, name) as client:
            await client.stage_block(block_id, data, length=len(data), timeout=self.timeout)

    @convert_exceptions({AzureError: TransportError})
    async def get_block_list(
        self, container: str, name: str, block_filter: BlockListFilter = BlockListFilter.ALL
    ) -> BlockList:
        async with self._blob_client(container, name) as client:
            committed, uncommitted = await client.get_block_list(
                block_list_type=block_filter.value, timeout=self.timeout
            )
        return BlockList(
            committed=[
                BlockInfo(block_id=block.id, size=block.size or 0, state=BlockState.COMMITTED)
                for block in committed or []
            ],
            uncommitted=[
                BlockInfo(block_id=block.id, size=block.size or 0, state=BlockState.UNCOMMITTED)
                for block in uncommitted or []
            ],
        )

    @convert_exceptions({AzureError: TransportError})
    async def put_block_list(self, container: str, name: str, block_ids: Sequence[str]) -> None:
        async with self._blob_client(container, name) as client:
            try:
                await client.commit_block_list(
                    [BlobBlock(block_id=block_id) for block_id in block_ids], timeout=self.timeout
                )
            except HttpResponseError as e:
                _raise_mapped(e, COMMIT_ERROR_CODES, CommitError, "Commit block list")

    @convert_exceptions({AzureError: TransportError})
    async def put_page_blob(self, container: str, name: str, length: int, content_type: str = None) -> None:
        validate_page_blob_size(length)
        async with self._blob_client(container, name) as client:
            try:
                await client.create_page_blob(
                    size=length, content_settings=self._content_settings(content_type), timeout=self.timeout
                )
            except HttpResponseError as e:
                _raise_mapped(e, CREATE_ERROR_CODES, CreateError, "Create page blob")

    @convert_exceptions({AzureError: TransportError})
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
        length = end - start + 1
        async with self._blob_client(container, name) as client:
            try:
                if mode == PageWriteMode.CLEAR:
                    await client.clear_page(offset=start, length=length, timeout=self.timeout)
                else:
                    validate_page_data(start, end, data or b"")
                    await client.upload_page(data, offset=start, length=length, timeout=self.timeout)
            except HttpResponseError as e:
                _raise_mapped(e, PAGE_RANGE_ERROR_CODES, RangeError, "Write page range")

    @convert_exceptions({AzureError: TransportError})
    async def get_page_ranges(self, container: str, name: str) -> List[PageRange]:
        async with self._blob_client(container, name) as client:
            ranges, _cleared = await client.get_page_ranges(timeout=self.timeout)
        return [PageRange(start=page["start"], end=page["end"]) for page in ranges]

    @convert_exceptions({AzureError: TransportError})
    async def get_blob(self, container: str, name: str) -> bytes:
        async with self._blob_client(container, name) as client:
            stream = await client.download_blob(timeout=self.timeout)
            return await stream.readall()

    @convert_exceptions({AzureError: TransportError})
    async def list_blob_items(self, container: str) -> List[BlobItem]:
        """
        List every blob in a container.

        The SDK pager is drained in one go. A production listing should walk
        ``list_blobs().by_page(continuation_token=...)`` and persist the token.
        """
        self._ensure_initialized()
        items = []
        async with self.service_client.get_container_client(container) as client:
            async for props in client.list_blobs(timeout=self.timeout):
                items.append(BlobItem(name=props.name, kind=_blob_kind(props.blob_type), size=props.size or 0))
        return items

    async def close(self):
        """Close the underlying service client and cleanup."""
        if self.service_client:
            logger.info("Closing Azure Blob Storage client")
            await self.service_client.close()
            self.service_client = None


def _blob_kind(blob_type) -> Optional[BlobKind]:
    value = getattr(blob_type, "value", blob_type)
    try:
        return BlobKind(value)
    except ValueError:
        return None
