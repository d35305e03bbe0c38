"""
Tests for AzureBlobStorageProvider against a mocked azure-storage-blob client.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError, ServiceRequestError

from blobsample.config.settings import StorageConfig
from blobsample.exceptions import (
    AlignmentError,
    AppendError,
    CommitError,
    ConfigError,
    CreateError,
    InvalidSizeError,
    RangeError,
    TransportError,
)
from blobsample.models import BlobKind, BlockListFilter, BlockState, PageRange, PageWriteMode, PublicAccess
from blobsample.providers.azure_providers import AzureBlobStorageProvider
from blobsample.providers.credentials import StorageCredentials

MODULE = "blobsample.providers.azure_providers.storage_provider"


def run(coro):
    return asyncio.run(coro)


def http_error(code: str, cls=HttpResponseError):
    error = cls(message=f"service said {code}")
    error.error_code = code
    return error


def async_client(**methods):
    client = MagicMock()
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    for name, value in methods.items():
        setattr(client, name, value)
    return client


class AsyncPager:
    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


@pytest.fixture
def storage_config():
    return StorageConfig(
        use_emulator=True,
        account_name=None,
        account_key=None,
        connection_string=None,
        request_timeout=7,
    )


@pytest.fixture
def provider(storage_config):
    provider = AzureBlobStorageProvider(storage_config.model_dump())
    provider.service_client = MagicMock()
    return provider


def with_blob_client(provider, client):
    provider.service_client.get_blob_client.return_value = client
    return client


def test_client_is_built_with_transport_timeouts(storage_config):
    provider = AzureBlobStorageProvider(storage_config.model_dump())
    with patch(f"{MODULE}.BlobServiceClient") as service_cls:
        provider._ensure_initialized()

    kwargs = service_cls.call_args.kwargs
    assert kwargs["account_url"] == storage_config.emulator_blob_endpoint
    assert kwargs["credential"]["account_name"] == StorageCredentials.EMULATOR_ACCOUNT_NAME
    assert kwargs["connection_timeout"] == storage_config.connection_timeout
    assert kwargs["read_timeout"] == storage_config.read_timeout


def test_connection_string_client(storage_config):
    config = storage_config.model_copy(update={"use_emulator": False, "connection_string": "UseDevelopmentStorage=true"})
    provider = AzureBlobStorageProvider(config.model_dump())
    with patch(f"{MODULE}.BlobServiceClient") as service_cls:
        provider._ensure_initialized()
    service_cls.from_connection_string.assert_called_once()
    assert service_cls.from_connection_string.call_args.args[0] == "UseDevelopmentStorage=true"


def test_missing_credentials_raise_config_error_on_first_call(storage_config):
    config = storage_config.model_copy(update={"use_emulator": False})
    provider = AzureBlobStorageProvider(config.model_dump())
    with pytest.raises(ConfigError):
        run(provider.get_blob("c1", "a1"))


def test_create_container_passes_private_access_and_timeout(provider):
    client = async_client(create_container=AsyncMock())
    provider.service_client.get_container_client.return_value = client

    assert run(provider.create_container_if_not_exists("c1", PublicAccess.PRIVATE)) is True
    client.create_container.assert_awaited_once_with(public_access=None, timeout=7)


def test_create_existing_container_returns_false(provider):
    client = async_client(create_container=AsyncMock(side_effect=ResourceExistsError(message="exists")))
    provider.service_client.get_container_client.return_value = client

    assert run(provider.create_container_if_not_exists("c1")) is False


def test_put_append_blob_maps_invalid_blob_type(provider):
    with_blob_client(provider, async_client(create_append_blob=AsyncMock(side_effect=http_error("InvalidBlobType"))))
    with pytest.raises(CreateError) as exc_info:
        run(provider.put_append_blob("c1", "a1", "text/plain"))
    assert exc_info.value.error_code == "InvalidBlobType"


def test_append_block_maps_capacity_errors(provider):
    with_blob_client(provider, async_client(append_block=AsyncMock(side_effect=http_error("BlockCountExceedsLimit"))))
    with pytest.raises(AppendError):
        run(provider.append_block("c1", "a1", b"x" * 42))


def test_unmapped_service_error_becomes_transport_error(provider):
    with_blob_client(provider, async_client(append_block=AsyncMock(side_effect=http_error("ServerBusy"))))
    with pytest.raises(TransportError) as exc_info:
        run(provider.append_block("c1", "a1", b"x"))
    assert exc_info.value.error_code == "ServerBusy"
    assert isinstance(exc_info.value.__cause__, HttpResponseError)


def test_connection_failure_becomes_transport_error(provider):
    with_blob_client(provider, async_client(download_blob=AsyncMock(side_effect=ServiceRequestError("no route"))))
    with pytest.raises(TransportError):
        run(provider.get_blob("c1", "a1"))


def test_put_block_list_maps_invalid_block_list(provider):
    client = with_blob_client(
        provider, async_client(commit_block_list=AsyncMock(side_effect=http_error("InvalidBlockList")))
    )
    with pytest.raises(CommitError):
        run(provider.put_block_list("c1", "b1", ["AAAAA"]))
    sent = client.commit_block_list.call_args.args[0]
    assert [block.id for block in sent] == ["AAAAA"]


def test_get_block_list_converts_sdk_blocks(provider):
    committed = [SimpleNamespace(id="AAAAA", size=1984)]
    uncommitted = [SimpleNamespace(id="BBBBB", size=10)]
    client = with_blob_client(
        provider, async_client(get_block_list=AsyncMock(return_value=(committed, uncommitted)))
    )

    block_list = run(provider.get_block_list("c1", "b1", BlockListFilter.ALL))
    client.get_block_list.assert_awaited_once_with(block_list_type="all", timeout=7)
    assert block_list.committed_ids == ["AAAAA"]
    assert block_list.committed[0].state == BlockState.COMMITTED
    assert block_list.uncommitted[0].size == 10


def test_put_page_blob_rejects_bad_size_before_any_call(provider):
    with pytest.raises(InvalidSizeError):
        run(provider.put_page_blob("c1", "p1", 1000))
    provider.service_client.get_blob_client.assert_not_called()


def test_write_range_rejects_misalignment_before_any_call(provider):
    with pytest.raises(AlignmentError):
        run(provider.write_range("c1", "p1", 0, 1000, PageWriteMode.UPDATE, b"x" * 1001))
    provider.service_client.get_blob_client.assert_not_called()


def test_write_range_update_and_clear(provider):
    client = with_blob_client(provider, async_client(upload_page=AsyncMock(), clear_page=AsyncMock()))

    run(provider.write_range("c1", "p1", 0, 1535, PageWriteMode.UPDATE, b"x" * 1536))
    client.upload_page.assert_awaited_once_with(b"x" * 1536, offset=0, length=1536, timeout=7)

    run(provider.write_range("c1", "p1", 512, 1023, PageWriteMode.CLEAR))
    client.clear_page.assert_awaited_once_with(offset=512, length=512, timeout=7)


def test_write_range_maps_invalid_page_range(provider):
    with_blob_client(provider, async_client(upload_page=AsyncMock(side_effect=http_error("InvalidPageRange"))))
    with pytest.raises(RangeError):
        run(provider.write_range("c1", "p1", 2560, 3071, PageWriteMode.UPDATE, b"x" * 512))


def test_get_page_ranges(provider):
    with_blob_client(
        provider, async_client(get_page_ranges=AsyncMock(return_value=([{"start": 0, "end": 1535}], [])))
    )
    assert run(provider.get_page_ranges("c1", "p1")) == [PageRange(start=0, end=1535)]


def test_get_blob_reads_whole_body(provider):
    stream = MagicMock(readall=AsyncMock(return_value=b"payload"))
    client = with_blob_client(provider, async_client(download_blob=AsyncMock(return_value=stream)))
    assert run(provider.get_blob("c1", "a1")) == b"payload"
    client.download_blob.assert_awaited_once_with(timeout=7)


def test_list_blob_items_drains_pager(provider):
    blobs = [
        SimpleNamespace(name="demoAppendBlob", blob_type="AppendBlob", size=42),
        SimpleNamespace(name="demoPageBlob", blob_type="PageBlob", size=2560),
    ]
    client = async_client(list_blobs=MagicMock(return_value=AsyncPager(blobs)))
    provider.service_client.get_container_client.return_value = client

    items = run(provider.list_blob_items("c1"))
    assert [item.name for item in items] == ["demoAppendBlob", "demoPageBlob"]
    assert items[1].kind == BlobKind.PAGE


def test_close_releases_client(provider):
    service_client = provider.service_client
    service_client.close = AsyncMock()
    run(provider.close())
    service_client.close.assert_awaited_once()
    assert provider.service_client is None


def test_malformed_connection_string_is_a_transport_error(storage_config):
    config = storage_config.model_copy(update={"use_emulator": False, "connection_string": "not-a-connection-string"})
    provider = AzureBlobStorageProvider(config.model_dump())
    with patch(f"{MODULE}.BlobServiceClient") as service_cls:
        service_cls.from_connection_string.side_effect = ValueError("Connection string is either blank or malformed.")
        with pytest.raises(TransportError) as exc_info:
            run(provider.list_blob_items("c1"))
    assert exc_info.value.details["operation"] == "create_client"
    assert provider.service_client is None
