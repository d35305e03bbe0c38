import asyncio

import pytest

from blobsample.models import PublicAccess
from blobsample.providers.custom_providers import InMemoryBlobStorageProvider
from blobsample.utils.logging_config import log_manager
from blobsample.workflows.payload import seeded_payload_factory


@pytest.fixture(autouse=True)
def silent_logs():
    log_manager.disable_console()
    yield


@pytest.fixture
def provider():
    return InMemoryBlobStorageProvider()


@pytest.fixture
def container(provider):
    asyncio.run(provider.create_container_if_not_exists("c1", PublicAccess.PRIVATE))
    return "c1"


@pytest.fixture
def payload_factory():
    return seeded_payload_factory(1984)
