"""
Append blob operations.

An append blob only grows: blocks of any length are added at the end and
existing content is never rewritten.
"""

from loguru import logger

from ..exceptions import VerificationError
from ..models import AppendBlobResult
from ..providers.base import BlobStorageProvider
from .listing import download_blob
from .payload import PayloadFactory, random_data


async def run_append_blob_workflow(
    provider: BlobStorageProvider,
    container: str,
    blob_name: str,
    local_path: str,
    payload_size: int = 42,
    content_type: str = "text/plain",
    payload_factory: PayloadFactory = random_data,
) -> AppendBlobResult:
    """
    Create an empty append blob, append one block and download the result.

    Raises:
        CreateError: The blob exists with another blob type
        AppendError: The service refused the block
        AlreadyExistsError: ``local_path`` already exists
        VerificationError: The downloaded content differs from the appended block
    """
    log = logger.bind(workflow="append")

    log.info("Create an empty append blob...")
    await provider.put_append_blob(container, blob_name, content_type)

    log.info("Append a block to the blob...")
    payload = payload_factory(payload_size)
    await provider.append_block(container, blob_name, payload)

    content = await download_blob(provider, container, blob_name, local_path)
    if content != payload:
        raise VerificationError(
            f"Append blob '{blob_name}' holds {len(content)} bytes that differ from the {len(payload)} appended",
            error_code="AppendReadBackMismatch",
        )

    return AppendBlobResult(blob_name=blob_name, payload=payload, local_path=local_path)
