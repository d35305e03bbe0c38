"""
Block blob operations.

Blocks are staged with put_block and stay invisible until a block list that
references them is committed. Staged blocks left out of the commit are
discarded by the service.
"""

from typing import List

from loguru import logger

from ..config.settings import DEFAULT_BLOCK_ID
from ..exceptions import VerificationError
from ..models import BlockBlobResult, BlockList, BlockListFilter
from ..providers.base import BlobStorageProvider
from .listing import download_blob
from .payload import PayloadFactory, random_data


async def print_block_list(provider: BlobStorageProvider, container: str, blob_name: str) -> BlockList:
    """Log committed and uncommitted block ids of a block blob and return the list."""
    logger.info("Get block list...")
    block_list = await provider.get_block_list(container, blob_name, BlockListFilter.ALL)
    logger.info(f"Block blob '{blob_name}' block list")
    logger.info("\tCommitted Blocks' IDs")
    for block_id in block_list.committed_ids:
        logger.info(f"\t\t{block_id}")
    logger.info("\tUncommitted Blocks' IDs")
    for block_id in block_list.uncommitted_ids:
        logger.info(f"\t\t{block_id}")
    return block_list


async def commit_uncommitted_blocks(provider: BlobStorageProvider, container: str, blob_name: str) -> List[str]:
    """Commit every currently staged block, in service order, and return their ids."""
    logger.info("Get uncommitted blocks list...")
    staged = await provider.get_block_list(container, blob_name, BlockListFilter.UNCOMMITTED)
    block_ids = staged.uncommitted_ids

    logger.info("Commit blocks...")
    await provider.put_block_list(container, blob_name, block_ids)
    return block_ids


async def run_block_blob_workflow(
    provider: BlobStorageProvider,
    container: str,
    blob_name: str,
    local_path: str,
    block_id: str = DEFAULT_BLOCK_ID,
    payload_size: int = 1984,
    content_type: str = None,
    payload_factory: PayloadFactory = random_data,
) -> BlockBlobResult:
    """
    Stage one block, commit it and download the committed blob.

    Raises:
        CreateError: The blob exists with another blob type
        CommitError: The commit referenced a block the blob does not have
        AlreadyExistsError: ``local_path`` already exists
        VerificationError: Block states or content do not match what was staged
    """
    log = logger.bind(workflow="block")

    log.info("Create an empty block blob...")
    await provider.create_block_blob(container, blob_name, content_type)

    log.info("Put a block...")
    payload = payload_factory(payload_size)
    await provider.put_block(container, blob_name, block_id, payload)

    before_commit = await print_block_list(provider, container, blob_name)
    if block_id not in before_commit.uncommitted_ids or block_id in before_commit.committed_ids:
        raise VerificationError(
            f"Block '{block_id}' should be uncommitted only before the commit",
            error_code="BlockStateMismatch",
            details={"before_commit": before_commit.model_dump()},
        )

    await commit_uncommitted_blocks(provider, container, blob_name)

    after_commit = await print_block_list(provider, container, blob_name)
    if block_id not in after_commit.committed_ids or block_id in after_commit.uncommitted_ids:
        raise VerificationError(
            f"Block '{block_id}' should be committed after the commit",
            error_code="BlockStateMismatch",
            details={"after_commit": after_commit.model_dump()},
        )

    content = await download_blob(provider, container, blob_name, local_path)
    if content != payload:
        raise VerificationError(
            f"Block blob '{blob_name}' content differs from the committed block",
            error_code="BlockReadBackMismatch",
        )

    return BlockBlobResult(
        blob_name=blob_name,
        block_id=block_id,
        payload=payload,
        before_commit=before_commit,
        after_commit=after_commit,
        local_path=local_path,
    )
