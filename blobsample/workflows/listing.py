import os
from typing import List

import aiofiles
from loguru import logger

from ..exceptions import AlreadyExistsError, LocalIOError
from ..providers.base import BlobStorageProvider


async def list_blobs(provider: BlobStorageProvider, container: str) -> List[str]:
    """
    Return the names of every blob in ``container``.

    The listing is not paginated here: the provider drains the whole result set.
    Containers with many blobs need continuation-token paging instead.
    """
    return await provider.list_blobs(container)


async def print_blob_list(provider: BlobStorageProvider, container: str) -> List[str]:
    """Log every blob in ``container`` and return the names."""
    logger.info(f"Get blob list from container '{container}'...")
    items = await provider.list_blob_items(container)
    logger.info(f"Blobs inside '{container}' container:")
    for item in items:
        kind = item.kind.value if item.kind else "unknown"
        logger.info(f"\t{item.name} ({kind}, {item.size} bytes)")
    return [item.name for item in items]


async def download_blob(provider: BlobStorageProvider, container: str, blob_name: str, local_path: str) -> bytes:
    """
    Write a blob's full content into a new local file and return the content.

    The whole body is read in one request; there is no ranged or resumable read.

    Raises:
        AlreadyExistsError: ``local_path`` exists. The file is left untouched and
            no remote call is made.
        LocalIOError: The file could not be created or written.
    """
    logger.info(f"Download blob '{blob_name}' into '{local_path}'...")

    if os.path.exists(local_path):
        raise AlreadyExistsError(
            f"File '{local_path}' already exists",
            error_code="LocalFileExists",
            details={"path": local_path},
        )

    data = await provider.get_blob(container, blob_name)

    try:
        async with aiofiles.open(local_path, "xb") as f:
            await f.write(data)
    except FileExistsError as e:
        # Created by someone else between the check and the open
        raise AlreadyExistsError(
            f"File '{local_path}' already exists",
            error_code="LocalFileExists",
            details={"path": local_path},
        ) from e
    except OSError as e:
        raise LocalIOError(
            f"Cannot write '{local_path}': {e.strerror or e}",
            error_code="LocalWriteFailed",
            details={"path": local_path, "errno": e.errno},
        ) from e

    logger.debug(f"Wrote {len(data)} bytes to {local_path}")
    return data
