"""
Page blob operations.

A page blob has a fixed length declared at creation. Its content is written
and cleared in 512-byte pages, and the service reports which pages hold data.
"""

from typing import List, Sequence

from loguru import logger

from ..exceptions import VerificationError
from ..models import PageBlobResult, PageRange, PageWriteMode
from ..providers.base import BlobStorageProvider
from ..utils.validation import validate_page_blob_size, validate_page_range
from .listing import download_blob
from .payload import PayloadFactory, random_data


def ranges_cover(ranges: Sequence[PageRange], target: PageRange) -> bool:
    """True if the union of ``ranges`` contains every byte of ``target``."""
    position = target.start
    for page_range in sorted(ranges, key=lambda r: r.start):
        if page_range.start > position:
            break
        position = max(position, page_range.end + 1)
        if position > target.end:
            return True
    return position > target.end


async def clear_pages(provider: BlobStorageProvider, container: str, blob_name: str, start: int, end: int) -> None:
    """Zero the pages in ``[start, end]``; they drop out of the valid page ranges."""
    validate_page_range(start, end)
    await provider.write_range(container, blob_name, start, end, PageWriteMode.CLEAR)


async def print_page_ranges(provider: BlobStorageProvider, container: str, blob_name: str) -> List[PageRange]:
    logger.info("Get valid page ranges...")
    page_ranges = await provider.get_page_ranges(container, blob_name)
    logger.info("Valid page ranges:")
    for page_range in page_ranges:
        logger.info(f"\tFrom page {page_range.start} to page {page_range.end}")
    return page_ranges


async def run_page_blob_workflow(
    provider: BlobStorageProvider,
    container: str,
    blob_name: str,
    local_path: str,
    blob_length: int = 512 * 5,
    write_length: int = 512 * 3,
    content_type: str = "text/plain",
    payload_factory: PayloadFactory = random_data,
) -> PageBlobResult:
    """
    Create a page blob, write its leading pages and download it.

    Sizes are checked before anything is sent to the service.

    Raises:
        InvalidSizeError: ``blob_length`` is not a multiple of 512
        AlignmentError: ``write_length`` is not a multiple of 512
        RangeError: the write would extend past ``blob_length``
        AlreadyExistsError: ``local_path`` already exists
        VerificationError: Page ranges or content do not match what was written
    """
    log = logger.bind(workflow="page")

    validate_page_blob_size(blob_length)
    validate_page_range(0, write_length - 1, blob_length)
    written = PageRange(start=0, end=write_length - 1)

    log.info("Create an empty page blob...")
    await provider.put_page_blob(container, blob_name, blob_length, content_type)

    log.info("Writing in the page blob...")
    data = payload_factory(write_length)
    await provider.write_range(container, blob_name, written.start, written.end, PageWriteMode.UPDATE, data)

    page_ranges = await print_page_ranges(provider, container, blob_name)
    outside = [r for r in page_ranges if r.start < written.start or r.end > written.end]
    if outside or not ranges_cover(page_ranges, written):
        raise VerificationError(
            f"Valid page ranges do not match the written range [{written.start}, {written.end}]",
            error_code="PageRangeMismatch",
            details={"page_ranges": [r.model_dump() for r in page_ranges]},
        )

    content = await download_blob(provider, container, blob_name, local_path)
    if len(content) != blob_length or content[:write_length] != data or any(content[write_length:]):
        raise VerificationError(
            f"Page blob '{blob_name}' content differs from the written pages",
            error_code="PageReadBackMismatch",
        )

    return PageBlobResult(
        blob_name=blob_name,
        blob_length=blob_length,
        written=written,
        page_ranges=page_ranges,
        local_path=local_path,
    )
