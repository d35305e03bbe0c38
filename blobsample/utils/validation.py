"""
Local checks applied before a page blob request leaves the process.

Page blobs address storage in 512-byte pages: the declared length and every
written range must sit on page boundaries.
"""

from ..exceptions import AlignmentError, InvalidSizeError, RangeError

PAGE_SIZE = 512


def validate_page_blob_size(length: int) -> int:
    """Return ``length`` if it is a usable page blob size, else raise InvalidSizeError."""
    if length < 0 or length % PAGE_SIZE != 0:
        raise InvalidSizeError(
            f"Page blob length {length} is not a multiple of {PAGE_SIZE}",
            error_code="InvalidPageBlobSize",
            details={"length": length},
        )
    return length


def validate_page_range(start: int, end: int, blob_length: int = None) -> None:
    """
    Check an inclusive page range ``[start, end]``.

    Raises:
        AlignmentError: start is not on a page boundary or end is not the last byte of a page
        RangeError: the range is empty or extends past ``blob_length``
    """
    if start < 0 or start % PAGE_SIZE != 0 or (end + 1) % PAGE_SIZE != 0:
        raise AlignmentError(
            f"Page range [{start}, {end}] is not aligned to {PAGE_SIZE}-byte boundaries",
            error_code="UnalignedPageRange",
            details={"start": start, "end": end},
        )
    if end < start:
        raise RangeError(
            f"Page range [{start}, {end}] is empty",
            error_code="InvalidPageRange",
            details={"start": start, "end": end},
        )
    if blob_length is not None and end >= blob_length:
        raise RangeError(
            f"Page range [{start}, {end}] extends past blob length {blob_length}",
            error_code="InvalidPageRange",
            details={"start": start, "end": end, "blob_length": blob_length},
        )


def validate_page_data(start: int, end: int, data: bytes) -> None:
    """An Update write must carry exactly one byte per byte of the range."""
    expected = end - start + 1
    if len(data) != expected:
        raise AlignmentError(
            f"Page write of {len(data)} bytes does not fill range [{start}, {end}] ({expected} bytes)",
            error_code="PageDataLengthMismatch",
            details={"start": start, "end": end, "length": len(data)},
        )
