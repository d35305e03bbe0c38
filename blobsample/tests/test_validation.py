import pytest

from blobsample.exceptions import AlignmentError, InvalidSizeError, RangeError, ValidationException
from blobsample.models import PageRange
from blobsample.utils.validation import (
    PAGE_SIZE,
    validate_page_blob_size,
    validate_page_data,
    validate_page_range,
)


def test_page_blob_sizes_that_are_page_multiples_are_accepted():
    for pages in range(0, 64):
        assert validate_page_blob_size(pages * PAGE_SIZE) == pages * PAGE_SIZE


@pytest.mark.parametrize("length", [1, 511, 513, 1000, 2559, 2561, -512])
def test_page_blob_sizes_off_the_page_grid_are_rejected(length):
    with pytest.raises(InvalidSizeError):
        validate_page_blob_size(length)


def test_aligned_ranges_pass():
    for start_page in range(0, 8):
        for end_page in range(start_page, 8):
            validate_page_range(start_page * PAGE_SIZE, (end_page + 1) * PAGE_SIZE - 1)


@pytest.mark.parametrize("start,end", [(1, 511), (0, 510), (0, 512), (256, 767), (-512, 511)])
def test_misaligned_ranges_raise_alignment_error(start, end):
    with pytest.raises(AlignmentError):
        validate_page_range(start, end)


def test_range_past_blob_length_raises_range_error():
    with pytest.raises(RangeError):
        validate_page_range(0, 3071, blob_length=2560)


def test_empty_range_raises_range_error():
    with pytest.raises(RangeError):
        validate_page_range(512, 511)


def test_validation_errors_share_a_base():
    assert issubclass(AlignmentError, ValidationException)
    assert issubclass(InvalidSizeError, ValidationException)
    assert issubclass(RangeError, ValidationException)


def test_page_data_must_fill_the_range():
    validate_page_data(0, 511, b"x" * 512)
    with pytest.raises(AlignmentError):
        validate_page_data(0, 511, b"x" * 100)


def test_page_range_model_checks_alignment():
    assert PageRange(start=512, end=1535).length == 1024
    with pytest.raises(AlignmentError):
        PageRange(start=3, end=511)
