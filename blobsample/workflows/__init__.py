from .append_blob import run_append_blob_workflow
from .block_blob import run_block_blob_workflow, commit_uncommitted_blocks, print_block_list
from .page_blob import run_page_blob_workflow, clear_pages, print_page_ranges, ranges_cover
from .listing import list_blobs, print_blob_list, download_blob
from .payload import random_data, seeded_payload_factory

__all__ = [
    'run_append_blob_workflow',
    'run_block_blob_workflow',
    'run_page_blob_workflow',
    'commit_uncommitted_blocks',
    'print_block_list',
    'clear_pages',
    'print_page_ranges',
    'ranges_cover',
    'list_blobs',
    'print_blob_list',
    'download_blob',
    'random_data',
    'seeded_payload_factory',
]
