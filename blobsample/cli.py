"""
Command line entry point for the Azure Blob Storage sample.

Examples:
  blobsample                      # live account from ACCOUNT_NAME / ACCOUNT_KEY
  blobsample --emulator           # local storage emulator (Azurite)
  blobsample --provider memory -y # dry run without any service
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger

from .config.settings import BlobSampleConfig
from .exceptions import BlobSampleException
from .providers.credentials import StorageCredentials
from .providers.factory import ProviderFactory
from .sample import BlobSample
from .utils.logging_config import log_manager


def confirm_cleanup() -> bool:
    """Block until the operator presses enter; a closed stdin counts as no."""
    try:
        input("Press enter to delete the blobs, container and local files created in this sample...")
    except EOFError:
        return False
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blobsample",
        description="Azure Storage Blob Sample: append, block and page blob operations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    parser.add_argument(
        "--emulator",
        action="store_true",
        help="use the Azure Storage Emulator",
    )
    parser.add_argument(
        "--provider",
        choices=sorted(ProviderFactory._storage_providers.keys()),
        default=None,
        help="storage provider (default: STORAGE_PROVIDER or azure)",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="directory for the downloaded blob files (default: SAMPLE_OUTPUT_DIR or .)",
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="clean up without waiting for enter",
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="keep the container and downloaded files",
    )
    return parser


async def run_sample(config: BlobSampleConfig, emulator: bool, confirm, cleanup: bool) -> dict:
    provider = ProviderFactory.create_storage_provider(config=config.storage)
    try:
        sample = BlobSample(provider, config.sample, emulator=emulator, confirm=confirm)
        return await sample.run(cleanup=cleanup)
    finally:
        await provider.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = BlobSampleConfig()
        log_manager.configure(config.logging)

        storage = config.storage
        if args.emulator:
            storage.use_emulator = True
        if args.provider:
            storage.provider = args.provider
        if args.output_dir:
            config.sample.output_dir = args.output_dir

        logger.info("Azure Storage Blob Sample")
        if storage.provider == "azure":
            logger.info(f"Using {StorageCredentials.source(storage)} credentials")

        asyncio.run(
            run_sample(
                config,
                emulator=storage.use_emulator,
                confirm=None if args.yes else confirm_cleanup,
                cleanup=not args.keep,
            )
        )
    except BlobSampleException as e:
        # Settings errors can surface before logging is configured
        log_manager.enable_console()
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
