"""
BlobSample
----------
Drives the sample end to end against any BlobStorageProvider:

1. Provision a private container.
2. Run the append, block and page blob workflows, each downloading its blob.
3. List the container.
4. After confirmation, delete the container and the downloaded files.

Each stage raises its own BlobSampleException; nothing is retried here.
"""

import os
from typing import Callable, Dict, List, Optional

from loguru import logger

from .config.settings import SampleConfig
from .exceptions import BlobSampleException, ConfigError
from .models import PublicAccess
from .providers.base import BlobStorageProvider
from .utils.error_handler import log_exceptions
from .workflows import (
    print_blob_list,
    random_data,
    run_append_blob_workflow,
    run_block_blob_workflow,
    run_page_blob_workflow,
)
from .workflows.payload import PayloadFactory

EMULATOR_HINT = (
    "If you are running with the emulator credentials, please make sure the storage "
    "emulator (Azurite) is running, then restart the sample"
)


class BlobSample:
    def __init__(
        self,
        provider: BlobStorageProvider,
        config: SampleConfig,
        emulator: bool = False,
        payload_factory: PayloadFactory = random_data,
        confirm: Optional[Callable[[], bool]] = None,
    ):
        """
        Args:
            provider: Storage provider every remote call goes through
            config: Names, sizes and output locations for the run
            emulator: Running against the storage emulator
            payload_factory: Produces the bytes written to each blob
            confirm: Called before cleanup; cleanup only runs if it returns True.
                ``None`` cleans up without asking.
        """
        self.provider = provider
        self.config = config
        self.emulator = emulator
        self.payload_factory = payload_factory
        self.confirm = confirm
        self.results: Dict[str, object] = {}
        self.local_files: List[str] = []

    @property
    def container(self) -> str:
        return self.config.container_name

    def check_output_dir(self) -> None:
        """Fail before anything remote is created if downloads have nowhere to go."""
        output_dir = self.config.output_dir
        if not os.path.isdir(output_dir):
            raise ConfigError(
                f"Output directory '{output_dir}' does not exist",
                error_code="OutputDirMissing",
                details={"path": output_dir},
            )

    async def provision_container(self) -> bool:
        logger.info("Create container with private access type...")
        try:
            return await self.provider.create_container_if_not_exists(self.container, PublicAccess.PRIVATE)
        except BlobSampleException as e:
            if self.emulator:
                logger.error(f"Create container failed: {EMULATOR_HINT}: {e}")
            else:
                logger.error(f"Create container failed: {e}")
            raise

    @log_exceptions(include_traceback=False, custom_message="Append blob operations failed")
    async def run_append_blob(self):
        path = self.config.output_path(self.config.append_blob_file)
        result = await run_append_blob_workflow(
            self.provider,
            self.container,
            self.config.append_blob_name,
            path,
            payload_size=self.config.append_payload_size,
            content_type=self.config.content_type,
            payload_factory=self.payload_factory,
        )
        self.local_files.append(path)
        self.results["append"] = result
        return result

    @log_exceptions(include_traceback=False, custom_message="Block blob operations failed")
    async def run_block_blob(self):
        path = self.config.output_path(self.config.block_blob_file)
        result = await run_block_blob_workflow(
            self.provider,
            self.container,
            self.config.block_blob_name,
            path,
            block_id=self.config.block_id,
            payload_size=self.config.block_payload_size,
            payload_factory=self.payload_factory,
        )
        self.local_files.append(path)
        self.results["block"] = result
        return result

    @log_exceptions(include_traceback=False, custom_message="Page blob operations failed")
    async def run_page_blob(self):
        path = self.config.output_path(self.config.page_blob_file)
        result = await run_page_blob_workflow(
            self.provider,
            self.container,
            self.config.page_blob_name,
            path,
            blob_length=self.config.page_blob_size,
            write_length=self.config.page_write_size,
            content_type=self.config.content_type,
            payload_factory=self.payload_factory,
        )
        self.local_files.append(path)
        self.results["page"] = result
        return result

    @log_exceptions(include_traceback=False, custom_message="List blobs failed")
    async def list_container(self) -> List[str]:
        return await print_blob_list(self.provider, self.container)

    @log_exceptions(include_traceback=False, custom_message="Delete container failed")
    async def cleanup(self) -> None:
        logger.info("Delete container...")
        await self.provider.delete_container(self.container)

        logger.info("Delete files...")
        for path in self.local_files:
            if os.path.exists(path):
                os.remove(path)
        self.local_files = []

    async def run(self, cleanup: bool = True) -> Dict[str, object]:
        """Run every stage in order and return the workflow results keyed by blob type."""
        self.check_output_dir()
        await self.provision_container()

        # The classic storage emulator has no append blob support
        if self.emulator and not self.config.append_on_emulator:
            logger.warning("Skipping append blob operations on the storage emulator")
        else:
            await self.run_append_blob()

        await self.run_block_blob()
        await self.run_page_blob()
        await self.list_container()

        if not cleanup:
            logger.info(f"Keeping container '{self.container}' and files {self.local_files}")
            return self.results

        if self.confirm is not None and not self.confirm():
            logger.warning(f"Cleanup not confirmed; keeping container '{self.container}' and local files")
            return self.results

        await self.cleanup()
        logger.info("Done")
        return self.results
