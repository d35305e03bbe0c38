from typing import Dict, Type
from loguru import logger

from .base import BlobStorageProvider
from .azure_providers import AzureBlobStorageProvider
from .custom_providers import InMemoryBlobStorageProvider
from ..config.settings import StorageConfig
from ..exceptions import ConfigError


class ProviderFactory:
    """Factory class for creating provider instances."""

    _storage_providers: Dict[str, Type[BlobStorageProvider]] = {
        'azure': AzureBlobStorageProvider,
        'memory': InMemoryBlobStorageProvider,
    }

    @classmethod
    def create_storage_provider(cls, provider_name: str = None, config: StorageConfig = None) -> BlobStorageProvider:
        """
        Create a blob storage provider instance.

        Args:
            provider_name: Name of the provider (optional, defaults to config)
            config: Storage configuration (optional, read from the environment when omitted)

        Returns:
            BlobStorageProvider instance

        Raises:
            ConfigError: If provider is not supported
        """
        config = config or StorageConfig()
        if provider_name is None:
            provider_name = config.provider

        if provider_name not in cls._storage_providers:
            raise ConfigError(
                f"Unknown storage provider: {provider_name}. "
                f"Supported providers: {list(cls._storage_providers.keys())}"
            )

        provider_class = cls._storage_providers[provider_name]
        logger.info(f"Creating storage provider: {provider_name}")
        return provider_class(config.model_dump())

    @classmethod
    def register_storage_provider(cls, name: str, provider_class: Type[BlobStorageProvider]):
        """Register a new storage provider."""
        cls._storage_providers[name] = provider_class
        logger.info(f"Registered storage provider: {name}")
