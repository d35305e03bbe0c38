"""Storage provider system for the blob sample."""

from .base import BlobStorageProvider
from .factory import ProviderFactory
from .azure_providers import AzureBlobStorageProvider
from .custom_providers import InMemoryBlobStorageProvider
from .credentials import StorageCredentials

__all__ = [
    # Base classes
    'BlobStorageProvider',
    # Factory
    'ProviderFactory',
    # Implementations
    'AzureBlobStorageProvider',
    'InMemoryBlobStorageProvider',
    'StorageCredentials',
]
