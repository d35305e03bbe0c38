from .storage_provider import InMemoryBlobStorageProvider

__all__ = [
    'InMemoryBlobStorageProvider',
]
