from .storage_provider import BlobStorageProvider

__all__ = [
    'BlobStorageProvider',
]
