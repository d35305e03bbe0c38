from .settings import BlobSampleConfig, StorageConfig, SampleConfig, LoggingConfig

__all__ = [
    'BlobSampleConfig',
    'StorageConfig',
    'SampleConfig',
    'LoggingConfig',
]
