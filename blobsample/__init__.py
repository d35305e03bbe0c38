"""Azure Blob Storage sample: append, block and page blob workflows."""

__version__ = "1.0.0"
