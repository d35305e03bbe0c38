from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError
from typing import Optional
from dotenv import load_dotenv, find_dotenv
import base64
import os

from ..exceptions import ConfigError


DEFAULT_BLOCK_ID = base64.b64encode(b"00000").decode("ascii")


class StorageConfig(BaseSettings):
    """Storage account and client configuration."""

    provider: str = Field(default="azure")
    account_name: Optional[str] = Field(default=None)
    account_key: Optional[str] = Field(default=None)
    connection_string: Optional[str] = Field(default=None)
    account_url: Optional[str] = Field(default=None)
    use_managed_identity: bool = Field(default=False)
    use_emulator: bool = Field(default=False)
    emulator_blob_endpoint: str = Field(default="http://127.0.0.1:10000/devstoreaccount1")
    request_timeout: int = Field(default=30, ge=1)
    connection_timeout: int = Field(default=20, ge=1)
    read_timeout: int = Field(default=60, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        # Force load environment variables before validation
        load_dotenv(find_dotenv())

        # The sample has always read ACCOUNT_NAME / ACCOUNT_KEY without a prefix
        if not kwargs:
            kwargs = {
                'account_name': os.getenv("ACCOUNT_NAME"),
                'account_key': os.getenv("ACCOUNT_KEY"),
            }
            # Remove None values so STORAGE_* variables still apply
            kwargs = {k: v for k, v in kwargs.items() if v is not None}

        super().__init__(**kwargs)


class SampleConfig(BaseSettings):
    """Names, sizes and payload settings for the blob workflows."""

    container_name: str = Field(default="demoblobcontainer")
    append_blob_name: str = Field(default="demoAppendBlob")
    block_blob_name: str = Field(default="demoBlockBlob")
    page_blob_name: str = Field(default="demoPageBlob")
    append_blob_file: str = Field(default="appendBlob.txt")
    block_blob_file: str = Field(default="blockBlob.txt")
    page_blob_file: str = Field(default="pageBlob.txt")
    output_dir: str = Field(default=".")
    content_type: str = Field(default="text/plain")
    append_payload_size: int = Field(default=42, ge=1)
    block_payload_size: int = Field(default=1984, ge=1)
    block_id: str = Field(default=DEFAULT_BLOCK_ID, min_length=1)
    page_blob_size: int = Field(default=512 * 5, ge=0)
    page_write_size: int = Field(default=512 * 3, ge=0)
    append_on_emulator: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="SAMPLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)

    def output_path(self, file_name: str) -> str:
        return os.path.join(self.output_dir, file_name)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    enable_json: bool = Field(default=False)
    enable_file_logging: bool = Field(default=False)
    max_file_size: str = Field(default="10 MB")
    retention_days: int = Field(default=7)

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )


class BlobSampleConfig:
    """Main configuration object, built once and handed to the sample driver."""

    def __init__(
        self,
        storage: Optional[StorageConfig] = None,
        sample: Optional[SampleConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ):
        # Force load environment variables before any section is read
        load_dotenv(find_dotenv())

        self._storage = storage
        self._sample = sample
        self._logging = logging

    @staticmethod
    def _load(section_cls):
        try:
            return section_cls()
        except ValidationError as e:
            raise ConfigError(
                f"Invalid {section_cls.__name__} settings: {e}",
                error_code="InvalidSettings",
                details={"errors": e.errors(include_url=False)},
            ) from e

    @property
    def storage(self) -> StorageConfig:
        if self._storage is None:
            self._storage = self._load(StorageConfig)
        return self._storage

    @property
    def sample(self) -> SampleConfig:
        if self._sample is None:
            self._sample = self._load(SampleConfig)
        return self._sample

    @property
    def logging(self) -> LoggingConfig:
        if self._logging is None:
            self._logging = self._load(LoggingConfig)
        return self._logging
