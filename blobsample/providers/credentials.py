"""
Credential resolution for the blob storage provider.

Four sources are supported, checked in this order: the local storage emulator,
a connection string, a shared account name/key pair, and Azure AD through a
managed identity or the Azure CLI login.
"""

from azure.identity.aio import (
    DefaultAzureCredential as AsyncDefaultAzureCredential,
    AzureCliCredential as AsyncAzureCliCredential,
    ChainedTokenCredential as AsyncChainedTokenCredential
)
from typing import Any, Dict

from ..exceptions import ConfigError


class StorageCredentials:
    """Turns a StorageConfig into BlobServiceClient constructor arguments."""

    # Well-known development account shared by the legacy emulator and Azurite
    EMULATOR_ACCOUNT_NAME = "devstoreaccount1"
    EMULATOR_ACCOUNT_KEY = (
        "Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw=="
    )

    @staticmethod
    def get_async_credentials():
        """
        Get Azure AD credentials for the async blob client.
        Tries the Azure CLI login first, then falls back to DefaultAzureCredential.
        """
        return AsyncChainedTokenCredential(
            AsyncAzureCliCredential(),
            AsyncDefaultAzureCredential()
        )

    @staticmethod
    def account_url_for(account_name: str) -> str:
        return f"https://{account_name}.blob.core.windows.net"

    @classmethod
    def source(cls, config) -> str:
        """
        Name the credential source ``config`` selects, without building any client objects.

        Raises:
            ConfigError: If no usable credential source is configured
        """
        if config.use_emulator:
            return "emulator"
        if config.connection_string:
            return "connection_string"
        if config.account_name and config.account_key:
            return "shared_key"
        if config.use_managed_identity:
            if not (config.account_url or config.account_name):
                raise ConfigError(
                    "Managed identity needs STORAGE_ACCOUNT_URL or ACCOUNT_NAME",
                    error_code="MissingAccountUrl",
                )
            return "managed_identity"

        missing = [
            name for name, value in (("ACCOUNT_NAME", config.account_name), ("ACCOUNT_KEY", config.account_key))
            if not value
        ]
        raise ConfigError(
            f"Missing environment variable {', '.join(missing)}",
            error_code="MissingCredentials",
            details={"missing": missing},
        )

    @classmethod
    def resolve(cls, config) -> Dict[str, Any]:
        """
        Resolve client arguments from configuration.

        Returns:
            Either ``{"connection_string": ...}`` or ``{"account_url": ..., "credential": ...}``

        Raises:
            ConfigError: If no usable credential source is configured
        """
        source = cls.source(config)

        if source == "emulator":
            return {
                "account_url": config.emulator_blob_endpoint,
                "credential": {
                    "account_name": cls.EMULATOR_ACCOUNT_NAME,
                    "account_key": cls.EMULATOR_ACCOUNT_KEY,
                },
            }

        if source == "connection_string":
            return {"connection_string": config.connection_string}

        account_url = config.account_url or cls.account_url_for(config.account_name)
        if source == "shared_key":
            return {
                "account_url": account_url,
                "credential": {
                    "account_name": config.account_name,
                    "account_key": config.account_key,
                },
            }

        return {"account_url": account_url, "credential": cls.get_async_credentials()}
