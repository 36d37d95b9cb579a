"""
Azure Key Vault client — list secret versions and set new values.

Wraps azure-keyvault-secrets' SecretClient with DefaultAzureCredential.
SDK failures surface as RemoteError; retry policy is the SDK pipeline's.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from azure.core.exceptions import AzureError

from kvault.errors import RemoteError
from kvault.models import SecretVersion

logger = logging.getLogger(__name__)


def sort_versions(versions: Iterable[SecretVersion]) -> list[SecretVersion]:
    """Newest created_at first; versions without a timestamp go last, in input order."""
    versions = list(versions)
    dated = [v for v in versions if v.created_at is not None]
    undated = [v for v in versions if v.created_at is None]
    dated.sort(key=lambda v: v.created_at, reverse=True)  # type: ignore[arg-type,return-value]
    return dated + undated


class KeyVaultClient:
    """Thin client for one vault."""

    def __init__(
        self,
        vault_url: str,
        *,
        credential: Any = None,
        secret_client: Any = None,
    ) -> None:
        self.vault_url = vault_url
        if secret_client is None:
            secret_client = self._build_client(vault_url, credential)
        self._client = secret_client

    @staticmethod
    def _build_client(vault_url: str, credential: Any) -> Any:
        from azure.identity import DefaultAzureCredential
        from azure.keyvault.secrets import SecretClient

        try:
            if credential is None:
                credential = DefaultAzureCredential()
            return SecretClient(vault_url=vault_url, credential=credential)
        except (AzureError, ValueError) as e:
            raise RemoteError(f"failed to create Key Vault client: {e}") from e

    def list_versions(self, secret_name: str) -> list[SecretVersion]:
        """All versions of a secret with their values, newest first.

        A version whose value cannot be fetched is still listed, with the
        fetch error as its value.
        """
        versions: list[SecretVersion] = []
        try:
            for props in self._client.list_properties_of_secret_versions(secret_name):
                version_id = getattr(props, "version", None)
                if not version_id:
                    continue
                try:
                    value = self._client.get_secret(secret_name, version_id).value or ""
                except AzureError as e:
                    logger.warning(
                        "Cannot fetch value for %s version %s: %s",
                        secret_name, version_id[:8], e,
                    )
                    value = f"Error fetching value: {e}"
                versions.append(
                    SecretVersion(
                        id=version_id,
                        value=value,
                        enabled=bool(props.enabled),
                        created_at=props.created_on,
                        updated_at=props.updated_on,
                        expires_at=props.expires_on,
                        tags={k: v for k, v in (props.tags or {}).items() if v is not None},
                    )
                )
        except AzureError as e:
            raise RemoteError(f"failed to list secret versions: {e}") from e

        logger.info("Listed %d version(s) of %s", len(versions), secret_name)
        return sort_versions(versions)

    def set_value(self, secret_name: str, value: str) -> None:
        """Store ``value`` as a new version of the secret."""
        try:
            self._client.set_secret(secret_name, value)
        except AzureError as e:
            raise RemoteError(f"failed to update secret: {e}") from e
        logger.info("Set new version of %s", secret_name)
