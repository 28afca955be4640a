"""Persisted CLI settings (~/.kube/rancher.json)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, SecretStr, ValidationError

from kubectl_rancher.integrations.rancher.exceptions import RancherConfigError
from kubectl_rancher.integrations.rancher.models import ConnectionParameters, TrustPolicy

logger = structlog.get_logger()

KUBE_DIR = Path.home() / ".kube"
CONFIG_FILE = KUBE_DIR / "rancher.json"


class RancherSettings(BaseModel):
    """Connection settings remembered between invocations."""

    url: str = Field(default="", description="Rancher server URL")
    token: SecretStr = Field(default=SecretStr(""), description="Rancher API token")
    insecure: bool = Field(default=False, description="Skip TLS verification")
    ca: str | None = Field(default=None, description="Path to a PEM CA bundle")

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the settings file path."""
        return CONFIG_FILE

    @classmethod
    def load(cls) -> RancherSettings:
        """Load settings from the config file.

        A missing or empty file yields default settings.

        Raises:
            RancherConfigError: If the file is not valid settings JSON.
        """
        config_path = cls.get_config_path()
        if not config_path.exists():
            return cls()

        text = config_path.read_text()
        if not text.strip():
            return cls()

        try:
            data = json.loads(text)
            return cls.model_validate(data)
        except (ValueError, ValidationError) as e:
            raise RancherConfigError(
                "Invalid config file format",
                details=f"{config_path}: {e}",
            ) from e

    def save(self) -> None:
        """Save settings to the config file with owner-only permissions."""
        config_path = self.get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, Any] = {
            "url": self.url,
            "token": self.token.get_secret_value(),
            "insecure": self.insecure,
        }
        if self.ca:
            data["ca"] = self.ca

        config_path.write_text(json.dumps(data, indent=2) + "\n")
        config_path.chmod(0o600)
        logger.debug("Saved settings", path=str(config_path))

    def connection_parameters(
        self,
        url: str | None = None,
        token: str | None = None,
        ca: str | None = None,
        insecure: bool | None = None,
    ) -> ConnectionParameters:
        """Merge command-line values over the stored settings.

        Args:
            url: Server URL override.
            token: Token override.
            ca: CA bundle path override.
            insecure: Skip TLS verification. None keeps the stored value.

        Returns:
            Connection parameters for a RancherClient.

        Raises:
            RancherConfigError: If no server URL is known.
        """
        base_url = url or self.url
        if not base_url:
            raise RancherConfigError(
                "Rancher server url is not set",
                details="Pass --url, set RANCHER_URL or run 'kubectl-rancher login --url ...'",
            )
        return ConnectionParameters(
            base_url=base_url,
            token=SecretStr(token) if token else self.token,
            trust_policy=TrustPolicy(
                skip_verify=self.insecure if insecure is None else insecure,
                ca_path=ca or self.ca,
            ),
        )


def ensure_config_file() -> Path:
    """Create ~/.kube and an empty settings file if they do not exist.

    Returns:
        Path of the settings file.
    """
    config_path = RancherSettings.get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    if not config_path.exists():
        config_path.touch(mode=0o600)
        logger.debug("Created settings file", path=str(config_path))
    return config_path
