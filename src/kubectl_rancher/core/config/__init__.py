"""Configuration management with Pydantic validation."""

from kubectl_rancher.core.config.models import (
    RancherSettings,
    ensure_config_file,
)

__all__ = [
    "RancherSettings",
    "ensure_config_file",
]
