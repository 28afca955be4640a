"""Logging configuration for kubectl_rancher."""

from kubectl_rancher.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
