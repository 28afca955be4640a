"""Shared pytest fixtures for kubectl_rancher tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
import typer
from typer.testing import CliRunner

from kubectl_rancher.cli.main import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture
def kube_dir(tmp_path: Path) -> Path:
    """Stand-in for ~/.kube."""
    return tmp_path / ".kube"


@pytest.fixture(autouse=True)
def isolate_home(
    tmp_path: Path,
    kube_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Keep settings, kubeconfigs and log files out of the real home directory."""
    monkeypatch.setattr("kubectl_rancher.core.config.models.KUBE_DIR", kube_dir)
    monkeypatch.setattr(
        "kubectl_rancher.core.config.models.CONFIG_FILE", kube_dir / "rancher.json"
    )
    monkeypatch.setattr("kubectl_rancher.integrations.rancher.client.DEFAULT_KUBE_DIR", kube_dir)

    log_dir = tmp_path / "state"
    monkeypatch.setattr("kubectl_rancher.logging.config.LOG_DIR", log_dir)
    monkeypatch.setattr("kubectl_rancher.logging.config.LOG_FILE", log_dir / "kubectl-rancher.log")


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear RANCHER_ prefixed environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("RANCHER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None]:
    """Drop handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers
    structlog.reset_defaults()
