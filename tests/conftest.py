"""
Pytest configuration and fixtures for yamcp-dashboard testing.

Every test gets an isolated environment: a manager store directory with
sample providers and workspaces, a logs directory with one log file per
workspace, and a dashboard config directory.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from yamcp_dashboard.api.server import create_app
from yamcp_dashboard.utils.config import Config


SAMPLE_PROVIDERS: Dict[str, Any] = {
    "filesystem": {
        "namespace": "fs",
        "type": "stdio",
        "providerParameters": {
            "command": "npx",
            "args": ["-y", "@modelcontextprotocol/server-filesystem", "/tmp"],
        },
    },
    "github": {
        "namespace": "github",
        "type": "stdio",
        "providerParameters": {
            "command": "npx",
            "args": ["-y", "@modelcontextprotocol/server-github"],
            "env": {"GITHUB_TOKEN": "test-token"},
        },
    },
    "weather": {
        "namespace": "weather",
        "type": "sse",
        "providerParameters": {"url": "http://localhost:9000/sse"},
    },
}

# "search" is referenced but not configured.
SAMPLE_WORKSPACES: Dict[str, Any] = {
    "dev": ["filesystem", "github"],
    "research": ["weather", "search"],
}

DEV_LOG = """\
[2024-05-01T10:00:00.000Z] [INFO] Workspace dev started
[2024-05-01T10:00:05.000Z] [WARN] filesystem slow to respond
[2024-05-01T10:00:06.000Z] [ERROR] github failed to start
    at spawn (node:internal/child_process:413:11)
[2024-05-01T10:00:07.000Z] [DEBUG] retrying github
"""

RESEARCH_LOG = """\
{"timestamp": "2024-05-01T11:00:00Z", "level": "info", "message": "Workspace research started"}
{"timestamp": "2024-05-01T11:00:01Z", "level": "warning", "message": "search not configured"}

plain line without header
"""


class DashboardEnvironment:
    """Isolated directories and environment variables for one test."""

    def __init__(self, root: Path):
        self.root = root
        self.config_dir = root / "config"
        self.store_dir = root / "store"
        self.logs_dir = root / "logs"

        for directory in (self.config_dir, self.store_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self.original_env = dict(os.environ)
        os.environ["YAMCP_DASHBOARD_CONFIG_DIR"] = str(self.config_dir)
        os.environ["YAMCP_DASHBOARD_LOGGING__ENABLED"] = "false"

    @property
    def providers_path(self) -> Path:
        return self.store_dir / "providers.json"

    @property
    def workspaces_path(self) -> Path:
        return self.store_dir / "workspaces.json"

    def write_json(self, path: Path, data: Any) -> None:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def read_json(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    def write_log(self, workspace: str, filename: str, content: str) -> Path:
        directory = self.logs_dir / workspace
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(content, encoding="utf-8")
        return path

    def populate(self) -> None:
        """Write the sample store and logs."""
        self.write_json(self.providers_path, SAMPLE_PROVIDERS)
        self.write_json(self.workspaces_path, SAMPLE_WORKSPACES)
        dev = self.write_log("dev", "session-1.log", DEV_LOG)
        research = self.write_log("research", "session-1.log", RESEARCH_LOG)
        os.utime(dev, (1714557600, 1714557600))
        os.utime(research, (1714561200, 1714561200))

    def config(self, **manager_overrides: Any) -> Config:
        manager = {
            "store_dir": str(self.store_dir),
            "logs_dir": str(self.logs_dir),
            "cli_path": "yamcp-not-installed-for-tests",
            "backup_on_write": False,
        }
        manager.update(manager_overrides)
        return Config(
            config_dir=str(self.config_dir),
            manager=manager,
            logging={"enabled": False, "file": None},
        )

    def cleanup(self) -> None:
        """Restore the original environment."""
        os.environ.clear()
        os.environ.update(self.original_env)


@pytest.fixture
def empty_environment(tmp_path):
    """Isolated environment with empty store and logs directories."""
    env = DashboardEnvironment(tmp_path)
    try:
        yield env
    finally:
        env.cleanup()


@pytest.fixture
def environment(empty_environment):
    """Isolated environment populated with the sample store and logs."""
    empty_environment.populate()
    return empty_environment


@pytest.fixture
def config(environment):
    """Configuration pointing at the sample environment."""
    return environment.config()


@pytest.fixture
def client(config):
    """API test client over the sample environment."""
    with TestClient(create_app(config)) as test_client:
        yield test_client


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
