"""
Test CLI functionality of yamcp-dashboard.

Commands run against the isolated store and logs directories through
``--store-dir`` and ``--logs-dir``.
"""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
from click.testing import CliRunner

from yamcp_dashboard.cli.main import cli


class TestCLI:
    """Test CLI commands."""
    
    @pytest.fixture(autouse=True)
    def setup_runner(self, environment):
        """Set up test fixtures."""
        self.runner = CliRunner()
        self.environment = environment
        self.base_args = [
            "--store-dir", str(environment.store_dir),
            "--logs-dir", str(environment.logs_dir),
        ]
    
    def invoke(self, *args):
        return self.runner.invoke(cli, self.base_args + list(args))
    
    def test_version(self):
        """Test version option."""
        result = self.runner.invoke(cli, ["--version"])
        
        assert result.exit_code == 0
        assert "yamcp-dashboard" in result.output
    
    def test_help_lists_commands(self):
        """Test all commands are registered."""
        result = self.runner.invoke(cli, ["--help"])
        
        assert result.exit_code == 0
        for command in ("serve", "status", "servers", "workspaces", "paths", "logs", "log-files"):
            assert command in result.output
    
    def test_invalid_config_file(self, tmp_path):
        """Test an invalid configuration file is reported as a usage error."""
        bad = tmp_path / "bad.toml"
        bad.write_text("[server]\nport = 0\n")
        
        result = self.runner.invoke(cli, ["-c", str(bad), "servers"])
        
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
    
    def test_servers_json(self):
        """Test listing servers as JSON."""
        result = self.invoke("servers", "-o", "json")
        
        assert result.exit_code == 0
        servers = json.loads(result.output)
        assert [s["name"] for s in servers] == ["filesystem", "github", "weather"]
    
    def test_servers_type_filter(self):
        """Test the --type filter."""
        result = self.invoke("servers", "--type", "SSE", "-o", "json")
        
        assert result.exit_code == 0
        assert [s["name"] for s in json.loads(result.output)] == ["weather"]
    
    def test_servers_table(self):
        """Test the server table."""
        result = self.invoke("servers")
        
        assert result.exit_code == 0
        assert "github" in result.output
        assert "weather" in result.output
    
    def test_servers_empty(self, tmp_path):
        """Test listing with no providers.json."""
        result = self.runner.invoke(cli, ["--store-dir", str(tmp_path), "servers"])
        
        assert result.exit_code == 0
        assert "No servers configured" in result.output
    
    def test_servers_malformed_store(self):
        """Test store errors exit with status 1."""
        self.environment.providers_path.write_text("[]", encoding="utf-8")
        
        result = self.invoke("servers")
        assert result.exit_code == 1
    
    def test_workspaces(self):
        """Test workspace listing with a missing server."""
        result = self.invoke("workspaces")
        
        assert result.exit_code == 0
        assert "research" in result.output
        assert "not configured" in result.output
    
    def test_workspaces_json(self):
        """Test listing workspaces as JSON."""
        result = self.invoke("workspaces", "-o", "json")
        
        assert json.loads(result.output) == [
            {"name": "dev", "servers": ["filesystem", "github"]},
            {"name": "research", "servers": ["weather", "search"]},
        ]
    
    def test_logs_json(self):
        """Test log filtering from the command line."""
        result = self.invoke("logs", "--level", "warn", "-o", "json")
        
        assert result.exit_code == 0
        entries = json.loads(result.output)
        assert [e["server"] for e in entries] == ["research", "dev"]
    
    def test_logs_grouped_json(self):
        """Test grouped log output."""
        result = self.invoke("logs", "--grouped", "--limit", "3", "-o", "json")
        
        groups = json.loads(result.output)
        assert list(groups) == ["research", "dev"]
        assert len(groups["dev"]) == 1
        assert len(groups["research"]) == 2
    
    def test_logs_table(self):
        """Test the log table."""
        result = self.invoke("logs", "--workspace", "dev")
        
        assert result.exit_code == 0
        assert "Warning" in result.output
    
    def test_logs_empty(self):
        """Test filters matching nothing."""
        result = self.invoke("logs", "--workspace", "nope")
        
        assert result.exit_code == 0
        assert "No log entries found" in result.output
    
    def test_log_files(self):
        """Test log file listing."""
        result = self.invoke("log-files")
        
        assert result.exit_code == 0
        assert "Log files (2 total)" in result.output
    
    def test_paths(self):
        """Test path report without the manager installed."""
        with patch("yamcp_dashboard.core.manager_cli.shutil.which", return_value=None):
            result = self.invoke("paths")
        
        assert result.exit_code == 0
        assert "Providers" in result.output
        assert "not found" in result.output
    
    @patch("yamcp_dashboard.cli.commands.server.httpx.Client")
    def test_status(self, mock_client_class):
        """Test status against a running dashboard."""
        mock_client = MagicMock()
        mock_client_class.return_value.__enter__.return_value = mock_client
        mock_client.get.return_value = MagicMock(
            status_code=200,
            json=MagicMock(return_value={
                "status": "healthy",
                "version": "1.0.0",
                "uptime_seconds": 12.0,
                "providers_file": True,
                "workspaces_file": True,
                "logs_dir": True,
            })
        )
        
        result = self.invoke("status", "--port", "8123")
        
        assert result.exit_code == 0
        assert "healthy" in result.output
        mock_client.get.assert_called_once_with("http://127.0.0.1:8123/health")
    
    @patch("yamcp_dashboard.cli.commands.server.httpx.Client")
    def test_status_unreachable(self, mock_client_class):
        """Test status when nothing is listening."""
        mock_client = MagicMock()
        mock_client_class.return_value.__enter__.return_value = mock_client
        mock_client.get.side_effect = httpx.ConnectError("refused")
        
        result = self.invoke("status")
        
        assert result.exit_code == 1
        assert "not reachable" in result.output
    
    @patch("yamcp_dashboard.api.server.DashboardServer.run")
    def test_serve(self, mock_run):
        """Test serve hands the configured host and port to uvicorn."""
        result = self.invoke("serve", "--port", "9001")
        
        assert result.exit_code == 0
        mock_run.assert_called_once_with(host="127.0.0.1", port=9001, log_level="info")
