"""
Test the manager CLI bridge.
"""

import subprocess
from unittest.mock import Mock, patch

import pytest

from yamcp_dashboard.core.exceptions import ManagerCLIError
from yamcp_dashboard.core.manager_cli import ManagerCLI


class TestManagerCLI:
    """Test ManagerCLI."""
    
    @patch("yamcp_dashboard.core.manager_cli.shutil.which", return_value=None)
    def test_not_installed(self, mock_which):
        """Test a manager missing from PATH."""
        cli = ManagerCLI("yamcp")
        
        assert cli.discover() is None
        assert cli.is_available() is False
        assert cli.info() == {"available": False, "path": None, "version": None}
        
        with pytest.raises(ManagerCLIError) as exc_info:
            cli.version()
        assert exc_info.value.error_code == "CLI_NOT_FOUND"
    
    @patch("yamcp_dashboard.core.manager_cli.subprocess.run")
    @patch("yamcp_dashboard.core.manager_cli.shutil.which", return_value="/usr/local/bin/yamcp")
    def test_version(self, mock_which, mock_run):
        """Test the version is the first line of --version output."""
        mock_run.return_value = Mock(returncode=0, stdout="0.3.1\n", stderr="")
        cli = ManagerCLI("yamcp", timeout=5)
        
        assert cli.version() == "0.3.1"
        mock_run.assert_called_once_with(
            ["/usr/local/bin/yamcp", "--version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        assert cli.info() == {"available": True, "path": "/usr/local/bin/yamcp", "version": "0.3.1"}
    
    @patch("yamcp_dashboard.core.manager_cli.subprocess.run")
    @patch("yamcp_dashboard.core.manager_cli.shutil.which", return_value="/usr/local/bin/yamcp")
    def test_version_failure(self, mock_which, mock_run):
        """Test a non-zero exit status."""
        mock_run.return_value = Mock(returncode=1, stdout="", stderr="boom\n")
        cli = ManagerCLI()
        
        with pytest.raises(ManagerCLIError) as exc_info:
            cli.version()
        assert exc_info.value.error_code == "CLI_FAILED"
        assert exc_info.value.details == {"stderr": "boom"}
        
        info = cli.info()
        assert info["available"] is True
        assert info["version"] is None
    
    @patch("yamcp_dashboard.core.manager_cli.subprocess.run")
    @patch("yamcp_dashboard.core.manager_cli.shutil.which", return_value="/usr/local/bin/yamcp")
    def test_version_timeout(self, mock_which, mock_run):
        """Test a hanging manager."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="yamcp", timeout=1)
        
        with pytest.raises(ManagerCLIError) as exc_info:
            ManagerCLI(timeout=1).version()
        assert exc_info.value.error_code == "CLI_TIMEOUT"
    
    def test_explicit_path(self, tmp_path):
        """Test a configured executable path is used as given."""
        executable = tmp_path / "yamcp"
        executable.write_text("#!/bin/sh\necho 1.0.0\n")
        executable.chmod(0o755)
        
        assert ManagerCLI(str(executable)).discover() == str(executable)
    
    def test_explicit_path_not_executable(self, tmp_path):
        """Test a configured path that cannot be run."""
        missing = tmp_path / "yamcp"
        missing.write_text("")
        
        assert ManagerCLI(str(missing)).is_available() is False
