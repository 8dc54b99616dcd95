"""
Test the server and workspace managers.
"""

import pytest

from yamcp_dashboard.core.exceptions import ConflictError, NotFoundError, StoreError
from yamcp_dashboard.core.managers import ServerManager, WorkspaceManager
from yamcp_dashboard.core.models import Provider, ProviderType, Workspace
from yamcp_dashboard.core.store import JSONFileStore


@pytest.fixture
def servers(environment):
    return ServerManager(JSONFileStore(environment.providers_path, backup=False))


@pytest.fixture
def workspaces(environment):
    return WorkspaceManager(JSONFileStore(environment.workspaces_path, backup=False))


class TestServerManager:
    """Test ServerManager."""
    
    def test_list_servers_sorted(self, servers):
        """Test servers are listed by name."""
        names = [s.name for s in servers.list_servers()]
        assert names == ["filesystem", "github", "weather"]
    
    def test_list_servers_by_type(self, servers):
        """Test the type filter."""
        sse = servers.list_servers(ProviderType.SSE)
        assert [s.name for s in sse] == ["weather"]
    
    def test_list_servers_missing_file(self, empty_environment):
        """Test an absent providers.json means no servers."""
        manager = ServerManager(JSONFileStore(empty_environment.providers_path))
        assert manager.list_servers() == []
    
    def test_get_server(self, servers):
        """Test fetching one server."""
        server = servers.get_server("github")
        assert server.namespace == "github"
        assert server.env == {"GITHUB_TOKEN": "test-token"}
    
    def test_get_missing_server(self, servers):
        """Test fetching an unknown server."""
        with pytest.raises(NotFoundError):
            servers.get_server("nope")
    
    def test_create_server(self, servers, environment):
        """Test a new server is written in the manager's format."""
        servers.create_server(Provider(name="sqlite", command="uvx", args=["mcp-server-sqlite"]))
        
        stored = environment.read_json(environment.providers_path)
        assert stored["sqlite"] == {
            "namespace": "sqlite",
            "type": "stdio",
            "providerParameters": {"command": "uvx", "args": ["mcp-server-sqlite"]},
        }
        assert len(stored) == 4
    
    def test_create_duplicate_server(self, servers):
        """Test creating a server that exists."""
        with pytest.raises(ConflictError):
            servers.create_server(Provider(name="github", command="npx"))
    
    def test_update_server(self, servers):
        """Test replacing a server definition."""
        servers.update_server("weather", Provider(name="weather", type="sse", url="https://weather.example/sse"))
        assert servers.get_server("weather").url == "https://weather.example/sse"
    
    def test_rename_server_keeps_position(self, servers, environment):
        """Test renaming keeps the record's place in the file."""
        servers.update_server("github", Provider(name="gh", command="npx"))
        
        stored = environment.read_json(environment.providers_path)
        assert list(stored) == ["filesystem", "gh", "weather"]
    
    def test_rename_onto_existing_server(self, servers):
        """Test renaming onto another server's name."""
        with pytest.raises(ConflictError):
            servers.update_server("github", Provider(name="weather", command="npx"))
    
    def test_update_missing_server(self, servers):
        """Test updating an unknown server."""
        with pytest.raises(NotFoundError):
            servers.update_server("nope", Provider(name="nope", command="npx"))
    
    def test_delete_server_leaves_workspaces(self, servers, environment):
        """Test deleting a server does not touch workspaces.json."""
        servers.delete_server("github")
        
        assert "github" not in environment.read_json(environment.providers_path)
        assert environment.read_json(environment.workspaces_path)["dev"] == ["filesystem", "github"]
    
    def test_delete_missing_server(self, servers):
        """Test deleting an unknown server."""
        with pytest.raises(NotFoundError):
            servers.delete_server("nope")
    
    def test_manager_written_record_loads(self, servers, environment):
        """Test stored names and urls are taken as written."""
        providers = environment.read_json(environment.providers_path)
        providers["@scope/server"] = {"type": "sse", "providerParameters": {"url": "ws://localhost/events"}}
        environment.write_json(environment.providers_path, providers)
        
        assert servers.get_server("@scope/server").url == "ws://localhost/events"
        
        servers.create_server(Provider(name="sqlite", command="uvx"))
        stored = environment.read_json(environment.providers_path)
        assert stored["@scope/server"]["providerParameters"] == {"url": "ws://localhost/events"}
    
    def test_invalid_record_reported(self, environment):
        """Test a malformed record names the offending server."""
        environment.write_json(environment.providers_path, {"broken": {"type": "stdio"}})
        manager = ServerManager(JSONFileStore(environment.providers_path))
        
        with pytest.raises(StoreError) as exc_info:
            manager.list_servers()
        
        assert exc_info.value.details == {"server": "broken"}


class TestWorkspaceManager:
    """Test WorkspaceManager."""
    
    def test_list_workspaces(self, workspaces):
        """Test workspaces are listed by name."""
        items = workspaces.list_workspaces()
        assert [w.name for w in items] == ["dev", "research"]
        assert items[0].servers == ["filesystem", "github"]
    
    def test_create_workspace(self, workspaces, environment):
        """Test a new workspace is written as a list of names."""
        workspaces.create_workspace(Workspace(name="ops", servers=["github", "github"]))
        
        assert environment.read_json(environment.workspaces_path)["ops"] == ["github"]
    
    def test_create_duplicate_workspace(self, workspaces):
        """Test creating a workspace that exists."""
        with pytest.raises(ConflictError):
            workspaces.create_workspace(Workspace(name="dev"))
    
    def test_update_and_rename_workspace(self, workspaces, environment):
        """Test renaming a workspace and changing its members."""
        workspaces.update_workspace("dev", Workspace(name="development", servers=["filesystem"]))
        
        stored = environment.read_json(environment.workspaces_path)
        assert list(stored) == ["development", "research"]
        assert stored["development"] == ["filesystem"]
    
    def test_rename_onto_existing_workspace(self, workspaces):
        """Test renaming onto another workspace's name."""
        with pytest.raises(ConflictError):
            workspaces.update_workspace("dev", Workspace(name="research"))
    
    def test_delete_workspace(self, workspaces):
        """Test deleting a workspace."""
        workspaces.delete_workspace("research")
        assert [w.name for w in workspaces.list_workspaces()] == ["dev"]
        
        with pytest.raises(NotFoundError):
            workspaces.get_workspace("research")
    
    def test_find_missing_servers(self, workspaces):
        """Test unknown member names are reported per workspace."""
        missing = workspaces.find_missing_servers(["filesystem", "github", "weather"])
        assert missing == {"research": ["search"]}
    
    def test_invalid_record_reported(self, environment):
        """Test a malformed workspace record is reported."""
        environment.write_json(environment.workspaces_path, {"dev": "filesystem"})
        manager = WorkspaceManager(JSONFileStore(environment.workspaces_path))
        
        with pytest.raises(StoreError):
            manager.list_workspaces()
