"""
Server (provider) management over ``providers.json``.
"""

from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from yamcp_dashboard.core.exceptions import ConflictError, NotFoundError, StoreError
from yamcp_dashboard.core.models import Provider, ProviderType
from yamcp_dashboard.core.store import JSONFileStore
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


class ServerManager:
    """CRUD operations on the manager's provider definitions."""
    
    def __init__(self, store: JSONFileStore):
        self.store = store
    
    def _load(self) -> Dict[str, Provider]:
        data = self.store.load()
        providers = {}
        for name, record in data.items():
            try:
                providers[name] = Provider.from_store(name, record)
            except (PydanticValidationError, ValueError) as e:
                raise StoreError(
                    f"Invalid server record '{name}' in {self.store.path.name}: {e}",
                    error_code="INVALID_RECORD",
                    details={"server": name},
                )
        return providers
    
    def _save(self, providers: Dict[str, Provider]) -> None:
        self.store.save({name: provider.to_store() for name, provider in providers.items()})
    
    def list_servers(self, server_type: Optional[ProviderType] = None) -> List[Provider]:
        """
        List configured servers sorted by name.
        
        Args:
            server_type: Only return servers of this transport type
        """
        servers = sorted(self._load().values(), key=lambda p: p.name)
        if server_type:
            servers = [s for s in servers if s.type == server_type]
        return servers
    
    def get_server(self, name: str) -> Provider:
        """Get a server by name."""
        providers = self._load()
        if name not in providers:
            raise NotFoundError(f"Server '{name}' not found", error_code="SERVER_NOT_FOUND")
        return providers[name]
    
    def create_server(self, provider: Provider) -> Provider:
        """
        Add a new server.
        
        Raises:
            ConflictError: If a server with the same name exists
        """
        providers = self._load()
        if provider.name in providers:
            raise ConflictError(
                f"Server '{provider.name}' already exists",
                error_code="SERVER_EXISTS",
            )
        
        providers[provider.name] = provider
        self._save(providers)
        
        logger.info("Server created", extra={"server": provider.name, "type": provider.type.value})
        return provider
    
    def update_server(self, name: str, provider: Provider) -> Provider:
        """
        Replace a server definition.
        
        When ``provider.name`` differs from ``name`` the server is renamed;
        its position in the file is kept.
        
        Raises:
            NotFoundError: If ``name`` does not exist
            ConflictError: If renaming onto an existing server
        """
        providers = self._load()
        if name not in providers:
            raise NotFoundError(f"Server '{name}' not found", error_code="SERVER_NOT_FOUND")
        
        if provider.name != name and provider.name in providers:
            raise ConflictError(
                f"Cannot rename '{name}': server '{provider.name}' already exists",
                error_code="SERVER_EXISTS",
            )
        
        updated = {}
        for key, value in providers.items():
            if key == name:
                updated[provider.name] = provider
            else:
                updated[key] = value
        self._save(updated)
        
        logger.info("Server updated", extra={"server": name, "new_name": provider.name})
        return provider
    
    def delete_server(self, name: str) -> None:
        """
        Remove a server.
        
        Workspaces referencing it are not modified.
        
        Raises:
            NotFoundError: If the server does not exist
        """
        providers = self._load()
        if name not in providers:
            raise NotFoundError(f"Server '{name}' not found", error_code="SERVER_NOT_FOUND")
        
        del providers[name]
        self._save(providers)
        
        logger.info("Server deleted", extra={"server": name})
