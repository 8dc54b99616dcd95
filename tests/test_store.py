"""
Test the JSON file store.
"""

import json

import pytest

from yamcp_dashboard.core.exceptions import StoreError
from yamcp_dashboard.core.store import JSONFileStore


class TestJSONFileStore:
    """Test JSONFileStore."""
    
    def test_missing_file_loads_empty(self, tmp_path):
        """Test a missing file reads as an empty object."""
        store = JSONFileStore(tmp_path / "providers.json")
        
        assert store.exists() is False
        assert store.load() == {}
    
    def test_malformed_json_raises(self, tmp_path):
        """Test malformed JSON is reported, not replaced."""
        path = tmp_path / "providers.json"
        path.write_text('{"fs": ', encoding="utf-8")
        store = JSONFileStore(path)
        
        with pytest.raises(StoreError) as exc_info:
            store.load()
        
        assert exc_info.value.error_code == "MALFORMED_JSON"
        assert "providers.json" in exc_info.value.message
        assert path.read_text(encoding="utf-8") == '{"fs": '
    
    def test_non_object_top_level_raises(self, tmp_path):
        """Test a JSON array at the top level is rejected."""
        path = tmp_path / "workspaces.json"
        path.write_text("[]", encoding="utf-8")
        
        with pytest.raises(StoreError) as exc_info:
            JSONFileStore(path).load()
        
        assert exc_info.value.error_code == "INVALID_SHAPE"
    
    def test_save_creates_directories(self, tmp_path):
        """Test saving into a directory that does not exist yet."""
        path = tmp_path / "nested" / "dir" / "workspaces.json"
        store = JSONFileStore(path, backup=False)
        
        store.save({"dev": ["fs"]})
        
        assert json.loads(path.read_text(encoding="utf-8")) == {"dev": ["fs"]}
        assert store.load() == {"dev": ["fs"]}
    
    def test_save_keeps_backup(self, tmp_path):
        """Test the previous content is copied aside before rewriting."""
        path = tmp_path / "workspaces.json"
        path.write_text('{"old": []}', encoding="utf-8")
        store = JSONFileStore(path, backup=True)
        
        store.save({"new": []})
        
        backups = list(tmp_path.glob("workspaces.json.backup.*"))
        assert len(backups) == 1
        assert json.loads(backups[0].read_text(encoding="utf-8")) == {"old": []}
        assert store.load() == {"new": []}
    
    def test_save_without_backup_leaves_no_extra_files(self, tmp_path):
        """Test no backup or temporary files remain."""
        path = tmp_path / "providers.json"
        path.write_text("{}", encoding="utf-8")
        
        JSONFileStore(path, backup=False).save({"fs": {}})
        
        assert [p.name for p in tmp_path.iterdir()] == ["providers.json"]
    
    def test_save_preserves_key_order(self, tmp_path):
        """Test records keep their insertion order on disk."""
        path = tmp_path / "providers.json"
        store = JSONFileStore(path, backup=False)
        
        store.save({"zeta": {}, "alpha": {}})
        
        assert list(json.loads(path.read_text(encoding="utf-8"))) == ["zeta", "alpha"]
