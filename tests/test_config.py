"""Tests for scriptgraph.config — Settings management."""
import pytest
from pathlib import Path
from scriptgraph.config import Settings


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.log_level == "WARNING"
        assert s.recent_events == 5
        assert s.workspace_root == Path("./workspace")

    def test_rules_path(self, tmp_path):
        s = Settings(_env_file=None, workspace_root=tmp_path)
        assert s.rules_path == tmp_path / "continuity_rules.yaml"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SCRIPTGRAPH_RECENT_EVENTS", "12")
        monkeypatch.setenv("SCRIPTGRAPH_LOG_LEVEL", "debug")
        s = Settings(_env_file=None)
        assert s.recent_events == 12
        assert s.log_level == "debug"

    def test_validate_log_level_ok(self):
        s = Settings(_env_file=None, log_level="info")
        s.validate_log_level()  # should not raise

    def test_validate_log_level_unknown(self):
        s = Settings(_env_file=None, log_level="chatty")
        with pytest.raises(ValueError, match="Unknown log level"):
            s.validate_log_level()
