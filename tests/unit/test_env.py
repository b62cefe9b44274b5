"""Test environment variable management."""

import pytest

from txsaga.core.env import EnvManager, get_env, load_env


class TestEnvManager:
    """Test EnvManager functionality."""

    def test_get_with_default(self, monkeypatch):
        env = EnvManager(auto_load=False)
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)
        monkeypatch.setenv("TEST_VAR", "test_value")

        assert env.get("NONEXISTENT_VAR", "default") == "default"
        assert env.get("TEST_VAR") == "test_value"

    def test_get_required(self, monkeypatch):
        env = EnvManager(auto_load=False)
        monkeypatch.delenv("MISSING_REQUIRED", raising=False)

        with pytest.raises(ValueError, match="MISSING_REQUIRED"):
            env.get("MISSING_REQUIRED", required=True)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("true", True),
            ("True", True),
            ("1", True),
            ("yes", True),
            ("on", True),
            ("false", False),
            ("0", False),
            ("no", False),
            ("", False),
            ("maybe", False),
        ],
    )
    def test_get_bool(self, monkeypatch, value, expected):
        env = EnvManager(auto_load=False)
        monkeypatch.setenv("TEST_BOOL", value)

        assert env.get_bool("TEST_BOOL") is expected

    def test_get_bool_default(self, monkeypatch):
        env = EnvManager(auto_load=False)
        monkeypatch.delenv("TEST_BOOL", raising=False)

        assert env.get_bool("TEST_BOOL", True) is True

    def test_get_int(self, monkeypatch):
        env = EnvManager(auto_load=False)

        monkeypatch.setenv("TEST_INT", "42")
        assert env.get_int("TEST_INT") == 42

        monkeypatch.setenv("TEST_INT", "invalid")
        assert env.get_int("TEST_INT", default=10) == 10

    def test_substitute(self, monkeypatch):
        env = EnvManager(auto_load=False)
        monkeypatch.setenv("TX_HOST", "localhost")
        monkeypatch.delenv("TX_MISSING", raising=False)

        assert env.substitute("http://${TX_HOST}/tx") == "http://localhost/tx"
        assert env.substitute("${TX_MISSING:-fallback}") == "fallback"
        assert env.substitute("${TX_MISSING}") == "${TX_MISSING}"
        assert env.substitute("$TX_HOST:80") == "localhost:80"

    def test_substitute_required(self, monkeypatch):
        env = EnvManager(auto_load=False)
        monkeypatch.delenv("TX_MISSING", raising=False)

        with pytest.raises(ValueError, match="level required"):
            env.substitute("${TX_MISSING:?level required}")

    def test_substitute_dict(self, monkeypatch):
        env = EnvManager(auto_load=False)
        monkeypatch.setenv("TX_LEVEL", "INFO")

        data = {"logging": {"level": "${TX_LEVEL}", "enabled": True}, "tags": ["$TX_LEVEL", 1]}

        assert env.substitute_dict(data) == {
            "logging": {"level": "INFO", "enabled": True},
            "tags": ["INFO", 1],
        }

    def test_load_dotenv_file(self, tmp_path, monkeypatch):
        # Registered with monkeypatch so the loaded value is undone afterwards
        monkeypatch.setenv("TX_FROM_DOTENV", "placeholder")
        monkeypatch.delenv("TX_FROM_DOTENV")
        (tmp_path / ".env").write_text("TX_FROM_DOTENV=loaded\n")

        env = EnvManager(project_root=tmp_path)

        assert env.loaded is True
        assert env.get("TX_FROM_DOTENV") == "loaded"

    def test_load_missing_file(self, tmp_path):
        env = EnvManager(project_root=tmp_path, auto_load=False)

        assert env.load() is False
        assert env.loaded is False

    def test_global_helpers(self, tmp_path):
        assert get_env() is get_env()
        assert load_env(tmp_path) is False
