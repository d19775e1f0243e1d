"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from mcp_tfs.config import load_config
from mcp_tfs.errors import ConfigurationError


@pytest.fixture
def write_config(tmp_path):
    def _write(data, pat="  my-token \n", pat_name="pat.txt"):
        if pat is not None:
            (tmp_path / pat_name).write_text(pat, encoding="utf-8")
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
        return {"TFS_MCP_CONFIG": str(path)}
    return _write


BASE = {
    "baseUrl": "https://tfs.example.com/tfs/",
    "collection": "DefaultCollection",
    "project": "Alpha",
    "patFile": "pat.txt",
}


class TestLoadConfig:
    def test_defaults(self, write_config):
        config = load_config(write_config(BASE))
        assert config.base_url == "https://tfs.example.com/tfs"
        assert config.collection == "DefaultCollection"
        assert config.project == "Alpha"
        assert config.api_version == "2.0"
        assert config.pat == "my-token"
        assert config.tls_reject_unauthorized is True

    def test_explicit_api_version_and_tls(self, write_config):
        env = write_config({**BASE, "apiVersion": "4.1", "tls": {"rejectUnauthorized": False}})
        config = load_config(env)
        assert config.api_version == "4.1"
        assert config.tls_reject_unauthorized is False

    def test_insecure_tls_env_overrides_file(self, write_config):
        env = write_config({**BASE, "tls": {"rejectUnauthorized": True}})
        env["TFS_INSECURE_TLS"] = "true"
        assert load_config(env).tls_reject_unauthorized is False

    def test_insecure_tls_env_other_values_ignored(self, write_config):
        env = write_config(BASE)
        env["TFS_INSECURE_TLS"] = "1"
        assert load_config(env).tls_reject_unauthorized is True

    def test_config_is_immutable(self, write_config):
        config = load_config(write_config(BASE))
        with pytest.raises(AttributeError):
            config.project = "Beta"

    def test_pat_file_from_env(self, write_config, tmp_path):
        data = {k: v for k, v in BASE.items() if k != "patFile"}
        env = write_config(data, pat_name="other.txt")
        env["TFS_PAT_FILE"] = str(tmp_path / "other.txt")
        assert load_config(env).pat == "my-token"

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Config not found"):
            load_config({"TFS_MCP_CONFIG": str(tmp_path / "nope.json")})

    def test_default_path_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigurationError, match="config.json"):
            load_config({})

    def test_invalid_json(self, write_config):
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(write_config("{not json"))

    @pytest.mark.parametrize("key", ["baseUrl", "collection", "project"])
    def test_missing_required_key(self, write_config, key):
        data = {k: v for k, v in BASE.items() if k != key}
        with pytest.raises(ConfigurationError, match="requires baseUrl, collection, and project"):
            load_config(write_config(data))

    def test_missing_pat_source(self, write_config):
        data = {k: v for k, v in BASE.items() if k != "patFile"}
        with pytest.raises(ConfigurationError, match="patFile or TFS_PAT_FILE"):
            load_config(write_config(data))

    def test_pat_file_not_found(self, write_config):
        with pytest.raises(ConfigurationError, match="PAT file not found"):
            load_config(write_config(BASE, pat=None))

    def test_empty_pat_file(self, write_config):
        with pytest.raises(ConfigurationError, match="PAT file is empty"):
            load_config(write_config(BASE, pat="   \n"))

    def test_pat_file_not_utf8(self, write_config, tmp_path):
        env = write_config(BASE)
        (tmp_path / "pat.txt").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(ConfigurationError, match="PAT file at .* is unreadable"):
            load_config(env)

    def test_pat_file_os_error(self, write_config, monkeypatch):
        env = write_config(BASE)
        original = Path.read_text

        def read_text(self, *args, **kwargs):
            if self.name == "pat.txt":
                raise PermissionError(13, "Permission denied")
            return original(self, *args, **kwargs)
        monkeypatch.setattr(Path, "read_text", read_text)

        with pytest.raises(ConfigurationError, match="PAT file at .* is unreadable"):
            load_config(env)

    def test_config_file_not_utf8(self, write_config, tmp_path):
        env = write_config(BASE)
        (tmp_path / "config.json").write_bytes(b'{"baseUrl": "\xff"}')
        with pytest.raises(ConfigurationError, match="is unreadable"):
            load_config(env)

    def test_tls_must_be_object(self, write_config):
        with pytest.raises(ConfigurationError, match="tls must be an object"):
            load_config(write_config({**BASE, "tls": True}))

    @pytest.mark.parametrize("key", ["baseUrl", "collection", "project"])
    def test_required_key_must_be_string(self, write_config, key):
        with pytest.raises(ConfigurationError, match=f"{key} must be a string"):
            load_config(write_config({**BASE, key: 42}))

    def test_pat_file_must_be_string(self, write_config):
        with pytest.raises(ConfigurationError, match="patFile must be a string"):
            load_config(write_config({**BASE, "patFile": ["pat.txt"]}))
