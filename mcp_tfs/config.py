"""Connection settings for the TFS MCP server.

Settings come from a JSON file (``config.json`` in the working directory, or
the path in ``TFS_MCP_CONFIG``). The personal access token lives in a separate
file named by ``patFile`` or ``TFS_PAT_FILE``; relative paths resolve against
the config file's directory.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from mcp_tfs.errors import ConfigurationError

DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_API_VERSION = "2.0"


@dataclass(frozen=True)
class TfsConfig:
    base_url: str
    collection: str
    project: str
    api_version: str
    pat: str
    tls_reject_unauthorized: bool = True


def _read_json(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Config at {path} is unreadable: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config at {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config at {path} must be a JSON object.")
    return data


def _read_pat(pat_file: str, config_dir: Path) -> str:
    resolved = Path(pat_file)
    if not resolved.is_absolute():
        resolved = (config_dir / resolved).resolve()

    if not resolved.is_file():
        raise ConfigurationError(f"PAT file not found at {resolved}")

    try:
        token = resolved.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"PAT file at {resolved} is unreadable: {e}") from e
    if not token:
        raise ConfigurationError("PAT file is empty.")
    return token


def config_path(environ=None) -> Path:
    env = os.environ if environ is None else environ
    if env.get("TFS_MCP_CONFIG"):
        return Path(env["TFS_MCP_CONFIG"]).resolve()
    return Path.cwd() / DEFAULT_CONFIG_FILE


def load_config(environ=None) -> TfsConfig:
    """Resolve and validate settings. Called fresh on every tool invocation."""
    env = os.environ if environ is None else environ
    path = config_path(env)

    if not path.is_file():
        raise ConfigurationError(
            f"Config not found at {path}. Copy config.example.json to config.json "
            "or set TFS_MCP_CONFIG."
        )

    raw = _read_json(path)
    if not raw.get("baseUrl") or not raw.get("collection") or not raw.get("project"):
        raise ConfigurationError("Config requires baseUrl, collection, and project.")
    for key in ("baseUrl", "collection", "project"):
        if not isinstance(raw[key], str):
            raise ConfigurationError(f"Config key {key} must be a string.")

    pat_file = raw.get("patFile") or env.get("TFS_PAT_FILE")
    if not pat_file:
        raise ConfigurationError("Config requires patFile or TFS_PAT_FILE.")
    if not isinstance(pat_file, str):
        raise ConfigurationError("Config key patFile must be a string.")

    if env.get("TFS_INSECURE_TLS") == "true":
        reject_unauthorized = False
    else:
        tls = raw.get("tls") or {}
        if not isinstance(tls, dict):
            raise ConfigurationError("Config key tls must be an object.")
        reject_unauthorized = tls.get("rejectUnauthorized")
        if reject_unauthorized is None:
            reject_unauthorized = True

    base_url = raw["baseUrl"]
    if base_url.endswith("/"):
        base_url = base_url[:-1]

    return TfsConfig(
        base_url=base_url,
        collection=raw["collection"],
        project=raw["project"],
        api_version=raw.get("apiVersion") or DEFAULT_API_VERSION,
        pat=_read_pat(pat_file, path.parent),
        tls_reject_unauthorized=bool(reject_unauthorized),
    )
