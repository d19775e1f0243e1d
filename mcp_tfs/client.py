"""HTTP helpers for the TFS / Azure DevOps Server REST API."""

import base64
import json
import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request

from mcp_tfs.config import TfsConfig
from mcp_tfs.errors import RequestError

logger = logging.getLogger(__name__)


def auth_header(pat: str) -> str:
    token = base64.b64encode(f":{pat}".encode()).decode()
    return f"Basic {token}"


def base_url(config: TfsConfig, project_override: str | None = None, scope: str = "project") -> str:
    if scope == "collection":
        return f"{config.base_url}/{config.collection}"
    project = project_override or config.project
    return f"{config.base_url}/{config.collection}/{project}"


def _ssl_context(config: TfsConfig) -> ssl.SSLContext | None:
    if config.tls_reject_unauthorized:
        return None
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def build_url(config: TfsConfig, project_override: str | None, path: str,
              query: dict | None = None, scope: str = "project") -> str:
    params = {"api-version": config.api_version}
    params.update(query or {})
    return f"{base_url(config, project_override, scope)}/_apis/{path}?{urllib.parse.urlencode(params)}"


def tfs_request(
    config: TfsConfig,
    project_override: str | None,
    path: str,
    method: str = "GET",
    query: dict | None = None,
    body=None,
    scope: str = "project",
):
    """Send one request and return the decoded JSON body.

    Raises RequestError when the server answers with an error status.
    """
    url = build_url(config, project_override, path, query=query, scope=scope)
    headers = {
        "Accept": "application/json",
        "Authorization": auth_header(config.pat),
    }
    data = None
    if body is not None:
        data = json.dumps(body).encode()
        headers["Content-Type"] = "application/json"

    req = urllib.request.Request(url, data=data, method=method, headers=headers)
    logger.debug("TFS %s %s", method, url)
    try:
        with urllib.request.urlopen(req, context=_ssl_context(config)) as resp:
            return json.loads(resp.read())
    except urllib.error.HTTPError as e:
        detail = e.read().decode(errors="replace")
        raise RequestError(e.code, detail) from e
