"""Shared fixtures for mcp_tfs tests."""

import io
import json
import urllib.error
import urllib.request

import pytest

from mcp_tfs.config import TfsConfig


@pytest.fixture
def config():
    return TfsConfig(
        base_url="https://tfs.example.com/tfs",
        collection="DefaultCollection",
        project="Alpha",
        api_version="2.0",
        pat="secret-pat",
    )


class FakeResponse:
    def __init__(self, payload):
        self._body = json.dumps(payload).encode()

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Replace urlopen; queue responses with ``.respond(payload)`` or ``.fail(status, text)``."""
    class Recorder:
        def __init__(self):
            self.requests = []
            self.contexts = []
            self._replies = []

        def respond(self, payload):
            self._replies.append(("ok", payload))

        def fail(self, status, text):
            self._replies.append(("error", (status, text)))

        def __call__(self, req, context=None):
            self.requests.append(req)
            self.contexts.append(context)
            kind, value = self._replies.pop(0)
            if kind == "error":
                status, text = value
                raise urllib.error.HTTPError(
                    req.full_url, status, "error", {}, io.BytesIO(text.encode())
                )
            return FakeResponse(value)

    recorder = Recorder()
    monkeypatch.setattr(urllib.request, "urlopen", recorder)
    return recorder


@pytest.fixture
def fake_tfs(monkeypatch):
    """Replace tfs_request in the query layer with a scripted fake keyed by path."""
    class FakeTfs:
        def __init__(self):
            self.calls = []
            self.replies = {}

        def __call__(self, config, project, path, method="GET", query=None, body=None, scope="project"):
            self.calls.append({
                "project": project, "path": path, "method": method,
                "query": query, "body": body, "scope": scope,
            })
            return self.replies[path]

        def calls_to(self, path):
            return [c for c in self.calls if c["path"] == path]

    fake = FakeTfs()
    monkeypatch.setattr("mcp_tfs.queries.tfs_request", fake)
    return fake


def raw_item(item_id, **fields):
    relations = fields.pop("relations", None)
    item = {"id": item_id, "fields": {"System.Title": f"Item {item_id}", **fields}}
    if relations is not None:
        item["relations"] = relations
    return item
