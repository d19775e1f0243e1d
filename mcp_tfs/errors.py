"""Exceptions raised by the TFS MCP server."""


class TfsError(Exception):
    """Base class for errors raised by mcp_tfs."""


class ConfigurationError(TfsError):
    """Connection settings are missing or unusable."""


class RequestError(TfsError):
    """The TFS REST API answered with a non-success status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"TFS request failed {status}: {body}")


class UnknownToolError(TfsError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")
