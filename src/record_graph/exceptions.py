"""
Exceptions raised by Record Graph
"""


class RecordGraphError(Exception):
    """Base class for every error the CLI reports to the operator."""


class XanoAPIError(RecordGraphError):
    """Non-2xx response from the Xano metadata API."""

    def __init__(self, method: str, path: str, status: int, body: str = ""):
        self.method = method
        self.path = path
        self.status = status
        self.body = body
        super().__init__(f"Xano {method} {path} → {status}: {body}")


class SetupError(RecordGraphError):
    """The setup wizard cannot continue."""
