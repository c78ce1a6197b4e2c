"""
Error types raised when talking to the openHAB server.
"""


class RemoteError(RuntimeError):
    """Base class for failures of the remote openHAB API."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RemoteFetchError(RemoteError):
    """Inventory or system-info fetch failed (transport, HTTP status or decode)."""


class RemoteCommandError(RemoteError):
    """A single item command was rejected or could not be delivered."""

    def __init__(self, message: str, *, item_id: str, status_code: int | None = None):
        super().__init__(message, status_code=status_code)
        self.item_id = item_id
