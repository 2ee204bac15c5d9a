"""Remote action client exceptions."""


class RemoteActionError(Exception):
    """Base exception for remote action client errors."""

    pass


class NotConnectedError(RemoteActionError):
    """request() was called before connect()."""

    def __init__(self, message: str = "Remote action client not connected. Call connect() first."):
        super().__init__(message)
