"""Error taxonomy for index building and synchronization."""

from __future__ import annotations


class ClerkError(Exception):
    """Base class for all docclerk errors."""


class ParseError(ClerkError):
    """Raised when JSON from the remote or from a local file is malformed."""


class FilesystemError(ClerkError):
    """Raised when walking a documentation tree fails unexpectedly.

    Not recovered anywhere in the core: a docs tree that cannot be walked
    aborts the build.
    """


class RemoteError(ClerkError):
    """Base class for failures talking to the remote config location."""

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class NotFoundError(RemoteError):
    """The remote config location does not exist (HTTP 404)."""


class DnsError(RemoteError):
    """The remote host name could not be resolved."""


class FetchTimeoutError(RemoteError):
    """The transport timed out while fetching a remote file."""


class TransportError(RemoteError):
    """Any other transport-level failure."""
