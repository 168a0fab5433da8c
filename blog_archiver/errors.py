"""Exceptions raised by the archiving pipeline."""


class ArchiverError(Exception):
    """Base class for every failure a single archive job can report."""


class NavigationTimeout(ArchiverError):
    def __init__(self, url: str, timeout_ms: int):
        self.url = url
        self.timeout_ms = timeout_ms
        super().__init__(f"Navigation to {url} timed out after {timeout_ms}ms")


class InvalidUrl(ArchiverError):
    def __init__(self, url: str, reason: str = "not an absolute http(s) URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class MalformedSourceDocument(ArchiverError):
    """The content buffer handed to the TOC composer is not a readable PDF."""


class FileSystemError(ArchiverError):
    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class SurfaceLaunchError(ArchiverError):
    """No render surface could be started; fatal to the whole run."""
