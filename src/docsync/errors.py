from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for failures that abort a sync run."""


class NotFoundError(SyncError):
    """A local source directory or a component README is missing."""


class DownloadError(SyncError):
    pass


class ExtractError(SyncError):
    pass


class FilesystemError(SyncError):
    pass


class UserInputError(SyncError):
    pass


class ManifestError(SyncError):
    pass


class DocumentError(SyncError):
    """A component README could not be parsed."""
