class SybError(Exception):
    """Base class for every error raised while reading or writing SYB archives."""


class NotFoundError(SybError):
    """A required input path does not exist."""


class FormatError(SybError):
    """The container does not follow the SYB layout (bad magic, truncated data...)."""


class ArchiveIOError(SybError):
    """An output path cannot be created or has the wrong type."""


class FatalInvariantError(SybError):
    """An internal limit was exceeded, e.g. an entry name longer than supported."""
