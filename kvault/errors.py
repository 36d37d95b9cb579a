"""
Error taxonomy for kvault.

Every domain failure derives from KvError so the CLI can turn it into a
single ``Error: ...`` line at the command boundary.
"""

from __future__ import annotations


class KvError(Exception):
    """Base class for kvault failures."""


class ScratchIOError(KvError, OSError):
    """Creating, writing, reading, erasing or deleting a scratch file failed."""


class EditorLaunchError(KvError):
    """The external editor could not be started or exited abnormally."""


class RemoteError(KvError):
    """The secret store rejected or failed a request."""


class EntropyError(KvError):
    """The secure random source is unavailable."""
