"""
Scratch buffer — a private, short-lived file that hands a secret to an editor.

The file name is ``kv-secret-<32 hex>.tmp`` drawn from ``secrets``; it is
created with O_EXCL | O_NOFOLLOW and mode 0600 so nobody else can read it
and two invocations never share a path. Release overwrites the file's
current length with random bytes, fsyncs, then unlinks.

Never log file contents. Paths and sizes only.
"""

from __future__ import annotations

import logging
import os
import secrets
import tempfile
from collections.abc import Callable, Generator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from kvault.errors import EntropyError, ScratchIOError

logger = logging.getLogger(__name__)

NAME_PREFIX = "kv-secret-"
NAME_SUFFIX = ".tmp"
NAME_ENTROPY_BYTES = 16
MAX_NAME_ATTEMPTS = 8
ERASE_CHUNK = 64 * 1024

_CREATE_FLAGS = os.O_RDWR | os.O_CREAT | os.O_EXCL | getattr(os, "O_NOFOLLOW", 0)
_ERASE_FLAGS = os.O_WRONLY | getattr(os, "O_NOFOLLOW", 0)


@dataclass(frozen=True)
class ScratchHandle:
    """A live scratch file holding one secret for one edit."""

    path: Path
    size_at_creation: int


def random_bytes(n: int) -> bytes:
    """Secure random bytes. Raises EntropyError rather than degrade."""
    try:
        return secrets.token_bytes(n)
    except (NotImplementedError, OSError) as e:
        raise EntropyError(f"secure random source unavailable: {e}") from e


def random_name() -> str:
    return f"{NAME_PREFIX}{random_bytes(NAME_ENTROPY_BYTES).hex()}{NAME_SUFFIX}"


def acquire(
    content: str,
    *,
    directory: Path | str | None = None,
    name_factory: Callable[[], str] = random_name,
) -> ScratchHandle:
    """Create a fresh 0600 scratch file holding ``content`` verbatim.

    A name collision is retried with a new name up to MAX_NAME_ATTEMPTS
    times. If the write fails the file is removed before raising.
    """
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())

    for attempt in range(1, MAX_NAME_ATTEMPTS + 1):
        path = base / name_factory()
        try:
            fd = os.open(path, _CREATE_FLAGS, 0o600)
        except FileExistsError:
            logger.debug("Scratch name collision on attempt %d: %s", attempt, path.name)
            continue
        except OSError as e:
            raise ScratchIOError(f"cannot create scratch file in {base}: {e}") from e
        break
    else:
        raise ScratchIOError(
            f"could not find an unused scratch file name in {base} "
            f"after {MAX_NAME_ATTEMPTS} attempts"
        )

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        size = path.stat().st_size
    except (OSError, UnicodeEncodeError) as e:
        path.unlink(missing_ok=True)
        raise ScratchIOError(f"cannot write scratch file {path}: {e}") from e

    logger.debug("Scratch file created: %s (%d bytes)", path, size)
    return ScratchHandle(path=path, size_at_creation=size)


def read(handle: ScratchHandle) -> str:
    """Return the scratch file's current content."""
    try:
        with open(handle.path, encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ScratchIOError(f"edited content is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ScratchIOError(f"cannot read scratch file {handle.path}: {e}") from e


def release(handle: ScratchHandle) -> None:
    """Overwrite the file's current length with random bytes, fsync, unlink.

    The size is read at release time; the editor may have grown or shrunk
    the file since acquisition. If the overwrite fails the file is left in
    place so the operator can deal with it.
    """
    path = handle.path
    try:
        size = os.lstat(path).st_size
        fd = os.open(path, _ERASE_FLAGS)
        with os.fdopen(fd, "wb") as f:
            remaining = size
            while remaining > 0:
                chunk = min(remaining, ERASE_CHUNK)
                f.write(random_bytes(chunk))
                remaining -= chunk
            f.flush()
            os.fsync(f.fileno())
        os.unlink(path)
    except OSError as e:
        raise ScratchIOError(f"failed to securely delete {path}: {e}") from e

    logger.debug("Scratch file erased and removed: %s (%d bytes)", path, size)


@contextmanager
def scratch_buffer(
    content: str,
    *,
    directory: Path | str | None = None,
    on_release_error: Callable[[ScratchHandle, Exception], None] | None = None,
    name_factory: Callable[[], str] = random_name,
) -> Generator[ScratchHandle, None, None]:
    """Acquire a scratch file and release it on every exit path.

    Release failures are logged and passed to ``on_release_error``; they
    never mask an exception already propagating out of the block.
    """
    handle = acquire(content, directory=directory, name_factory=name_factory)
    try:
        yield handle
    finally:
        try:
            release(handle)
        except (ScratchIOError, EntropyError) as e:
            logger.warning(
                "Residual plaintext may remain at %s: %s", handle.path, e
            )
            if on_release_error is not None:
                on_release_error(handle, e)
