"""Uniform file access for the local and the remote side.

A backend hides whether a side is the PC filesystem or a device reached through
a transport, so the stores above it read and write both sides the same way.
"""

import logging
import os
import posixpath
import tempfile
from pathlib import Path
from typing import List, Protocol

from ...exceptions import NotFoundError, StoreIOError
from ..device.adb import Transport

logger = logging.getLogger(__name__)


class Backend(Protocol):
    """File operations one side of a sync supports."""

    def read_file(self, path: str) -> bytes:
        """Read a whole file."""
        ...

    def write_file(self, path: str, data: bytes) -> None:
        """Atomically replace a file."""
        ...

    def list_directory(self, path: str) -> List[str]:
        """Entry names in a directory."""
        ...

    def remove_file(self, path: str) -> None:
        """Delete a file, no error if it does not exist."""
        ...

    def join(self, directory: str, name: str) -> str:
        """Join a directory and an entry name."""
        ...


class LocalBackend:
    """Backend over the local filesystem."""

    def read_file(self, path: str) -> bytes:
        """Read a whole file.

        Raises:
            NotFoundError: If the file does not exist
            StoreIOError: If the file cannot be read
        """
        try:
            return Path(path).read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(str(path)) from e
        except OSError as e:
            raise StoreIOError(f"Failed to read {path}: {e}") from e

    def write_file(self, path: str, data: bytes) -> None:
        """Atomically replace a file.

        The data goes to a temporary file in the same directory which is then
        moved over the target, so either the new content lands or the old one
        stays.

        Raises:
            StoreIOError: If the file cannot be written
        """
        target = Path(path)
        tmp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=target.parent, prefix=f".{target.name}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise StoreIOError(f"Failed to write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
        logger.debug("Wrote %s (%d bytes)", path, len(data))

    def list_directory(self, path: str) -> List[str]:
        """Names of the files in a directory, sorted.

        Raises:
            NotFoundError: If the directory does not exist
            StoreIOError: If the directory cannot be listed
        """
        directory = Path(path)
        if not directory.is_dir():
            raise NotFoundError(str(path))
        try:
            return sorted(
                entry.name for entry in directory.iterdir() if entry.is_file()
            )
        except OSError as e:
            raise StoreIOError(f"Failed to list {path}: {e}") from e

    def remove_file(self, path: str) -> None:
        """Delete a file, no error if it does not exist.

        Raises:
            StoreIOError: If the file cannot be deleted
        """
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            raise StoreIOError(f"Failed to remove {path}: {e}") from e

    def join(self, directory: str, name: str) -> str:
        """Join a directory and an entry name."""
        return str(Path(directory) / name)


class RemoteBackend:
    """Backend over a device transport."""

    def __init__(self, transport: Transport) -> None:
        """Initialize remote backend.

        Args:
            transport: Open transport to the device
        """
        self.transport = transport

    def read_file(self, path: str) -> bytes:
        """Read a whole remote file."""
        return self.transport.pull(path)

    def write_file(self, path: str, data: bytes) -> None:
        """Replace a remote file, the transport stages and renames it."""
        self.transport.push(data, path)

    def list_directory(self, path: str) -> List[str]:
        """Entry names of a remote directory."""
        return sorted(self.transport.list_directory(path))

    def remove_file(self, path: str) -> None:
        """Delete a remote file."""
        self.transport.remove(path)

    def join(self, directory: str, name: str) -> str:
        """Join using device (POSIX) separators."""
        return posixpath.join(directory, name)
