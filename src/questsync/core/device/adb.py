"""adb device discovery and file transport.

All device I/O shells out to the ``adb`` executable. A transport is bound to one
device serial and is released once with ``close()``. Pushes land under a
temporary name next to the target and are renamed over it on the device.
"""

import logging
import shlex
import subprocess  # nosec B404
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from ...exceptions import AdbNotFoundError, NotFoundError, StoreIOError

logger = logging.getLogger(__name__)

READY_STATE = "device"
MISSING_FILE_MARKERS = ("No such file or directory", "does not exist")
PUSH_SUFFIX = ".tmp"


class Transport(Protocol):
    """File access on the remote side of a sync session."""

    def pull(self, remote_path: str) -> bytes:
        """Read a whole remote file."""
        ...

    def push(self, data: bytes, remote_path: str) -> None:
        """Replace a remote file with ``data``."""
        ...

    def list_directory(self, remote_path: str) -> List[str]:
        """Entry names of a remote directory."""
        ...

    def remove(self, remote_path: str) -> None:
        """Delete a remote file, no error if it is already gone."""
        ...

    def close(self) -> None:
        """Release the transport."""
        ...


@dataclass(frozen=True)
class Device:
    """A device reported by ``adb devices``."""

    serial: str
    state: str

    @property
    def is_ready(self) -> bool:
        """True when the device is authorized and online."""
        return self.state == READY_STATE

    def __str__(self) -> str:
        """String representation of the device."""
        return f"{self.serial} ({self.state})"


def _is_missing(stderr: str) -> bool:
    return any(marker in stderr for marker in MISSING_FILE_MARKERS)


class AdbClient:
    """Runs adb commands and creates transports for devices."""

    def __init__(self, adb_path: str = "adb") -> None:
        """Initialize adb client.

        Args:
            adb_path: adb executable name or path
        """
        self.adb_path = adb_path

    def run(
        self, args: Sequence[str], serial: Optional[str] = None
    ) -> subprocess.CompletedProcess:
        """Run an adb command and capture its output.

        Args:
            args: Arguments after ``adb [-s serial]``
            serial: Device serial to target

        Returns:
            Completed process with text output

        Raises:
            AdbNotFoundError: If the adb executable cannot be started
        """
        cmd = [self.adb_path]
        if serial:
            cmd += ["-s", serial]
        cmd += list(args)
        logger.debug("Running: %s", " ".join(cmd))
        try:
            return subprocess.run(  # nosec B603
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise AdbNotFoundError(
                f"adb executable not found ({self.adb_path}), "
                "install the Android platform tools or set QUEST_SYNC_ADB_PATH"
            ) from e

    def list_devices(self) -> List[Device]:
        """List connected devices.

        Returns:
            Devices in the order adb reports them
        """
        result = self.run(["devices"])
        if result.returncode != 0:
            raise StoreIOError(f"adb devices failed: {result.stderr.strip()}")

        devices = []
        for line in result.stdout.splitlines():
            line = line.strip()
            if not line or line.startswith("List of devices") or line.startswith("*"):
                continue
            parts = line.split()
            if len(parts) >= 2:
                devices.append(Device(serial=parts[0], state=parts[1]))
        logger.debug("Found %d device(s)", len(devices))
        return devices

    def open_transport(self, device: Device) -> "AdbTransport":
        """Create a transport bound to ``device``."""
        return AdbTransport(self, device.serial)


class AdbTransport:
    """Transport over adb for a single device."""

    def __init__(self, client: AdbClient, serial: str) -> None:
        """Initialize transport.

        Args:
            client: adb client used to run commands
            serial: Serial of the target device
        """
        self.client = client
        self.serial = serial
        self.closed = False

    def _run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        if self.closed:
            raise StoreIOError(f"Transport to {self.serial} is closed")
        return self.client.run(args, serial=self.serial)

    def _shell(self, command: str) -> subprocess.CompletedProcess:
        return self._run(["shell", command])

    def pull(self, remote_path: str) -> bytes:
        """Read a whole remote file.

        Raises:
            NotFoundError: If the remote file does not exist
            StoreIOError: If the transfer fails
        """
        with tempfile.TemporaryDirectory() as tmp_dir:
            local_path = Path(tmp_dir) / "pulled"
            result = self._run(["pull", remote_path, str(local_path)])
            if result.returncode != 0:
                if _is_missing(result.stderr):
                    raise NotFoundError(remote_path)
                raise StoreIOError(
                    f"Failed to pull {remote_path}: {result.stderr.strip()}"
                )
            try:
                data = local_path.read_bytes()
            except OSError as e:
                raise StoreIOError(f"Failed to pull {remote_path}: {e}") from e
        logger.debug("Pulled %s (%d bytes)", remote_path, len(data))
        return data

    def push(self, data: bytes, remote_path: str) -> None:
        """Replace a remote file with ``data``.

        The data is pushed to ``<remote_path>.tmp`` and moved over the target
        with ``mv -f``, so the old file stays until the new one is complete.

        Raises:
            StoreIOError: If the transfer or the rename fails
        """
        staged_path = remote_path + PUSH_SUFFIX
        with tempfile.TemporaryDirectory() as tmp_dir:
            local_path = Path(tmp_dir) / "push"
            local_path.write_bytes(data)
            result = self._run(["push", str(local_path), staged_path])
        if result.returncode != 0:
            raise StoreIOError(f"Failed to push {remote_path}: {result.stderr.strip()}")

        result = self._shell(
            f"mv -f {shlex.quote(staged_path)} {shlex.quote(remote_path)}"
        )
        if result.returncode != 0:
            self._discard(staged_path)
            raise StoreIOError(
                f"Failed to replace {remote_path}: "
                f"{(result.stderr + result.stdout).strip()}"
            )
        logger.debug("Pushed %s (%d bytes)", remote_path, len(data))

    def _discard(self, remote_path: str) -> None:
        result = self._shell(f"rm -f {shlex.quote(remote_path)}")
        if result.returncode != 0:
            logger.warning("Could not remove staged file %s", remote_path)

    def list_directory(self, remote_path: str) -> List[str]:
        """Entry names of a remote directory.

        Raises:
            NotFoundError: If the directory does not exist
            StoreIOError: If listing fails
        """
        result = self._shell(f"ls -1 {shlex.quote(remote_path)}")
        if result.returncode != 0:
            output = result.stderr + result.stdout
            if _is_missing(output):
                raise NotFoundError(remote_path)
            raise StoreIOError(f"Failed to list {remote_path}: {output.strip()}")
        return [name for name in result.stdout.splitlines() if name.strip()]

    def remove(self, remote_path: str) -> None:
        """Delete a remote file, no error if it is already gone.

        Raises:
            StoreIOError: If deletion fails
        """
        result = self._shell(f"rm -f {shlex.quote(remote_path)}")
        if result.returncode != 0:
            raise StoreIOError(
                f"Failed to remove {remote_path}: "
                f"{(result.stderr + result.stdout).strip()}"
            )
        logger.debug("Removed %s", remote_path)

    def close(self) -> None:
        """Release the transport, later calls fail."""
        self.closed = True
        logger.debug("Closed transport to %s", self.serial)
