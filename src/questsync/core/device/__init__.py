"""Device discovery and remote file transport."""

from .adb import AdbClient, AdbTransport, Device, Transport

__all__ = ["AdbClient", "AdbTransport", "Device", "Transport"]
