"""Display helpers for CLI output."""

from .formatters import display_devices, display_divergences, display_sync_result

__all__ = ["display_devices", "display_divergences", "display_sync_result"]
