"""Command-line interface for quest-sync."""
