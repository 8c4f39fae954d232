"""Command-line interface for sqlite2dir."""
