"""Utility functions for locating Skyscrape's working directories."""

from pathlib import Path


def get_project_root() -> Path:
    """Find the project root by searching upwards from the Current Working Directory.

    Stops at the first directory containing a marker file.
    """
    current_path = Path.cwd()

    markers = {'.git', 'pyproject.toml', '.skyscrape', '.env'}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in markers):
            return parent

    # No markers found (e.g., running in /tmp)
    return current_path


def get_logs_path() -> Path:
    """Return the path to the logs directory in .skyscrape."""
    return get_project_root() / '.skyscrape' / 'logs'
