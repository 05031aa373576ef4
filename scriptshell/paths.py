#!/usr/bin/env python3
"""
Path resolution for scriptshell.

Every path a caller hands to a Location or a Shell goes through
resolve_path() so that relative navigation is deterministic: the result only
depends on the base folder and the input, never on the process-wide working
directory.
"""

import os

from .errors import InvalidArgument


def resolve_path(base: str, path: str) -> str:
    """Resolve ``path`` against the absolute folder ``base``.

    Args:
        base: Absolute folder that relative input is joined to.
        path: Absolute or relative path. ``~`` expands to the home folder.

    Returns:
        The canonical absolute path with ``.`` and ``..`` segments collapsed.
        The path does not need to exist.

    Raises:
        InvalidArgument: If ``path`` is None or empty.
    """
    if path is None or not str(path).strip():
        raise InvalidArgument("path must be a non-empty string")

    path = os.path.expanduser(os.fspath(path))

    if os.path.isabs(path):
        # Rooted input ignores the base entirely
        return os.path.normpath(os.path.abspath(path))

    if not base or not os.path.isabs(base):
        raise InvalidArgument(f"base folder must be absolute: {base!r}")

    return os.path.normpath(os.path.join(base, path))


def is_rooted(path: str) -> bool:
    """Return True when ``path`` is absolute on this platform."""
    return bool(path) and os.path.isabs(os.fspath(path))
