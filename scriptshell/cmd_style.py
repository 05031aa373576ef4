#!/usr/bin/env python3
"""
Cmd-style verbs over a Shell session.

Verbs whose names clash with Python keywords or builtins carry a trailing
underscore (``del_``, ``type_``).
"""

from typing import Optional, Union

from .location import Listing
from .pipeline import Pipeline
from .shell import Shell


def cd(shell: Shell, path: Optional[str] = None) -> Union[Shell, str]:
    """Change the current folder, or return it when no path is given."""
    if path is None:
        return shell.current_folder
    return shell.change_folder(path)


def chdir(shell: Shell, path: str) -> Shell:
    return shell.change_folder(path)


def pushd(shell: Shell, path: str) -> Shell:
    return shell.push_folder(path)


def popd(shell: Shell) -> Shell:
    return shell.pop_folder()


def md(shell: Shell, path: str) -> Shell:
    """Make a folder."""
    return shell.create_folder(path)


def mkdir(shell: Shell, path: str) -> Shell:
    """Make a folder."""
    return shell.create_folder(path)


def rd(shell: Shell, path: str, recursive: bool = False) -> Shell:
    """Remove a folder; ``recursive`` also removes its contents."""
    return shell.delete_folder(path, recursive)


def rmdir(shell: Shell, path: str, recursive: bool = False) -> Shell:
    return shell.delete_folder(path, recursive)


def dir(shell: Shell, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
    """Files and folders in the current folder."""
    return shell.list(pattern, recursive)


def type_(shell: Shell, path: str) -> Pipeline:
    """Write a file to standard output, suitable for piping."""
    return shell.read_file(path)


def copy(shell: Shell, source: str, target: str, overwrite: bool = False,
         recursive: bool = True) -> Shell:
    return shell.copy(source, target, overwrite, recursive)


def move(shell: Shell, source: str, target: str) -> Shell:
    return shell.move(source, target)


def rename(shell: Shell, source: str, target: str) -> Shell:
    return shell.rename(source, target)


def delete(shell: Shell, path: str) -> Shell:
    """Delete a file."""
    return shell.delete_file(path)


def del_(shell: Shell, path: str) -> Shell:
    return shell.delete_file(path)


def erase(shell: Shell, path: str) -> Shell:
    return shell.delete_file(path)
