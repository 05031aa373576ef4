#!/usr/bin/env python3
"""
Bash-style verbs over a Shell session.

Each verb is a thin function taking the session first, so verb sets for
other dialects can be added without touching Shell.

    from scriptshell import Shell, bash_style as sh

    shell = Shell()
    sh.cd(shell, 'src')
    files = list(sh.ls(shell, '*.py'))
"""

from typing import Optional

from .location import Listing
from .pipeline import Pipeline
from .shell import Shell


def cwd(shell: Shell) -> str:
    """Current folder."""
    return shell.current_folder


def cd(shell: Shell, path: str) -> Shell:
    """Change the current folder."""
    return shell.change_folder(path)


def chdir(shell: Shell, path: str) -> Shell:
    """Change the current folder."""
    return shell.change_folder(path)


def pushd(shell: Shell, path: str) -> Shell:
    return shell.push_folder(path)


def popd(shell: Shell) -> Shell:
    return shell.pop_folder()


def mkdir(shell: Shell, path: str) -> Shell:
    """Create a folder, including missing parents."""
    return shell.create_folder(path)


def rmdir(shell: Shell, path: str, recursive: bool = False) -> Shell:
    return shell.delete_folder(path, recursive)


def ls(shell: Shell, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
    """Files and folders in the current folder."""
    return shell.list(pattern, recursive)


def rm(shell: Shell, path: str) -> Shell:
    """Delete a file."""
    return shell.delete_file(path)


def cp(shell: Shell, source: str, target: str, overwrite: bool = False) -> Shell:
    return shell.copy(source, target, overwrite)


def mv(shell: Shell, source: str, target: str) -> Shell:
    return shell.move(source, target)


def cat(shell: Shell, path: str) -> Pipeline:
    """Write a file to standard output."""
    return shell.read_file(path)
