#!/usr/bin/env python3
"""
Module-level convenience functions over one shared Shell.

For scripts that want to read like a batch file:

    from scriptshell.default import *

    async def main():
        pushd('build')
        text = await (read_file('report.txt') | cmd('sort')).as_string()
        popd()

The shared session is created on first use. Library code should create its
own Shell instead of importing this module.
"""

from typing import Any, Iterable, Optional, Union

from . import bash_style, cmd_style
from .location import Listing
from .pipeline import Pipeline
from .shell import Shell

_shell: Optional[Shell] = None


def get_shell() -> Shell:
    """The shared session, created on first use."""
    global _shell
    if _shell is None:
        _shell = Shell()
    return _shell


def reset_shell(start_folder: Optional[str] = None) -> Shell:
    """Replace the shared session with a fresh one."""
    global _shell
    _shell = Shell(start_folder)
    return _shell


def get_throw_on_error() -> bool:
    return get_shell().throw_on_error


def set_throw_on_error(value: bool) -> None:
    get_shell().throw_on_error = value


def get_echo() -> bool:
    return get_shell().echo


def set_echo(value: bool) -> None:
    get_shell().echo = value


# Execution

def run(executable: str, *arguments: Any) -> Pipeline:
    """Run a process in the current folder."""
    return get_shell().run(executable, *arguments)

def start(executable: str, *arguments: Any) -> Pipeline:
    """Start a detached process."""
    return get_shell().start(executable, *arguments)

def cmd(command: str) -> Pipeline:
    """Run a command line through the platform interpreter."""
    return get_shell().cmd(command)

def bash(command: str) -> Pipeline:
    """Run a command line through bash."""
    return get_shell().bash(command)

def read_file(path: str) -> Pipeline:
    """Write a file to standard output."""
    return get_shell().read_file(path)

def echo(text: Union[str, Iterable[str]]) -> Pipeline:
    """Turn text into a command."""
    return get_shell().echo_text(text)

def resolve_path(path: str) -> str:
    """Resolve a path relative to the current folder."""
    return get_shell().resolve_path(path)


# Navigation

def cd(path: Optional[str] = None) -> Union[Shell, str]:
    """Change folder, or return the current folder."""
    return cmd_style.cd(get_shell(), path)

def chdir(path: str) -> Shell:
    """Change folder."""
    return cmd_style.chdir(get_shell(), path)

def cwd() -> str:
    """Current folder."""
    return bash_style.cwd(get_shell())

def pushd(path: str) -> Shell:
    """Push the current folder and change to path."""
    return cmd_style.pushd(get_shell(), path)

def popd() -> Shell:
    """Return to the last pushed folder."""
    return cmd_style.popd(get_shell())


# Folders and files

def md(path: str) -> Shell:
    """Make a folder."""
    return cmd_style.md(get_shell(), path)

def mkdir(path: str) -> Shell:
    """Make a folder."""
    return cmd_style.mkdir(get_shell(), path)

def rd(path: str, recursive: bool = False) -> Shell:
    """Remove a folder."""
    return cmd_style.rd(get_shell(), path, recursive)

def rmdir(path: str, recursive: bool = False) -> Shell:
    """Remove a folder."""
    return cmd_style.rmdir(get_shell(), path, recursive)

def dir(pattern: Optional[str] = None, recursive: bool = False) -> Listing:
    """List the current folder."""
    return cmd_style.dir(get_shell(), pattern, recursive)

def ls(pattern: Optional[str] = None, recursive: bool = False) -> Listing:
    """List the current folder."""
    return bash_style.ls(get_shell(), pattern, recursive)

def copy(source: str, target: str, overwrite: bool = False, recursive: bool = True) -> Shell:
    """Copy a file or folder."""
    return cmd_style.copy(get_shell(), source, target, overwrite, recursive)

def copy_folder(source: str, target: str, recursive: bool = True,
                overwrite: bool = False) -> Shell:
    """Copy a folder."""
    return get_shell().copy_folder(source, target, recursive, overwrite)

def move(source: str, target: str) -> Shell:
    """Move a file or folder."""
    return cmd_style.move(get_shell(), source, target)

def rename(source: str, target: str) -> Shell:
    """Rename a file or folder."""
    return cmd_style.rename(get_shell(), source, target)

def delete(path: str) -> Shell:
    """Delete a file."""
    return cmd_style.delete(get_shell(), path)

def del_(path: str) -> Shell:
    """Delete a file."""
    return cmd_style.del_(get_shell(), path)

def erase(path: str) -> Shell:
    """Delete a file."""
    return cmd_style.erase(get_shell(), path)

def rm(path: str) -> Shell:
    """Delete a file."""
    return bash_style.rm(get_shell(), path)

def cat(path: str) -> Pipeline:
    """Write a file to standard output."""
    return bash_style.cat(get_shell(), path)

def type_(path: str) -> Pipeline:
    """Write a file to standard output."""
    return cmd_style.type_(get_shell(), path)
