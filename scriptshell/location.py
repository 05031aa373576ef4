#!/usr/bin/env python3
"""
Location - a stateful folder cursor with history and a navigation stack.

Design Principles:
- One place owns the current folder, so the invariants live in one place
- Every path argument is resolved against the current folder first
- Navigation never touches the process-wide working directory, so several
  Location instances can coexist in one program
- Mutators return self for chaining
"""

import errno
import fnmatch
import logging
import os
import shutil
from typing import Callable, Iterator, List, Optional, Tuple

from .errors import AlreadyExists, DirectoryNotEmpty, EmptyStack, InvalidArgument, NotFound
from .paths import is_rooted, resolve_path

logger = logging.getLogger(__name__)


class Listing:
    """
    Lazy, restartable sequence of entry paths under a folder.

    Nothing is read from disk until iteration starts, and every new
    iteration enumerates the folder again.
    """

    def __init__(self, folder: str, pattern: Optional[str] = None,
                 recursive: bool = False,
                 kind: Callable[[os.DirEntry], bool] = lambda entry: True):
        self.folder = folder
        self.pattern = pattern or '*'
        self.recursive = recursive
        self._kind = kind

    def __iter__(self) -> Iterator[str]:
        pending = [self.folder]
        while pending:
            current = pending.pop(0)
            try:
                with os.scandir(current) as entries:
                    for entry in entries:
                        is_dir = entry.is_dir(follow_symlinks=False)
                        if self._kind(entry) and fnmatch.fnmatch(entry.name, self.pattern):
                            yield entry.path
                        if self.recursive and is_dir:
                            pending.append(entry.path)
            except FileNotFoundError:
                if current == self.folder:
                    raise NotFound(f"{current}: No such directory")
                # A subfolder vanished mid-walk

    def __repr__(self) -> str:
        return f"Listing({self.folder!r}, pattern={self.pattern!r}, recursive={self.recursive})"


def _is_file(entry: os.DirEntry) -> bool:
    return entry.is_file()


def _is_folder(entry: os.DirEntry) -> bool:
    return entry.is_dir()


class Location:
    """
    Current folder plus folder history and a push/pop stack.

    The history never holds two consecutive identical entries and starts with
    the folder the Location was created in. The stack only changes through
    push_folder() and pop_folder().
    """

    def __init__(self, start_folder: Optional[str] = None):
        """Start in ``start_folder`` (default: the process working directory)."""
        if start_folder is None:
            folder = os.getcwd()
        else:
            folder = resolve_path(os.getcwd(), start_folder)

        if not os.path.isdir(folder):
            raise NotFound(f"{start_folder}: No such directory")

        self._current_folder = os.path.normpath(folder)
        self._history: List[str] = [self._current_folder]
        self._stack: List[str] = []

    # State inspection

    @property
    def current_folder(self) -> str:
        """Absolute, normalized path of the current folder."""
        return self._current_folder

    @property
    def folder_history(self) -> Tuple[str, ...]:
        """Every folder entered, oldest first."""
        return tuple(self._history)

    @property
    def folder_stack(self) -> Tuple[str, ...]:
        """Pushed folders, bottom first; the last entry is popped next."""
        return tuple(self._stack)

    def resolve_path(self, path: str) -> str:
        """Resolve ``path`` against the current folder."""
        return resolve_path(self._current_folder, path)

    # Navigation

    def _enter(self, folder: str, shown: str) -> None:
        """Make ``folder`` current, keeping the history free of repeats."""
        if not os.path.isdir(folder):
            if os.path.exists(folder):
                raise NotFound(f"{shown}: Not a directory")
            raise NotFound(f"{shown}: No such directory")

        self._current_folder = folder
        if self._history[-1] != folder:
            self._history.append(folder)
        logger.debug("current folder is now %s", folder)

    def change_folder(self, path: str) -> 'Location':
        """Change the current folder.

        Args:
            path: Absolute path, or a path relative to the current folder.

        Returns:
            Self for method chaining.

        Raises:
            NotFound: If the resolved path is not an existing directory.
        """
        self._enter(self.resolve_path(path), path)
        return self

    def set_current_folder(self, absolute_path: str) -> 'Location':
        """Same as change_folder() but only accepts an absolute path."""
        if absolute_path is None or not str(absolute_path).strip():
            raise InvalidArgument("current folder must be a non-empty path")
        if not is_rooted(absolute_path):
            raise InvalidArgument(
                f"current folder can only be set to a full path, got {absolute_path!r}")
        self._enter(resolve_path(self._current_folder, absolute_path), absolute_path)
        return self

    def push_folder(self, path: str) -> 'Location':
        """Remember the current folder on the stack and change to ``path``.

        Nothing is pushed when the change fails.
        """
        previous = self._current_folder
        self.change_folder(path)
        self._stack.append(previous)
        return self

    def pop_folder(self) -> 'Location':
        """Return to the folder remembered by the matching push_folder().

        Raises:
            EmptyStack: If there is no matching push_folder().
        """
        if not self._stack:
            raise EmptyStack("folder stack is empty")

        # Only drop the entry once the folder was entered successfully
        self.set_current_folder(self._stack[-1])
        self._stack.pop()
        return self

    # Listing

    def list(self, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
        """Files and folders under the current folder matching ``pattern``."""
        return Listing(self._current_folder, pattern, recursive)

    def list_files(self, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
        """Files under the current folder matching ``pattern``."""
        return Listing(self._current_folder, pattern, recursive, kind=_is_file)

    def list_folders(self, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
        """Folders under the current folder matching ``pattern``."""
        return Listing(self._current_folder, pattern, recursive, kind=_is_folder)

    # Folder operations

    def create_folder(self, path: str) -> 'Location':
        """Create a folder and any missing parents; existing folders are left alone."""
        folder = self.resolve_path(path)
        os.makedirs(folder, exist_ok=True)
        return self

    def delete_folder(self, path: str, recursive: bool = False) -> 'Location':
        """Delete a folder.

        Raises:
            NotFound: If the folder does not exist.
            DirectoryNotEmpty: If the folder has entries and ``recursive`` is False.
        """
        folder = self.resolve_path(path)
        if not os.path.isdir(folder):
            raise NotFound(f"{path}: No such directory")

        if recursive:
            shutil.rmtree(folder)
            return self

        try:
            os.rmdir(folder)
        except OSError as e:
            if e.errno in (errno.ENOTEMPTY, errno.EEXIST) or os.listdir(folder):
                raise DirectoryNotEmpty(e.errno, f"{path}: Directory not empty", folder) from e
            raise
        return self

    def copy_folder(self, source: str, target: str, recursive: bool = True,
                    overwrite: bool = False) -> 'Location':
        """Copy a folder to ``target``.

        Without ``recursive`` only the files directly inside ``source`` are
        copied. With ``overwrite`` an existing ``target`` is merged into and
        its clashing files are replaced.

        Raises:
            NotFound: If ``source`` is not a folder.
            AlreadyExists: If ``target`` exists and ``overwrite`` is False.
        """
        src = self.resolve_path(source)
        dst = self.resolve_path(target)
        if not os.path.isdir(src):
            raise NotFound(f"{source}: No such directory")
        if os.path.exists(dst) and not overwrite:
            raise AlreadyExists(f"{target}: File exists")

        if recursive:
            shutil.copytree(src, dst, dirs_exist_ok=True)
        else:
            os.makedirs(dst, exist_ok=True)
            with os.scandir(src) as entries:
                for entry in entries:
                    if entry.is_file():
                        shutil.copy2(entry.path, os.path.join(dst, entry.name))
        return self

    def move_folder(self, source: str, target: str) -> 'Location':
        """Move or rename a folder to exactly ``target``.

        Raises:
            NotFound: If ``source`` is not a folder.
            AlreadyExists: If ``target`` already exists.
        """
        src = self.resolve_path(source)
        dst = self.resolve_path(target)
        if not os.path.isdir(src):
            raise NotFound(f"{source}: No such directory")
        if os.path.exists(dst):
            raise AlreadyExists(f"{target}: File exists")
        shutil.move(src, dst)
        return self

    def __repr__(self) -> str:
        return f"Location({self._current_folder!r})"
