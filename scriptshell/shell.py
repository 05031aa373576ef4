#!/usr/bin/env python3
"""
Shell - a stateful scripting session.

This module provides the session object that scripts talk to. It composes a
Location, an environment mapping and the failure policy, and builds
Pipelines whose stages are bound to the current folder.

Core Design Principles:
- Stateful operations that maintain context (current folder, env)
- Method chaining for navigation and file operations
- Commands snapshot the folder, environment and policy when constructed,
  so later navigation never changes a command that already exists
- Independent sessions: nothing here touches process-wide state
"""

import logging
import os
import shutil
import sys
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from .config import ShellConfig
from .errors import AlreadyExists, InvalidArgument, NotFound
from .location import Listing, Location
from .pipeline import Pipeline
from .process import ProcessHandle

logger = logging.getLogger(__name__)
echo_logger = logging.getLogger('scriptshell.echo')

# Copies stdin to stdout byte for byte; used as a portable text source
_PASSTHROUGH_SCRIPT = 'import sys; sys.stdout.buffer.write(sys.stdin.buffer.read())'


class Shell:
    """
    Scripting session over the host system.

    A Shell offers the environmental equivalent of a cmd or bash session:
    a current folder with history and a push/pop stack, environment
    variables, and the ability to run processes and pipe them together.
    """

    def __init__(self, start_folder: Optional[str] = None,
                 config: Optional[ShellConfig] = None):
        """Initialize the session, optionally starting in ``start_folder``."""
        self._config = config or ShellConfig()
        self._location = Location(start_folder or self._config.start_folder)
        self._env: Dict[str, str] = dict(os.environ) if self._config.inherit_environment else {}
        self._env.update(self._config.environment)
        self._throw_on_error = self._config.throw_on_error
        self._echo = self._config.echo

    # State inspection

    @property
    def config(self) -> ShellConfig:
        return self._config

    @property
    def location(self) -> Location:
        return self._location

    @property
    def current_folder(self) -> str:
        return self._location.current_folder

    @property
    def folder_history(self) -> Tuple[str, ...]:
        return self._location.folder_history

    @property
    def folder_stack(self) -> Tuple[str, ...]:
        return self._location.folder_stack

    @property
    def throw_on_error(self) -> bool:
        """Whether as_string/as_json/as_xml raise when a command fails.

        Changing it only affects commands built afterwards.
        """
        return self._throw_on_error

    @throw_on_error.setter
    def throw_on_error(self, value: bool) -> None:
        self._throw_on_error = bool(value)

    @property
    def echo(self) -> bool:
        """Whether each command line is printed before it is launched."""
        return self._echo

    @echo.setter
    def echo(self, value: bool) -> None:
        self._echo = bool(value)

    # Environment

    @property
    def environment(self) -> Dict[str, str]:
        """Copy of the variables passed to spawned processes."""
        return dict(self._env)

    def getenv(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._env.get(name, default)

    def setenv(self, name: str, value: Any) -> 'Shell':
        """Set an environment variable for processes started from now on.

        Usage:
            setenv NAME VALUE

        Examples:
            setenv('LANG', 'C')    # Force the C locale for later commands

        Returns:
            Self for method chaining.
        """
        if not name:
            raise InvalidArgument("environment variable name must not be empty")
        self._env[name] = str(value)
        return self

    def unsetenv(self, name: str) -> 'Shell':
        self._env.pop(name, None)
        return self

    # Navigation

    def resolve_path(self, path: str) -> str:
        """Resolve a path relative to the current folder."""
        return self._location.resolve_path(path)

    def change_folder(self, path: str) -> 'Shell':
        """Change the current folder.

        Usage:
            change_folder PATH

        Options:
            PATH                   Absolute path or path relative to the current folder

        Examples:
            change_folder('..')            # Go to parent folder
            change_folder('/usr/bin')      # Go to /usr/bin

        Returns:
            Self for method chaining.
        """
        self._location.change_folder(path)
        return self

    def set_current_folder(self, absolute_path: str) -> 'Shell':
        self._location.set_current_folder(absolute_path)
        return self

    def push_folder(self, path: str) -> 'Shell':
        """Push the current folder onto the stack and change to ``path``."""
        self._location.push_folder(path)
        return self

    def pop_folder(self) -> 'Shell':
        """Pop a folder off the stack and make it current."""
        self._location.pop_folder()
        return self

    # Folder operations

    def create_folder(self, path: str) -> 'Shell':
        self._location.create_folder(path)
        return self

    def delete_folder(self, path: str, recursive: bool = False) -> 'Shell':
        self._location.delete_folder(path, recursive)
        return self

    def copy_folder(self, source: str, target: str, recursive: bool = True,
                    overwrite: bool = False) -> 'Shell':
        self._location.copy_folder(source, target, recursive, overwrite)
        return self

    def move_folder(self, source: str, target: str) -> 'Shell':
        self._location.move_folder(source, target)
        return self

    def list(self, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
        return self._location.list(pattern, recursive)

    def list_files(self, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
        return self._location.list_files(pattern, recursive)

    def list_folders(self, pattern: Optional[str] = None, recursive: bool = False) -> Listing:
        return self._location.list_folders(pattern, recursive)

    # File operations

    def delete_file(self, path: str) -> 'Shell':
        """Delete a file relative to the current folder."""
        resolved = self.resolve_path(path)
        if os.path.isdir(resolved):
            raise InvalidArgument(f"{path}: Is a directory")
        try:
            os.remove(resolved)
        except FileNotFoundError as e:
            raise NotFound(f"{path}: No such file") from e
        return self

    def _file_target(self, source: str, target: str) -> str:
        # A folder target receives the source under its own name
        dst = self.resolve_path(target)
        if os.path.isdir(dst):
            dst = os.path.join(dst, os.path.basename(source))
        return dst

    def copy(self, source: str, target: str, overwrite: bool = False,
             recursive: bool = True) -> 'Shell':
        """Copy a file or folder.

        Usage:
            copy SOURCE TARGET

        Options:
            SOURCE                 File or folder to copy
            TARGET                 Destination path, or a folder to copy a file into
            overwrite              Replace an existing target file, or merge into an
                                   existing target folder
            recursive              Copy subfolders when SOURCE is a folder

        Returns:
            Self for method chaining.
        """
        src = self.resolve_path(source)
        if os.path.isdir(src):
            return self.copy_folder(source, target, recursive, overwrite)
        if not os.path.isfile(src):
            raise NotFound(f"{source}: No such file or directory")

        dst = self._file_target(src, target)
        if os.path.exists(dst) and not overwrite:
            raise AlreadyExists(f"{target}: File exists")
        shutil.copy2(src, dst)
        return self

    def move(self, source: str, target: str) -> 'Shell':
        """Move a file or folder.

        A file moved onto an existing folder lands inside it. A folder is
        only moved to a target that does not exist yet.
        """
        src = self.resolve_path(source)
        if os.path.isdir(src):
            return self.move_folder(source, target)
        if not os.path.isfile(src):
            raise NotFound(f"{source}: No such file or directory")

        dst = self._file_target(src, target)
        if os.path.exists(dst):
            raise AlreadyExists(f"{target}: File exists")
        shutil.move(src, dst)
        return self

    def rename(self, source: str, target: str) -> 'Shell':
        """Rename a file or folder to exactly ``target``."""
        src = self.resolve_path(source)
        dst = self.resolve_path(target)
        if not os.path.exists(src):
            raise NotFound(f"{source}: No such file or directory")
        if os.path.exists(dst):
            raise AlreadyExists(f"{target}: File exists")
        os.rename(src, dst)
        return self

    # Execution

    def _launch(self, executable: str, arguments: Iterable[Any], **options: Any) -> Pipeline:
        handle = ProcessHandle(
            executable,
            arguments,
            working_directory=self.current_folder,
            environment=self._env,
            encoding=self._config.encoding,
            errors=self._config.decode_errors,
            **options
        )
        if self._echo:
            echo_logger.info("%s> %s", handle.working_directory, handle.command_line)
            print(f"{handle.working_directory}> {handle.command_line}", file=sys.stderr)
        handle.launch()
        return Pipeline([handle], self._throw_on_error, self._config.encoding)

    def run(self, executable: str, *arguments: Any,
            stdout_path: Optional[str] = None,
            stderr_path: Optional[str] = None) -> Pipeline:
        """Run a process in the current folder.

        Usage:
            run EXECUTABLE [ARGUMENT...]

        Options:
            EXECUTABLE             Program name (searched on PATH) or path
            ARGUMENT               Passed verbatim, no shell quoting involved
            stdout_path            Write stdout to this file instead of capturing it
            stderr_path            Write stderr to this file instead of capturing it

        Examples:
            run('git', 'status')                      # Capture git output
            run('sort') | run('uniq', '-c')           # Pipe two processes

        Returns:
            A single-stage Pipeline, already running.
        """
        return self._launch(
            executable, arguments,
            stdout_path=self.resolve_path(stdout_path) if stdout_path else None,
            stderr_path=self.resolve_path(stderr_path) if stderr_path else None,
        )

    def start(self, executable: str, *arguments: Any) -> Pipeline:
        """Start a detached process whose output goes to the host console."""
        return self._launch(executable, arguments, capture_output=False, inherit_stdin=True)

    def cmd(self, command: str) -> Pipeline:
        """Run a command line through the platform command interpreter.

        Uses ``cmd.exe /c`` on Windows and ``/bin/sh -c`` elsewhere.
        """
        if os.name == 'nt':
            return self.run('cmd.exe', '/c', command)
        return self.run('/bin/sh', '-c', command)

    def bash(self, command: str) -> Pipeline:
        """Run a command line through bash."""
        return self.run('bash', '-c', command)

    def read_file(self, path: str) -> Pipeline:
        """Write a file to standard output, suitable for piping.

        Uses ``cmd.exe /c type`` on Windows and ``cat`` elsewhere, so error
        text for missing files is the one those tools print.
        """
        resolved = self.resolve_path(path)
        if os.name == 'nt':
            return self.run('cmd.exe', '/c', 'type', resolved)
        return self.run('cat', resolved)

    def echo_text(self, text: Union[str, Iterable[str]]) -> Pipeline:
        """Turn text into a command whose standard output is that text.

        A sequence of lines is joined with the platform line separator and
        terminated by one.
        """
        if not isinstance(text, str):
            text = ''.join(f"{line}{os.linesep}" for line in text)
        return self.run(sys.executable, '-c', _PASSTHROUGH_SCRIPT).redirect_from(text)

    def __repr__(self) -> str:
        return f"Shell({self.current_folder!r})"
