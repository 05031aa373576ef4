#!/usr/bin/env python3
"""
Exception taxonomy for scriptshell.

Navigation and filesystem errors are raised synchronously at the call site.
Process errors travel through the awaited result of a command and are gated
by the session's throw-on-error policy, except for deserialization errors
which are always raised.

Each error also derives from the closest builtin so that callers can catch
``ValueError``, ``OSError`` or ``IndexError`` without importing this module.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .process import CommandResult


class ShellError(Exception):
    """Base class for every error raised by scriptshell."""


class InvalidArgument(ShellError, ValueError):
    """A path or argument was null, empty or malformed."""


class NotFound(ShellError, FileNotFoundError):
    """The folder or file an operation requires does not exist."""


class DirectoryNotEmpty(ShellError, OSError):
    """A non-recursive delete was attempted on a populated folder."""


class AlreadyExists(ShellError, FileExistsError):
    """A copy or move target exists and overwriting was not requested."""


class EmptyStack(ShellError, IndexError):
    """pop_folder() was called with no matching push_folder()."""


class CommandFailed(ShellError):
    """
    A command finished unsuccessfully while throw-on-error was enabled.

    The complete CommandResult is kept on ``result`` so callers can still
    inspect the exit code and both captured streams.
    """

    def __init__(self, result: 'CommandResult', message: Optional[str] = None):
        if message is None:
            message = result.standard_error.strip() or f"Command exited with code {result.exit_code}"
        super().__init__(message)
        self.result = result

    @property
    def exit_code(self) -> int:
        return self.result.exit_code


class LaunchFailure(CommandFailed):
    """The operating system could not start the requested executable."""

    def __init__(self, result: 'CommandResult'):
        super().__init__(result, result.launch_error or result.standard_error)


class DeserializationFailed(ShellError, ValueError):
    """Captured output could not be parsed or decoded into the requested type."""

    def __init__(self, message: str, result: Optional['CommandResult'] = None):
        super().__init__(message)
        self.result = result
