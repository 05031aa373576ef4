"""
scriptshell - script the host system from Python the way a bash or cmd script would

This package provides a stateful folder cursor with history and a push/pop
stack, asynchronous process pipelines bound to that cursor, and projections
that turn captured output into text, structured data or files.
"""

__version__ = "0.1.0"

from .errors import (
    ShellError,
    InvalidArgument,
    NotFound,
    DirectoryNotEmpty,
    AlreadyExists,
    EmptyStack,
    CommandFailed,
    LaunchFailure,
    DeserializationFailed,
)

from .paths import resolve_path

from .location import (
    Location,
    Listing,
)

from .process import (
    CommandResult,
    ProcessHandle,
    ProcessState,
)

from .pipeline import Pipeline

from .projection import (
    as_result,
    as_string,
    as_json,
    as_xml,
    as_file,
    redirect_from,
)

from .structured import (
    JsonKind,
    JsonValue,
    decode,
    decode_xml,
)

from .config import ShellConfig
from .shell import Shell

from . import bash_style, cmd_style

__all__ = [
    # Errors
    "ShellError",
    "InvalidArgument",
    "NotFound",
    "DirectoryNotEmpty",
    "AlreadyExists",
    "EmptyStack",
    "CommandFailed",
    "LaunchFailure",
    "DeserializationFailed",

    # Location
    "resolve_path",
    "Location",
    "Listing",

    # Processes and pipelines
    "CommandResult",
    "ProcessHandle",
    "ProcessState",
    "Pipeline",

    # Projections
    "as_result",
    "as_string",
    "as_json",
    "as_xml",
    "as_file",
    "redirect_from",
    "JsonKind",
    "JsonValue",
    "decode",
    "decode_xml",

    # Session
    "ShellConfig",
    "Shell",
    "bash_style",
    "cmd_style",

    # Version info
    "__version__",
]
