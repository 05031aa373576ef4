#!/usr/bin/env python3
"""
Result projections: turn a finished command into the shape a caller wants.

Every projection awaits the command first. as_string(), as_json() and
as_xml() respect the throw-on-error policy captured by the command;
as_result() and as_file() never raise on failure because their purpose is
inspecting failures. Parse errors are always raised.

Projections accept a Pipeline or a single ProcessHandle; a bare handle has
no session and is treated as throw-on-error.
"""

import json
import logging
import os
from typing import Any, Optional, Type
from xml.etree import ElementTree

from .errors import CommandFailed, DeserializationFailed, LaunchFailure
from .paths import resolve_path
from .process import CommandResult
from .structured import JsonValue, decode, decode_xml

logger = logging.getLogger(__name__)


def _log_result(cmd: Any, result: CommandResult) -> None:
    logger.info("%s exited with %s", cmd, result.exit_code)
    if result.standard_output:
        logger.info("stdout:\n%s", result.standard_output.rstrip())
    if result.standard_error:
        logger.info("stderr:\n%s", result.standard_error.rstrip())


def _check(cmd: Any, result: CommandResult) -> CommandResult:
    """Apply the failure policy of ``cmd`` to ``result``."""
    if result.success or not getattr(cmd, 'throw_on_error', True):
        return result
    if result.launch_error is not None:
        raise LaunchFailure(result)
    raise CommandFailed(result)


async def as_result(cmd: Any, log: bool = False) -> CommandResult:
    """The raw CommandResult; never raises because the command failed."""
    result = await cmd.wait()
    if log:
        _log_result(cmd, result)
    return result


async def as_string(cmd: Any, log: bool = False) -> str:
    """Captured standard output.

    Raises:
        CommandFailed: If the command failed and throw-on-error is enabled.
    """
    result = _check(cmd, await as_result(cmd, log))
    return result.standard_output


async def as_json(cmd: Any, target: Optional[Type] = None) -> Any:
    """Standard output parsed as JSON.

    Without ``target`` the result is a JsonValue; otherwise the parsed data is
    decoded into ``target`` (a dataclass, ``List[T]``, ``Dict[str, T]``...).

    Raises:
        CommandFailed: If the command failed and throw-on-error is enabled.
        DeserializationFailed: If the output is not valid JSON for ``target``.
    """
    result = _check(cmd, await cmd.wait())
    try:
        data = json.loads(result.standard_output)
    except ValueError as e:
        raise DeserializationFailed(f"output of {cmd} is not valid JSON: {e}", result) from e

    if target is None:
        return JsonValue(data)
    try:
        return decode(data, target)
    except (TypeError, ValueError, KeyError) as e:
        name = getattr(target, '__name__', str(target))
        raise DeserializationFailed(f"cannot decode output of {cmd} as {name}: {e}", result) from e


async def as_xml(cmd: Any, target: Optional[Type] = None) -> Any:
    """Standard output parsed as XML.

    Without ``target`` the result is the root Element; otherwise the root is
    decoded into the dataclass ``target``.

    Raises:
        CommandFailed: If the command failed and throw-on-error is enabled.
        DeserializationFailed: If the output is not valid XML for ``target``.
    """
    result = _check(cmd, await cmd.wait())
    try:
        root = ElementTree.fromstring(result.standard_output)
    except ElementTree.ParseError as e:
        raise DeserializationFailed(f"output of {cmd} is not valid XML: {e}", result) from e

    if target is None:
        return root
    try:
        return decode_xml(root, target)
    except (TypeError, ValueError) as e:
        name = getattr(target, '__name__', str(target))
        raise DeserializationFailed(f"cannot decode output of {cmd} as {name}: {e}", result) from e


def _working_directory(cmd: Any) -> str:
    folder = getattr(cmd, 'working_directory', None)
    return folder or os.getcwd()


async def as_file(cmd: Any, stdout_path: str, stderr_path: Optional[str] = None) -> CommandResult:
    """Write the captured streams to files and return the CommandResult.

    Relative paths are resolved against the working folder the command was
    launched in, not the live location of the session.
    """
    result = await cmd.wait()
    folder = _working_directory(cmd)
    encoding = getattr(cmd, 'encoding', 'utf-8')

    with open(resolve_path(folder, stdout_path), 'w', encoding=encoding, newline='') as f:
        f.write(result.standard_output)

    if stderr_path is not None:
        with open(resolve_path(folder, stderr_path), 'w', encoding=encoding, newline='') as f:
            f.write(result.standard_error)
    return result


def redirect_from(cmd: Any, content: str) -> Any:
    """Use ``content`` as the input of the first stage of ``cmd``."""
    return cmd.redirect_from(content) if hasattr(cmd, 'redirect_from') else cmd.feed(content)
