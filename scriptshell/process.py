#!/usr/bin/env python3
"""
Process invocation for scriptshell.

A ProcessHandle owns exactly one OS process. It is spawned synchronously by
launch(), so constructing a command never suspends, while completion is
observed by awaiting the handle from any asyncio event loop.

Design Principles:
- Working folder and environment are snapshots taken at construction
- Captured streams are drained by reader threads from the moment of launch,
  so large output never truncates and stdout/stderr never deadlock
- Launch failures do not raise; they surface through the awaited result
  like any other unsuccessful completion
"""

import asyncio
import logging
import os
import subprocess
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Dict, Iterable, List, Optional

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class CommandResult:
    """
    Immutable record of a finished process.

    ``launch_error`` is set when the process never started, ``killed`` when
    it was terminated through kill().
    """
    exit_code: int
    standard_output: str = ''
    standard_error: str = ''
    launch_error: Optional[str] = None
    killed: bool = False

    @property
    def success(self) -> bool:
        return self.exit_code == 0 and self.launch_error is None and not self.killed

    def __str__(self) -> str:
        return self.standard_output


class ProcessState(Enum):
    """Lifecycle of a ProcessHandle."""
    CREATED = 'created'
    RUNNING = 'running'
    COMPLETED = 'completed'
    KILLED = 'killed'
    FAULTED = 'faulted'

    @property
    def terminal(self) -> bool:
        return self in (ProcessState.COMPLETED, ProcessState.KILLED, ProcessState.FAULTED)


def _format_argument(arg: Any) -> str:
    return os.fspath(arg) if isinstance(arg, os.PathLike) else str(arg)


class ProcessHandle:
    """
    One external process with captured output and an awaitable result.

    Stdin is a pipe unless ``inherit_stdin`` is set. It can be claimed once,
    either by feed() or by another handle's pipe_to(). A pipe nobody claimed
    is closed when the result is first awaited, so the process sees EOF.

    Captured bytes are decoded with ``encoding`` and the codec error handler
    ``errors``. The default ``'replace'`` substitutes U+FFFD for invalid
    sequences; pass ``'surrogateescape'`` to keep the original bytes
    recoverable through ``str.encode(encoding, 'surrogateescape')``.
    """

    def __init__(self, executable: str, arguments: Iterable[Any] = (),
                 working_directory: Optional[str] = None,
                 environment: Optional[Dict[str, str]] = None,
                 inherit_stdin: bool = False,
                 capture_output: bool = True,
                 stdout_path: Optional[str] = None,
                 stderr_path: Optional[str] = None,
                 encoding: str = 'utf-8',
                 errors: str = 'replace'):
        if executable is None or not str(executable).strip():
            raise InvalidArgument("executable must be a non-empty string")

        self.executable = _format_argument(executable)
        self.arguments: List[str] = [_format_argument(arg) for arg in arguments]
        self.working_directory = working_directory or os.getcwd()
        self.environment: Optional[Dict[str, str]] = (
            dict(environment) if environment is not None else None)
        self.inherit_stdin = inherit_stdin
        self.capture_output = capture_output
        self.stdout_path = stdout_path
        self.stderr_path = stderr_path
        self.encoding = encoding
        self.errors = errors

        self._process: Optional[subprocess.Popen] = None
        self._state = ProcessState.CREATED
        self._lock = threading.Lock()
        self._forward_lock = threading.Lock()
        self._future: Future = Future()

        self._stdout_chunks: List[bytes] = []
        self._stderr_chunks: List[bytes] = []
        self._stdout_done = False
        self._forward: Optional['ProcessHandle'] = None
        self._forwarded = 0
        self._stdin_claimed = inherit_stdin
        self._sinks: List[BinaryIO] = []

    # State inspection

    @property
    def state(self) -> ProcessState:
        return self._state

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process is not None else None

    @property
    def has_exited(self) -> bool:
        return self._future.done()

    @property
    def command_line(self) -> str:
        return subprocess.list2cmdline([self.executable] + self.arguments)

    # Launch

    def launch(self) -> 'ProcessHandle':
        """Spawn the process; launch errors become a FAULTED result."""
        if self._state is not ProcessState.CREATED:
            return self

        stdout: Any = None
        stderr: Any = None
        try:
            if self.stdout_path:
                stdout = self._open_sink(self.stdout_path)
            elif self.capture_output:
                stdout = subprocess.PIPE

            if self.stderr_path:
                stderr = self._open_sink(self.stderr_path)
            elif self.capture_output:
                stderr = subprocess.PIPE

            self._process = subprocess.Popen(
                [self.executable] + self.arguments,
                cwd=self.working_directory,
                env=self.environment,
                stdin=None if self.inherit_stdin else subprocess.PIPE,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError as e:
            self._close_sinks()
            self._fault(e)
            return self

        self._state = ProcessState.RUNNING
        logger.debug("launched pid %s: %s (in %s)", self._process.pid,
                     self.command_line, self.working_directory)

        monitor = threading.Thread(target=self._monitor, name=f"scriptshell-{self._process.pid}",
                                   daemon=True)
        monitor.start()
        return self

    def _open_sink(self, path: str) -> BinaryIO:
        sink = open(path, 'wb')
        self._sinks.append(sink)
        return sink

    def _close_sinks(self) -> None:
        for sink in self._sinks:
            sink.close()
        self._sinks = []

    def _fault(self, error: OSError) -> None:
        if isinstance(error, FileNotFoundError) and error.filename in (None, self.executable):
            exit_code = 127
        else:
            exit_code = 126
        message = f"{error.filename or self.executable}: {error.strerror or error}"
        logger.warning("could not launch %s: %s", self.command_line, message)

        self._stdout_done = True
        self._state = ProcessState.FAULTED
        self._future.set_result(CommandResult(
            exit_code=exit_code,
            standard_error=message,
            launch_error=message,
        ))

    # Stream draining

    def _monitor(self) -> None:
        """Drain both streams, wait for exit and publish the result."""
        process = self._process
        readers = []
        if process.stdout is not None:
            readers.append(threading.Thread(target=self._drain_stdout, args=(process.stdout,),
                                            daemon=True))
        else:
            self._finish_stdout()
        if process.stderr is not None:
            readers.append(threading.Thread(target=self._drain, args=(process.stderr, self._stderr_chunks),
                                            daemon=True))

        for reader in readers:
            reader.start()
        for reader in readers:
            reader.join()

        exit_code = process.wait()
        self._close_sinks()

        with self._lock:
            # A clean exit that raced kill() is still a normal completion
            killed = self._state is ProcessState.KILLED and exit_code != 0
            if not killed:
                self._state = ProcessState.COMPLETED

        result = CommandResult(
            exit_code=exit_code,
            standard_output=self._decode(self._stdout_chunks),
            standard_error=self._decode(self._stderr_chunks),
            killed=killed,
        )
        logger.debug("pid %s exited with %s", process.pid, exit_code)
        self._future.set_result(result)

    def _decode(self, chunks: List[bytes]) -> str:
        return b''.join(chunks).decode(self.encoding, errors=self.errors)

    @staticmethod
    def _drain(stream: BinaryIO, chunks: List[bytes]) -> None:
        with stream:
            for chunk in iter(lambda: stream.read1(_CHUNK_SIZE), b''):
                chunks.append(chunk)

    def _drain_stdout(self, stream: BinaryIO) -> None:
        with stream:
            for chunk in iter(lambda: stream.read1(_CHUNK_SIZE), b''):
                with self._lock:
                    self._stdout_chunks.append(chunk)
                self._forward_backlog()
        self._finish_stdout()

    def _forward_backlog(self) -> Optional['ProcessHandle']:
        """Send every chunk not yet forwarded to the piped handle.

        Slicing and writing happen under ``_forward_lock`` so concurrent
        callers deliver chunks in capture order.
        """
        with self._forward_lock:
            with self._lock:
                target = self._forward
                if target is None:
                    return None
                backlog = self._stdout_chunks[self._forwarded:]
                self._forwarded = len(self._stdout_chunks)
            target._write_stdin(backlog)
        return target

    def _finish_stdout(self) -> None:
        with self._lock:
            self._stdout_done = True
            piped = self._forward is not None
        if piped:
            self._forward_backlog()._close_stdin()

    # Stdin

    def _claim_stdin(self) -> None:
        with self._lock:
            if self._stdin_claimed:
                raise InvalidArgument(f"stdin of {self.executable} is already redirected")
            self._stdin_claimed = True

    def _write_stdin(self, chunks: List[bytes]) -> None:
        stdin = self._process.stdin if self._process is not None else None
        if stdin is None or stdin.closed:
            return
        try:
            for chunk in chunks:
                stdin.write(chunk)
            stdin.flush()
        except (BrokenPipeError, ValueError):
            # Reader exited early; the rest of the input is discarded
            logger.debug("stdin of %s closed early", self.executable)

    def _close_stdin(self) -> None:
        stdin = self._process.stdin if self._process is not None else None
        if stdin is None or stdin.closed:
            return
        try:
            stdin.close()
        except BrokenPipeError:
            pass

    def feed(self, content: str) -> 'ProcessHandle':
        """Write ``content`` to stdin and close it.

        Raises:
            InvalidArgument: If stdin is inherited or already redirected.
        """
        self._claim_stdin()
        data = content.encode(self.encoding) if isinstance(content, str) else bytes(content)

        def writer():
            self._write_stdin([data])
            self._close_stdin()

        threading.Thread(target=writer, daemon=True).start()
        return self

    def pipe_to(self, target: 'ProcessHandle') -> 'ProcessHandle':
        """Forward this process's stdout to ``target``'s stdin.

        Output produced before the call is forwarded first, so ``target``
        sees every byte in write order. Returns ``target``.

        Raises:
            InvalidArgument: If stdout is not captured or already piped, or
                ``target``'s stdin is already redirected.
        """
        if not self.capture_output or self.stdout_path:
            raise InvalidArgument(f"stdout of {self.executable} is not captured")
        if self._forward is not None:
            raise InvalidArgument(f"stdout of {self.executable} is already piped")
        target._claim_stdin()

        with self._lock:
            self._forward = target
            done = self._stdout_done

        def forwarder():
            self._forward_backlog()
            if done:
                # The drain thread finished before the pipe existed
                target._close_stdin()

        threading.Thread(target=forwarder, daemon=True).start()
        return target

    def close_stdin(self) -> None:
        """Close stdin if nobody claimed it, so the process sees EOF."""
        with self._lock:
            if self._stdin_claimed:
                return
            self._stdin_claimed = True
        self._close_stdin()

    # Completion and cancellation

    def kill(self) -> None:
        """Terminate a running process immediately; no-op otherwise."""
        with self._lock:
            if self._state is not ProcessState.RUNNING:
                return
            if self._process.poll() is not None:
                # Exited on its own; the monitor reports it as COMPLETED
                return
            self._state = ProcessState.KILLED
        logger.debug("killing pid %s", self._process.pid)
        try:
            self._process.kill()
        except OSError:
            # Already gone
            pass

    async def wait(self) -> CommandResult:
        """Wait until the process exited and its output was fully drained."""
        self.close_stdin()
        return await asyncio.wrap_future(self._future)

    def __await__(self):
        return self.wait().__await__()

    def result(self, timeout: Optional[float] = None) -> CommandResult:
        """Blocking variant of wait() for code without an event loop."""
        self.close_stdin()
        return self._future.result(timeout)

    def __repr__(self) -> str:
        return f"ProcessHandle({self.command_line!r}, state={self._state.value})"
