"""Portable child processes used by the tests (the running interpreter)."""

import sys

PYTHON = sys.executable

UPPER = 'import sys; sys.stdout.write(sys.stdin.read().upper())'
PRINT_CWD = 'import os; print(os.getcwd())'
SLEEP = 'import time; time.sleep(30)'


def print_env(name):
    return f'import os; print(os.environ.get({name!r}, ""))'


def write(stdout='', stderr='', exit_code=0):
    return (f'import sys; sys.stdout.write({stdout!r}); '
            f'sys.stderr.write({stderr!r}); sys.exit({exit_code})')


def repeat(char, count, stream='stdout'):
    return f'import sys; sys.{stream}.write({char!r} * {count})'

CAT = 'import sys; sys.stdout.buffer.write(sys.stdin.buffer.read())'
RAW_BYTES = 'import sys; sys.stdout.buffer.write(b"ok\\xff\\xfe")'


def write_in_two_parts(first, second, pause=0.5):
    return (f'import sys, time; sys.stdout.write({first!r}); sys.stdout.flush(); '
            f'time.sleep({pause}); sys.stdout.write({second!r})')
