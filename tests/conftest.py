"""Shared fixtures for the scriptshell test suite."""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scriptshell import default


@pytest.fixture
def test_folder(tmp_path):
    """A small folder tree with JSON, XML and CSV fixtures.

    test/
        TestA.txt              {"name": "Joe Smith", "age": 42}
        TestB.txt              <TestRecord><Name>Joe Smith</Name><Age>42</Age></TestRecord>
        people.csv             joe,42
        subfolder/TestC.txt
        subfolder/subfolder2/TestE.txt
    """
    root = tmp_path / 'test'
    sub = root / 'subfolder'
    sub2 = sub / 'subfolder2'
    sub2.mkdir(parents=True)

    (root / 'TestA.txt').write_text(json.dumps({'name': 'Joe Smith', 'age': 42}))
    (root / 'TestB.txt').write_text(
        '<TestRecord><Name>Joe Smith</Name><Age>42</Age></TestRecord>')
    (root / 'people.csv').write_text('joe,42')
    (sub / 'TestC.txt').write_text('C')
    (sub2 / 'TestE.txt').write_text('E')
    return str(root)


@pytest.fixture
def shared_shell_reset():
    """Drop the module-level default session before and after a test."""
    default._shell = None
    yield
    default._shell = None
