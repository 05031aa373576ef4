#!/usr/bin/env python3
"""
Test suite for result projections.

Checks which projections honor the throw-on-error policy and how output is
turned into text, JSON, XML and files.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dataclasses import dataclass, field
from typing import List, Optional
from xml.etree import ElementTree

import pytest

from scriptshell import Shell, as_string
from scriptshell.errors import CommandFailed, DeserializationFailed, LaunchFailure
from scriptshell.process import ProcessHandle
from scriptshell.structured import JsonKind, JsonValue

from helpers import CAT, PYTHON, write


@dataclass
class TestRecord:
    __test__ = False

    name: str = ''
    age: int = 0


@dataclass
class Inventory:
    owner: str
    items: List[str] = field(default_factory=list)
    note: Optional[str] = None


class TestFailurePolicy:
    """Test which projections raise on failure."""

    def setup_method(self):
        self.shell = Shell()

    @pytest.mark.asyncio
    async def test_as_result_never_raises(self):
        result = await self.shell.run(PYTHON, '-c', write('o', 'e', 2)).as_result()
        assert result.exit_code == 2
        assert result.standard_output == 'o'
        assert result.standard_error == 'e'

    @pytest.mark.asyncio
    async def test_as_string_raises_with_policy_on(self):
        with pytest.raises(CommandFailed) as info:
            await self.shell.run(PYTHON, '-c', write('', 'broken\n', 4)).as_string()
        assert info.value.exit_code == 4
        assert str(info.value) == 'broken'
        assert info.value.result.standard_error == 'broken\n'

    @pytest.mark.asyncio
    async def test_message_without_stderr(self):
        with pytest.raises(CommandFailed, match='exited with code 9'):
            await self.shell.run(PYTHON, '-c', write(exit_code=9)).as_string()

    @pytest.mark.asyncio
    async def test_as_string_with_policy_off(self):
        self.shell.throw_on_error = False
        text = await self.shell.run(PYTHON, '-c', write('partial', 'e', 1)).as_string()
        assert text == 'partial'

    @pytest.mark.asyncio
    async def test_policy_captured_at_construction(self):
        """Changing the policy after building a command does not affect it."""
        command = self.shell.run(PYTHON, '-c', write(exit_code=1))
        self.shell.throw_on_error = False
        with pytest.raises(CommandFailed):
            await command.as_string()

    @pytest.mark.asyncio
    async def test_launch_failure(self):
        with pytest.raises(LaunchFailure) as info:
            await self.shell.run('definitely-not-a-real-program-xyz').as_string()
        assert 'definitely-not-a-real-program-xyz' in str(info.value)
        assert info.value.result.launch_error

    @pytest.mark.asyncio
    async def test_launch_failure_visible_in_result(self):
        result = await self.shell.run('definitely-not-a-real-program-xyz').as_result()
        assert result.exit_code == 127
        assert not result.success

    @pytest.mark.asyncio
    async def test_bare_handle(self):
        """A handle without a session raises on failure."""
        handle = ProcessHandle(PYTHON, ['-c', write(exit_code=1)]).launch()
        with pytest.raises(CommandFailed):
            await as_string(handle)

    @pytest.mark.asyncio
    async def test_log(self, caplog):
        caplog.set_level('INFO', logger='scriptshell')
        await self.shell.run(PYTHON, '-c', write('logged')).as_result(log=True)
        assert 'logged' in caplog.text


class TestJson:
    """Test as_json()."""

    def setup_method(self):
        self.shell = Shell()

    @pytest.mark.asyncio
    async def test_typed(self, test_folder):
        self.shell.change_folder(test_folder)
        record = await self.shell.read_file('TestA.txt').as_json(TestRecord)
        assert record == TestRecord('Joe Smith', 42)

    @pytest.mark.asyncio
    async def test_untyped(self, test_folder):
        self.shell.change_folder(test_folder)
        value = await self.shell.read_file('TestA.txt').as_json()
        assert isinstance(value, JsonValue)
        assert value.kind is JsonKind.OBJECT
        assert value['name'].as_str() == 'Joe Smith'
        assert value['age'].as_int() == 42

    @pytest.mark.asyncio
    async def test_nested_types(self):
        data = '{"owner": "ann", "items": ["a", "b"]}'
        inventory = await self.shell.echo_text(data).as_json(Inventory)
        assert inventory == Inventory('ann', ['a', 'b'], None)

    @pytest.mark.asyncio
    async def test_list_target(self):
        values = await self.shell.echo_text('[1, 2, 3]').as_json(List[int])
        assert values == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_invalid_json_raises_even_with_policy_off(self):
        self.shell.throw_on_error = False
        with pytest.raises(DeserializationFailed) as info:
            await self.shell.echo_text('not json').as_json()
        assert info.value.result is not None

    @pytest.mark.asyncio
    async def test_wrong_shape(self):
        with pytest.raises(DeserializationFailed):
            await self.shell.echo_text('{"name": 5}').as_json(TestRecord)


class TestXml:
    """Test as_xml()."""

    def setup_method(self):
        self.shell = Shell()

    @pytest.mark.asyncio
    async def test_typed(self, test_folder):
        self.shell.change_folder(test_folder)
        record = await self.shell.read_file('TestB.txt').as_xml(TestRecord)
        assert record == TestRecord('Joe Smith', 42)

    @pytest.mark.asyncio
    async def test_untyped(self, test_folder):
        self.shell.change_folder(test_folder)
        root = await self.shell.read_file('TestB.txt').as_xml()
        assert isinstance(root, ElementTree.Element)
        assert root.tag == 'TestRecord'
        assert root.findtext('Name') == 'Joe Smith'

    @pytest.mark.asyncio
    async def test_attributes(self):
        record = await self.shell.echo_text('<r name="Ann" age="7"/>').as_xml(TestRecord)
        assert record == TestRecord('Ann', 7)

    @pytest.mark.asyncio
    async def test_invalid_xml(self):
        self.shell.throw_on_error = False
        with pytest.raises(DeserializationFailed):
            await self.shell.echo_text('<open>').as_xml()


class TestFiles:
    """Test as_file() and reading files through commands."""

    @pytest.mark.asyncio
    async def test_end_to_end_read(self, test_folder):
        shell = Shell(test_folder)
        assert await shell.read_file('people.csv').as_string() == 'joe,42'

    @pytest.mark.asyncio
    async def test_end_to_end_read_piped(self, test_folder):
        """Reading a file through a pipe yields its exact content."""
        shell = Shell(test_folder)
        pipeline = shell.read_file('people.csv') | shell.run(PYTHON, '-c', CAT)
        assert await pipeline.as_string() == 'joe,42'

    @pytest.mark.asyncio
    async def test_json_through_pipe(self, test_folder):
        shell = Shell(test_folder)
        record = await (shell.read_file('TestA.txt') | shell.run(PYTHON, '-c', CAT)).as_json(TestRecord)
        assert record == TestRecord('Joe Smith', 42)

    @pytest.mark.asyncio
    async def test_missing_file(self, test_folder):
        shell = Shell(test_folder)
        result = await shell.read_file('missing.csv').as_result()
        assert not result.success
        assert result.standard_output == ''
        assert result.standard_error

    @pytest.mark.asyncio
    async def test_as_file_uses_command_folder(self, test_folder):
        """Relative targets resolve against the folder the command ran in."""
        shell = Shell(test_folder)
        command = shell.read_file('people.csv')
        shell.change_folder('subfolder')

        result = await command.as_file('copy.csv', 'copy.err')
        assert result.success
        with open(os.path.join(test_folder, 'copy.csv')) as f:
            assert f.read() == 'joe,42'
        assert os.path.exists(os.path.join(test_folder, 'copy.err'))
        assert not os.path.exists(os.path.join(test_folder, 'subfolder', 'copy.csv'))

    @pytest.mark.asyncio
    async def test_as_file_does_not_raise(self, tmp_path):
        shell = Shell(str(tmp_path))
        result = await shell.run(PYTHON, '-c', write('o', 'e', 3)).as_file('out.txt')
        assert result.exit_code == 3
        assert (tmp_path / 'out.txt').read_text() == 'o'
