#!/usr/bin/env python3
"""
Tests for the bash-style and cmd-style verbs and the shared default session.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from scriptshell import Shell, bash_style, cmd_style, default
from scriptshell.errors import EmptyStack, NotFound


class TestBashStyle:
    """Test bash verbs against a session."""

    def test_navigation(self, test_folder):
        shell = Shell(test_folder)
        bash_style.cd(shell, 'subfolder')
        assert bash_style.cwd(shell) == os.path.join(test_folder, 'subfolder')
        bash_style.pushd(shell, 'subfolder2')
        bash_style.popd(shell)
        assert bash_style.cwd(shell) == os.path.join(test_folder, 'subfolder')

    def test_files(self, test_folder):
        shell = Shell(test_folder)
        bash_style.mkdir(shell, 'new')
        bash_style.cp(shell, 'people.csv', 'new')
        bash_style.mv(shell, os.path.join('new', 'people.csv'), os.path.join('new', 'moved.csv'))
        names = [os.path.basename(p) for p in bash_style.ls(shell, '*.csv', recursive=True)]
        assert sorted(names) == ['moved.csv', 'people.csv']

        bash_style.rm(shell, os.path.join('new', 'moved.csv'))
        bash_style.rmdir(shell, 'new')
        assert not os.path.exists(os.path.join(test_folder, 'new'))

    @pytest.mark.asyncio
    async def test_cat(self, test_folder):
        assert await bash_style.cat(Shell(test_folder), 'people.csv').as_string() == 'joe,42'


class TestCmdStyle:
    """Test cmd verbs against a session."""

    def test_cd_without_path_reports(self, test_folder):
        shell = Shell(test_folder)
        assert cmd_style.cd(shell) == test_folder
        assert cmd_style.cd(shell, 'subfolder') is shell

    def test_folders(self, test_folder):
        shell = Shell(test_folder)
        cmd_style.md(shell, 'a')
        cmd_style.mkdir(shell, os.path.join('a', 'b'))
        assert [os.path.basename(p) for p in cmd_style.dir(shell, 'a')] == ['a']
        cmd_style.rd(shell, 'a', recursive=True)
        assert not os.path.exists(os.path.join(test_folder, 'a'))

    def test_files(self, test_folder):
        shell = Shell(test_folder)
        cmd_style.copy(shell, 'people.csv', 'one.csv')
        cmd_style.rename(shell, 'one.csv', 'two.csv')
        cmd_style.move(shell, 'two.csv', 'subfolder')
        cmd_style.del_(shell, os.path.join('subfolder', 'two.csv'))
        cmd_style.copy(shell, 'people.csv', 'three.csv')
        cmd_style.erase(shell, 'three.csv')
        cmd_style.copy(shell, 'people.csv', 'four.csv')
        cmd_style.delete(shell, 'four.csv')
        assert sorted(os.listdir(test_folder)) == ['TestA.txt', 'TestB.txt', 'people.csv', 'subfolder']

    @pytest.mark.asyncio
    async def test_type(self, test_folder):
        assert await cmd_style.type_(Shell(test_folder), 'people.csv').as_string() == 'joe,42'


class TestDefaultSession:
    """Test the module-level convenience functions."""

    def test_lazy_shared_session(self, shared_shell_reset):
        assert default._shell is None
        shell = default.get_shell()
        assert default.get_shell() is shell
        assert default.cwd() == os.getcwd()

    def test_policy_and_echo(self, shared_shell_reset):
        default.set_throw_on_error(False)
        default.set_echo(True)
        assert not default.get_throw_on_error()
        assert default.get_echo()
        assert default.reset_shell().throw_on_error

    def test_navigation(self, shared_shell_reset, test_folder):
        default.reset_shell(test_folder)
        default.pushd('subfolder')
        assert default.cd() == os.path.join(test_folder, 'subfolder')
        default.popd()
        assert default.cwd() == test_folder
        with pytest.raises(EmptyStack):
            default.popd()
        with pytest.raises(NotFound):
            default.chdir('missing')

    def test_file_verbs(self, shared_shell_reset, test_folder):
        default.reset_shell(test_folder)
        default.md('x')
        default.copy('people.csv', 'x')
        default.copy_folder('x', 'y')
        default.move(os.path.join('y', 'people.csv'), os.path.join('y', 'p.csv'))
        default.rename('y', 'z')
        default.rm(os.path.join('z', 'p.csv'))
        default.rd('z')
        default.rmdir('x', recursive=True)
        assert sorted(os.path.basename(p) for p in default.ls()) == \
            ['TestA.txt', 'TestB.txt', 'people.csv', 'subfolder']
        assert list(default.dir('*.csv')) == [default.resolve_path('people.csv')]

    @pytest.mark.asyncio
    async def test_commands(self, shared_shell_reset, test_folder):
        default.reset_shell(test_folder)
        assert await default.cat('people.csv').as_string() == 'joe,42'
        assert await default.type_('people.csv').as_string() == 'joe,42'
        assert await default.read_file('people.csv').as_string() == 'joe,42'
        assert await default.echo('hi').as_string() == 'hi'
        assert (await default.run(sys.executable, '-c', 'print(1)').as_string()).strip() == '1'
        assert (await default.cmd('echo ok').as_string()).strip() == 'ok'
