#!/usr/bin/env python3
"""
Tests for the command line interface.
"""

import pytest
from click.testing import CliRunner
from conftest import PS_OUTPUT
from composedash import VERSION
from composedash import composedash as app_module
from composedash.composedash import cli, ComposeDash
from composedash.core.runner import ProcessRunner, RunResult


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def started(monkeypatch):
    """Replace the event loop run with one that records what would start."""
    names = []

    async def fake_run(self, start=()):
        names.extend(c.name for c in start)

    monkeypatch.setattr(ComposeDash, 'run', fake_run)
    return names


class TestCli:
    """Test CLI entry points and startup failures."""

    def test_version(self, cli_runner):
        result = cli_runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert VERSION in result.output

    def test_list(self, cli_runner, compose_file):
        result = cli_runner.invoke(cli, ['--file', str(compose_file), 'list'])
        assert result.exit_code == 0, result.output
        for name in ('learn_web_1', 'learn_db_1', 'learn_cache_1'):
            assert name in result.output
        assert 'green' in result.output

    def test_list_with_project_name(self, cli_runner, compose_file):
        result = cli_runner.invoke(cli, ['-f', str(compose_file), '-p', 'shop', 'list'])
        assert result.exit_code == 0, result.output
        assert 'shop_db_1' in result.output

    def test_missing_compose_file(self, cli_runner, tmp_path):
        result = cli_runner.invoke(cli, ['--file', str(tmp_path / 'nope.yml'), 'list'])
        assert result.exit_code == 1
        assert 'Error:' in result.output

    def test_no_compose_file_discovered(self, cli_runner, tmp_path, monkeypatch, started):
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(cli, ['--start', 'all'])
        assert result.exit_code == 1
        assert 'No compose file found' in result.output
        assert started == []

    def test_malformed_compose_file(self, cli_runner, tmp_path, started):
        path = tmp_path / 'docker-compose.yml'
        path.write_text("web: [unclosed\n")
        result = cli_runner.invoke(cli, ['--file', str(path), '--start', 'all'])
        assert result.exit_code == 1
        assert 'Failed to parse compose file' in result.output
        assert started == []

    def test_ps(self, cli_runner, compose_file, monkeypatch):
        monkeypatch.setattr(ProcessRunner, 'process_list', lambda self: RunResult(0, PS_OUTPUT))
        result = cli_runner.invoke(cli, ['--file', str(compose_file), 'ps'])
        assert result.exit_code == 0, result.output
        assert 'learn_web_1' in result.output
        assert 'IMAGE' not in result.output

    def test_ps_failure(self, cli_runner, compose_file, monkeypatch):
        monkeypatch.setattr(
            ProcessRunner, 'process_list',
            lambda self: RunResult(1, 'Cannot connect to the Docker daemon\n'),
        )
        result = cli_runner.invoke(cli, ['--file', str(compose_file), 'ps'])
        assert result.exit_code == 1
        assert 'Cannot connect to the Docker daemon' in result.output


class TestStartup:
    """Test which containers are started before the dashboard opens."""

    @pytest.mark.parametrize('mode, expected', [
        ('all', ['web', 'db', 'cache']),
        ('none', []),
    ])
    def test_start_option(self, cli_runner, compose_file, started, mode, expected):
        result = cli_runner.invoke(cli, ['--file', str(compose_file), '--start', mode])
        assert result.exit_code == 0, result.output
        assert started == expected

    def test_ask_all(self, cli_runner, compose_file, started):
        result = cli_runner.invoke(cli, ['--file', str(compose_file)], input="all\n")
        assert result.exit_code == 0, result.output
        assert 'with these containers' in result.output
        assert started == ['web', 'db', 'cache']

    def test_choose(self, cli_runner, compose_file, started):
        result = cli_runner.invoke(
            cli, ['--file', str(compose_file), '--start', 'choose'], input="y\nn\ny\n"
        )
        assert result.exit_code == 0, result.output
        assert started == ['web', 'cache']

    def test_writes_log_file(self, cli_runner, compose_file, tmp_path, started):
        cli_runner.invoke(cli, ['--file', str(compose_file), '--start', 'none'])
        assert (tmp_path / 'logs' / 'composedash.log').exists()

    def test_interrupt_at_prompt_exits_cleanly(self, cli_runner, compose_file, started, monkeypatch):
        def interrupted(dash, start_mode=None):
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, 'choose_containers', interrupted)
        result = cli_runner.invoke(cli, ['--file', str(compose_file)])
        assert result.exit_code == 0, result.output
        assert started == []
