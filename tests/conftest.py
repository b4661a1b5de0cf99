#!/usr/bin/env python3
"""
Pytest configuration and fixtures for the composedash tests.

Subprocesses never run here: lifecycle commands go through a recording
runner, and log-follow processes are fake processes whose output streams
are fed by the tests.
"""

import io
import sys
import asyncio
import pytest
from pathlib import Path
from typing import Dict, List, Tuple

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console

from composedash.core.registry import ContainerRegistry
from composedash.core.runner import RunResult, Verb
from composedash.ui.console import DashboardConsole


SETTING_VARIABLES = (
    'COMPOSE_FILE',
    'COMPOSE_PROJECT_NAME',
    'COMPOSEDASH_RUNTIME',
    'COMPOSEDASH_COMPOSE_COMMAND',
    'COMPOSEDASH_NAME_FORMAT',
    'COMPOSEDASH_LOG_DIR',
)

PS_OUTPUT = (
    "CONTAINER ID        IMAGE                               COMMAND                  CREATED             STATUS              PORTS               NAMES\n"
    "4c01db0b339c        learn_web                           \"npm start\"              2 minutes ago       Up 2 minutes        0.0.0.0:80->80/tcp  learn_web_1\n"
)

COMPOSE_V1 = """\
web:
  build: .
  ports:
    - "80:80"
db:
  image: postgres
cache:
  image: redis
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep settings variables (and .env side effects) out of every test."""
    for name in SETTING_VARIABLES:
        # setenv first so monkeypatch restores the variable's absence afterwards
        monkeypatch.setenv(name, '')
        monkeypatch.delenv(name)
    monkeypatch.setenv('COMPOSEDASH_LOG_DIR', str(tmp_path / 'logs'))


@pytest.fixture
def compose_file(tmp_path):
    """Write a v1 compose file listing web, db and cache."""
    project_dir = tmp_path / 'learn'
    project_dir.mkdir()
    path = project_dir / 'docker-compose.yml'
    path.write_text(COMPOSE_V1)
    return path


@pytest.fixture
def registry():
    return ContainerRegistry(['web', 'db', 'cache'])


@pytest.fixture
def rich_console():
    """A rich console writing plain text into memory."""
    return Console(file=io.StringIO(), width=120, color_system=None, force_terminal=False)


@pytest.fixture
def dashboard(rich_console):
    return DashboardConsole(rich_console)


def output_of(dashboard: DashboardConsole) -> str:
    return dashboard.console.file.getvalue()


async def settle(rounds: int = 20):
    """Let pending tasks on the loop run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeRunner:
    """Records lifecycle commands instead of running them."""

    def __init__(self):
        self.calls: List[Tuple[Verb, str]] = []
        self.exit_codes: Dict[Tuple[Verb, str], int] = {}
        self.ps_calls = 0
        self.ps_result = RunResult(0, PS_OUTPUT)

    def qualified_name(self, container):
        return f"learn_{container.name}_1"

    def logs_command(self, container):
        return ['docker', 'logs', '-f', self.qualified_name(container)]

    def run(self, container, verb):
        self.calls.append((verb, container.name))
        code = self.exit_codes.get((verb, container.name), 0)
        return RunResult(code, f"{verb.value} {container.name} output\n")

    def process_list(self):
        self.ps_calls += 1
        return self.ps_result


class FakeStreams:
    """Records attach/detach calls in order."""

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def attach(self, container):
        self.events.append(('attach', container.name))

    def detach(self, container):
        self.events.append(('detach', container.name))

    def detach_all(self):
        self.events.append(('detach_all', ''))


class FakeProcess:
    """Stand-in for an asyncio subprocess with test-fed output streams."""

    def __init__(self, argv):
        self.argv = list(argv)
        self.stdout = asyncio.StreamReader()
        self.stderr = asyncio.StreamReader()
        self.returncode = None
        self.terminated = False
        self._exited = asyncio.Event()

    def emit(self, data: bytes, stream: str = 'stdout'):
        getattr(self, stream).feed_data(data)

    def exit(self, code: int = 0):
        self.stdout.feed_eof()
        self.stderr.feed_eof()
        self.returncode = code
        self._exited.set()

    def terminate(self):
        # Only records the request; tests decide when the process goes away
        self.terminated = True

    async def wait(self):
        await self._exited.wait()
        return self.returncode


class FakeSpawner:
    """Replacement for asyncio.create_subprocess_exec."""

    def __init__(self):
        self.processes: List[FakeProcess] = []
        self.kwargs: List[dict] = []

    async def __call__(self, *argv, **kwargs):
        process = FakeProcess(argv)
        self.processes.append(process)
        self.kwargs.append(kwargs)
        return process

    def exit_all(self, code: int = -15):
        for process in self.processes:
            if process.returncode is None:
                process.exit(code)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def streams():
    return FakeStreams()


@pytest.fixture
def spawner():
    return FakeSpawner()
