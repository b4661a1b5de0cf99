"""Lifecycle command execution against the compose and container runtime CLIs."""
import os
import logging
import subprocess
from enum import Enum
from pathlib import Path
from typing import List, NamedTuple, Sequence

from .config import Settings, DEFAULT_NAME_FORMAT
from .registry import Container

logger = logging.getLogger('composedash.runner')


class Verb(Enum):
    """Lifecycle commands that can be applied to a single container."""
    START = 'start'
    STOP = 'stop'
    RESTART = 'restart'
    BUILD = 'build'
    REMOVE = 'remove'
    KILL = 'kill'

    @property
    def args(self):
        """Compose CLI arguments for this verb."""
        if self is Verb.REMOVE:
            return ('rm', '-f')
        return (self.value,)


class RunResult(NamedTuple):
    exit_code: int
    output: str


class ProcessRunner:
    """Thin blocking wrapper around the compose and runtime command lines."""

    def __init__(
        self,
        compose_file: Path,
        project_name: str,
        runtime: str = 'docker',
        compose_command: Sequence[str] = ('docker-compose',),
        name_format: str = DEFAULT_NAME_FORMAT,
    ):
        self.compose_file = Path(compose_file)
        self.project_name = project_name
        self.runtime = runtime
        self.compose_command = tuple(compose_command)
        self.name_format = name_format
        self.working_dir = self.compose_file.resolve().parent

    @classmethod
    def from_settings(cls, settings: Settings, project_name: str) -> 'ProcessRunner':
        return cls(
            compose_file=settings.compose_file,
            project_name=project_name,
            runtime=settings.runtime,
            compose_command=settings.compose_command,
            name_format=settings.name_format,
        )

    def qualified_name(self, container: Container) -> str:
        """Runtime-level name of the container's first instance."""
        return self.name_format.format(project=self.project_name, service=container.name)

    def command(self, container: Container, verb: Verb) -> List[str]:
        return [
            *self.compose_command,
            '-f', str(self.compose_file),
            '-p', self.project_name,
            *verb.args,
            container.name,
        ]

    def logs_command(self, container: Container) -> List[str]:
        return [self.runtime, 'logs', '-f', self.qualified_name(container)]

    def run(self, container: Container, verb: Verb) -> RunResult:
        """Run a lifecycle verb against a container and wait for it to finish."""
        return self._execute(self.command(container, verb))

    def process_list(self) -> RunResult:
        return self._execute([self.runtime, 'ps'])

    def _execute(self, argv: List[str]) -> RunResult:
        logger.debug(f"Running: {argv}")
        try:
            process = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                env=os.environ.copy(),
                cwd=self.working_dir,
            )
        except OSError as e:
            logger.error(f"Failed to execute {argv[0]}: {e}")
            return RunResult(127, f"Failed to execute {argv[0]}: {e}")

        if process.returncode != 0:
            logger.warning(f"Command {argv} exited with code {process.returncode}")
        return RunResult(process.returncode, process.stdout or '')
