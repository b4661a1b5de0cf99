"""
Runtime settings for composedash.

Settings are resolved from explicit (command line) values first, then the
environment, then defaults. A ``.env`` file next to the compose file is
loaded into the environment beforehand, without overriding variables that
are already set.
"""
import os
import shlex
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .utils import get_compose_path, DEFAULT_LOG_DIR

logger = logging.getLogger('composedash.config')

DEFAULT_RUNTIME = 'docker'
DEFAULT_COMPOSE_COMMAND = 'docker-compose'
DEFAULT_NAME_FORMAT = '{project}_{service}_1'


@dataclass
class Settings:
    """Resolved configuration for one dashboard run."""
    compose_file: Path
    project_name: Optional[str] = None
    runtime: str = DEFAULT_RUNTIME
    compose_command: Tuple[str, ...] = (DEFAULT_COMPOSE_COMMAND,)
    name_format: str = DEFAULT_NAME_FORMAT
    log_dir: Path = field(default=DEFAULT_LOG_DIR)


def load_settings(
    compose_file: Optional[str] = None,
    project_name: Optional[str] = None,
    runtime: Optional[str] = None,
    compose_command: Optional[str] = None,
) -> Settings:
    """
    Build Settings from explicit values, the environment and a ``.env`` file.

    Args:
        compose_file: Path to the compose file. Falls back to ``COMPOSE_FILE``
            and then to discovery in the current directory.
        project_name: Compose project name. Falls back to ``COMPOSE_PROJECT_NAME``;
            left as None when unset so the compose file can supply it.
        runtime: Container runtime executable used for ``logs`` and ``ps``.
        compose_command: Compose executable, split shell-style
            (``"docker compose"`` becomes two arguments).

    Raises:
        ComposeFileNotFound: If no compose file can be located.
    """
    env_compose_file = compose_file or os.environ.get('COMPOSE_FILE')
    if env_compose_file:
        path = Path(env_compose_file)
    else:
        path = get_compose_path()

    env_path = path.resolve().parent / '.env'
    if env_path.is_file():
        load_dotenv(env_path, override=False)
        logger.debug(f"Loaded environment from {env_path}")

    command = compose_command or os.environ.get('COMPOSEDASH_COMPOSE_COMMAND', DEFAULT_COMPOSE_COMMAND)
    log_dir = os.environ.get('COMPOSEDASH_LOG_DIR')

    return Settings(
        compose_file=path,
        project_name=project_name or os.environ.get('COMPOSE_PROJECT_NAME') or None,
        runtime=runtime or os.environ.get('COMPOSEDASH_RUNTIME', DEFAULT_RUNTIME),
        compose_command=tuple(shlex.split(command)),
        name_format=os.environ.get('COMPOSEDASH_NAME_FORMAT', DEFAULT_NAME_FORMAT),
        log_dir=Path(log_dir) if log_dir else DEFAULT_LOG_DIR,
    )
