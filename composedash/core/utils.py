"""Utility functions for composedash."""
import re
import logging
from pathlib import Path

from rich.logging import RichHandler

from .exceptions import ComposeFileNotFound

COMPOSE_FILENAMES = (
    'docker-compose.yml',
    'docker-compose.yaml',
    'compose.yaml',
    'compose.yml',
)

DEFAULT_LOG_DIR = Path.home() / '.composedash' / 'logs'

def setup_logging(debug=False, log_dir=None, console=None):
    """Set up logging configuration."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / 'composedash.log'

    # Records go above the status bar only when debugging
    if debug:
        stream_handler = RichHandler(console=console, show_path=False)
        stream_handler.setFormatter(logging.Formatter('%(name)s: %(message)s'))
    else:
        stream_handler = logging.NullHandler()

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            stream_handler
        ],
        force=True
    )
    return log_file

def get_compose_path(directory=None):
    """Find the compose file in the given (or current) directory."""
    directory = Path(directory) if directory else Path.cwd()
    for filename in COMPOSE_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    raise ComposeFileNotFound(
        f"No compose file found in {directory} (looked for {', '.join(COMPOSE_FILENAMES)})"
    )

def normalize_project_name(name):
    """Normalize a project name the way docker-compose v1 does."""
    return re.sub(r'[^a-z0-9]', '', name.lower())
