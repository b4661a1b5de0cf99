"""
Compose file parsing.
"""
import yaml
import logging
from pathlib import Path
from typing import List, Optional
from .utils import get_compose_path, normalize_project_name
from .exceptions import ComposeFileNotFound, ComposeParseError

logger = logging.getLogger('composedash.compose')

class ComposeConfig:
    """Reads the ordered service names out of a compose file."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize compose configuration."""
        self.path = Path(path) if path else get_compose_path()
        self.raw_config = self._load_compose_file()
        self.services: List[str] = []
        self.project_name = ''
        self._parse_config()

    def _load_compose_file(self) -> dict:
        """Load and parse compose file."""
        try:
            with open(self.path) as f:
                return yaml.safe_load(f)
        except FileNotFoundError:
            raise ComposeFileNotFound(f"Compose file not found: {self.path}")
        except IsADirectoryError:
            raise ComposeFileNotFound(f"Compose file is a directory: {self.path}")
        except yaml.YAMLError as e:
            raise ComposeParseError(f"Failed to parse compose file: {e}")

    def _parse_config(self):
        """Parse compose configuration."""
        if not isinstance(self.raw_config, dict):
            raise ComposeParseError(f"Compose file {self.path} does not contain a mapping")

        services_config = self.raw_config.get('services')
        if 'services' in self.raw_config and not isinstance(services_config, dict):
            raise ComposeParseError(f"'services' in {self.path} must be a mapping of service names")
        if isinstance(services_config, dict):
            # v2/v3 layout, services live under their own key
            self.services = [str(name) for name in services_config]
            declared_name = self.raw_config.get('name')
        else:
            # v1 layout, every top-level key is a service
            self.services = [str(name) for name in self.raw_config]
            declared_name = None

        if not self.services:
            raise ComposeParseError(f"No services defined in {self.path}")

        if declared_name:
            self.project_name = str(declared_name)
        else:
            self.project_name = normalize_project_name(self.path.resolve().parent.name)

        logger.debug(f"Parsed {len(self.services)} services from {self.path}: {self.services}")
        logger.debug(f"Project name: {self.project_name}")
