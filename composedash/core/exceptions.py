"""Custom exceptions for composedash."""
class ComposeDashError(Exception):
    """Base exception for all composedash errors."""
    pass

class ComposeFileNotFound(ComposeDashError):
    """Exception raised when compose file is not found."""
    def __init__(self, message="Compose file not found in current directory"):
        self.message = message
        super().__init__(self.message)

class ComposeParseError(ComposeDashError):
    """Exception raised when the compose file cannot be turned into a service list."""
    pass

class ContainerNotFound(ComposeDashError):
    """Exception raised when a container lookup by index or name misses."""
    def __init__(self, key):
        self.key = key
        super().__init__(f"No container matches {key!r}")
