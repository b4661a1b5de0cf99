"""composedash - Interactive terminal dashboard for compose-defined containers."""
from composedash.composedash import VERSION, cli

__all__ = ['VERSION', 'cli']
