"""I/O functions for saving and loading vegetation configurations."""

from .serialize import save_config, load_config

__all__ = ["save_config", "load_config"]
