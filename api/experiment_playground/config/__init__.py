"""Configuration loading and validation."""
from .loader import load_config
from .schemas import PlaygroundConfig

__all__ = [
    "PlaygroundConfig",
    "load_config",
]
