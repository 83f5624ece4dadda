"""YAML configuration loader."""
from pathlib import Path

import yaml

from .schemas import PlaygroundConfig


def load_config(config_path: str | Path) -> PlaygroundConfig:
    """
    Read playground settings from a YAML file.

    A relative load_path is taken relative to the directory holding the
    configuration file, so the same file works from any working directory.

    Args:
        config_path: Path to the YAML file

    Returns:
        Validated PlaygroundConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or fails validation
        yaml.YAMLError: If the YAML cannot be parsed
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    raw = yaml.safe_load(config_path.read_text())
    if raw is None:
        raise ValueError(f"Empty configuration file: {config_path}")

    try:
        config = PlaygroundConfig.from_dict(raw)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    if config.load_path.is_absolute():
        return config
    return config.model_copy(update={"load_path": config_path.parent / config.load_path})
