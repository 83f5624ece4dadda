"""Tests for playground configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from experiment_playground.config import PlaygroundConfig, load_config


class TestPlaygroundConfig:
    """Tests for PlaygroundConfig validation."""

    def test_defaults(self) -> None:
        config = PlaygroundConfig()
        assert config.namespace == "playground"
        assert config.store == "redis"
        assert config.redis_url == "redis://localhost:6379/0"
        assert config.load_path == Path("experiments")

    @pytest.mark.parametrize("namespace", ["", "my app"])
    def test_invalid_namespace(self, namespace: str) -> None:
        with pytest.raises(ValidationError, match="namespace"):
            PlaygroundConfig(namespace=namespace)

    def test_invalid_store(self) -> None:
        with pytest.raises(ValidationError):
            PlaygroundConfig(store="postgres")

    def test_invalid_redis_url(self) -> None:
        with pytest.raises(ValidationError, match="redis_url"):
            PlaygroundConfig(redis_url="http://localhost:6379")

    def test_socket_timeout_positive(self) -> None:
        with pytest.raises(ValidationError):
            PlaygroundConfig(socket_timeout=0)


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_valid_config(self, tmp_path: Path) -> None:
        """Relative load_path resolves against the config file directory."""
        config_path = tmp_path / "playground.yaml"
        config_path.write_text(
            dedent("""
                namespace: shop:experiments
                store: memory
                load_path: defs
            """)
        )

        config = load_config(config_path)

        assert config.namespace == "shop:experiments"
        assert config.store == "memory"
        assert config.load_path == tmp_path / "defs"

    def test_absolute_load_path_kept(self, tmp_path: Path) -> None:
        config_path = tmp_path / "playground.yaml"
        config_path.write_text(f"load_path: {tmp_path / 'abs'}\n")
        assert load_config(config_path).load_path == tmp_path / "abs"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        with pytest.raises(ValueError, match="Empty configuration"):
            load_config(config_path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("store: postgres\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(config_path)
