"""Configuration loading utilities."""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.utils.exceptions import ConfigError
from ezdispatch.utils.helpers import camel_to_snake, snake_to_camel

CONFIG_FILE_NAME = "ezdispatch.json"


def get_config_path(directory: Path | None = None) -> Path:
    """Get the default configuration file path (``./ezdispatch.json``)."""
    return (directory or Path.cwd()) / CONFIG_FILE_NAME


def load_config(config_path: Path | None = None) -> GeneratorConfig:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object. Environment variables still apply on top
        of defaults for keys the file does not set.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config file must contain a JSON object")
            cfg = GeneratorConfig(**convert_keys(data))
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            raise ConfigError(
                f"Failed to load config from {path}: {e}. "
                "Fix the file or remove it to use defaults.",
                path=str(path),
            ) from e
        logger.debug(f"Loaded generator config from {path}")
        return cfg

    if config_path is not None:
        raise ConfigError(f"Config file not found: {path}", path=str(path))

    return GeneratorConfig()


def save_config(config: GeneratorConfig, config_path: Path | None = None) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return path


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data
