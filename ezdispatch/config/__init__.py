"""Configuration module for ezdispatch."""

from ezdispatch.config.loader import load_config, get_config_path, save_config
from ezdispatch.config.schema import GeneratorConfig

__all__ = ["GeneratorConfig", "load_config", "save_config", "get_config_path"]
