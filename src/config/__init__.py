"""Configuration management for the courier agent."""

from src.config.environment import load_environment_file
from src.config.loader import Config, get_default_config, load_config

__all__ = ["Config", "get_default_config", "load_config", "load_environment_file"]
