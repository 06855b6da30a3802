"""
Environment and file configuration for the API client.

Example:
    >>> from api_client.core.env_config import load_from_env, ConfigFileLoader
    >>>
    >>> config = load_from_env()                      # .env + API_CLIENT_* variables
    >>> config = load_from_env(profile="production")  # .env.production
    >>> config = ConfigFileLoader.from_file("config.yaml")
"""

from .file_loader import ConfigFileLoader, load_config_file
from .loader import PROFILES, get_env_file_path, load_from_env
from .validator import ApiClientSettings

__all__ = [
    "load_from_env",
    "get_env_file_path",
    "PROFILES",
    "ConfigFileLoader",
    "load_config_file",
    "ApiClientSettings",
]
