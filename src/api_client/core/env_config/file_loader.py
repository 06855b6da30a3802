"""
Загрузка конфигурации из YAML/JSON файлов.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config import NO_RETRY, ClientConfig, RetryPolicy
from ..exceptions import ConfigurationError
from ..logging import LoggingConfig

class ConfigFileLoader:
    """
    Загрузчик конфигурации из YAML и JSON файлов.

    Формат (секция `api_client` необязательна):

        api_client:
          base_url: https://directory.example.com/api
          environment: production
          timeout_ms: 10000
          headers: {X-Client: admin}
          retry: {max_retries: 2, base_delay_ms: 200, jitter: false}   # или false
          logging: {level: DEBUG, format: json}

    Examples:
        >>> config = ConfigFileLoader.from_file("config.yaml")
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Файл не найден
            ConfigurationError: Конфиг невалидный
            ImportError: PyYAML не установлен
        """
        try:
            import yaml
        except ImportError:
            raise ImportError(
                "PyYAML is required to load YAML configs. "
                "Install it with: pip install api-client-core[yaml]"
            )

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {path}: {e}")

        return ConfigFileLoader.build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Файл не найден
            ConfigurationError: Конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON syntax in {path}: {e}")

        return ConfigFileLoader.build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> ClientConfig:
        """Автоопределение формата по расширению (.yaml, .yml, .json)."""
        suffix = Path(path).suffix.lower()

        if suffix in (".yaml", ".yml"):
            return ConfigFileLoader.from_yaml(path)
        if suffix == ".json":
            return ConfigFileLoader.from_json(path)

        raise ConfigurationError(
            f"Unsupported config file format: {suffix}. "
            f"Supported formats: .yaml, .yml, .json"
        )

    @staticmethod
    def build_config(data: Any, source: str = "<dict>") -> ClientConfig:
        """
        ClientConfig из разобранного словаря.

        Raises:
            ConfigurationError: Конфиг невалидный
        """
        if not data:
            raise ConfigurationError(f"Empty config: {source}")

        config_data = data.get("api_client", data) if isinstance(data, dict) else data
        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        kwargs: Dict[str, Any] = {}
        for key in ("base_url", "environment", "timeout_ms", "cache_ttl_ms"):
            if key in config_data:
                kwargs[key] = config_data[key]

        try:
            if "headers" in config_data:
                headers = {"Content-Type": "application/json"}
                headers.update(_section(config_data, "headers", source))
                kwargs["headers"] = headers

            if "retry" in config_data:
                if config_data["retry"] is False:
                    kwargs["retry"] = NO_RETRY
                else:
                    retry_data = dict(_section(config_data, "retry", source))
                    if "retryable_statuses" in retry_data:
                        retry_data["retryable_statuses"] = frozenset(retry_data["retryable_statuses"])
                    kwargs["retry"] = RetryPolicy(**retry_data)

            if "logging" in config_data:
                kwargs["logging"] = LoggingConfig.create(**_section(config_data, "logging", source))

            return ClientConfig(**kwargs)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid config in {source}: {e}") from e


def _section(config_data: Dict[str, Any], name: str, source: str) -> Dict[str, Any]:
    value = config_data[name]
    if not isinstance(value, dict):
        raise ConfigurationError(f"{name} must be a dictionary in {source}")
    return value


def load_config_file(path: Optional[Union[str, Path]] = None) -> Optional[ClientConfig]:
    """
    Конфиг из файла, путь к которому задан аргументом или API_CLIENT_CONFIG_FILE.

    Returns:
        ClientConfig или None, если путь не задан
    """
    path = path or os.getenv("API_CLIENT_CONFIG_FILE")
    if not path:
        return None
    return ConfigFileLoader.from_file(path)
