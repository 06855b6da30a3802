"""
Environment Configuration Examples

Loads ClientConfig from API_CLIENT_* variables, .env profiles and config files,
and wires collection services with bearer auth.
"""

import asyncio
import os

from api_client import BearerTokenAuth, ConfigFileLoader, RequestClient, create_services, load_from_env


def from_environment():
    """Config from environment variables."""
    print("\n=== From environment ===")

    os.environ["API_CLIENT_TIMEOUT_MS"] = "10000"
    os.environ["API_CLIENT_RETRY_MAX_RETRIES"] = "5"
    os.environ["API_CLIENT_LOG_ENABLE_CONSOLE"] = "true"

    config = load_from_env()
    print(f"Base URL: {config.base_url}")
    print(f"Timeout: {config.timeout_ms}ms")
    print(f"Retry: {config.retry}")
    return config


def from_file():
    """Config from a YAML file, if one exists."""
    print("\n=== From file ===")

    if not os.path.exists("api_client.yaml"):
        print("api_client.yaml not found, skipping")
        return None

    config = ConfigFileLoader.from_file("api_client.yaml")
    print(f"Loaded: {config}")
    return config


async def with_services(config):
    """Collection services sharing one client and cache."""
    print("\n=== Services ===")

    auth = BearerTokenAuth(lambda: os.getenv("API_TOKEN"))

    async with RequestClient(config) as client:
        services = create_services(client, auth=auth)

        resources = await services.resources.get_all({"tradition": "zen", "tag": None})
        print(f"Resources cached: {resources['cached']}")

        teachers = await services.traditions.get_teachers("zen")
        print(f"Teachers: {teachers}")


if __name__ == "__main__":
    config = from_file() or from_environment()
    asyncio.run(with_services(config))
