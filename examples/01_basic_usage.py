"""
Basic API Client Usage Examples

Demonstrates cached GET, mutations with cache invalidation and error handling.
Expects the directory backend on http://localhost:5000/api.
"""

import asyncio

from api_client import ApiError, ClientConfig, NO_RETRY, RequestClient, handle_api_error


async def cached_get(client: RequestClient):
    """GET twice: the second call is served from cache."""
    print("\n=== Cached GET ===")

    first = await client.get("resources", params={"type": "book"})
    second = await client.get("resources", params={"type": "book"})

    print(f"First cached: {first['cached']}")
    print(f"Second cached: {second['cached']}")


async def create_and_refresh(client: RequestClient):
    """POST with invalidate_cache forces the next GET to hit the network."""
    print("\n=== POST with cache invalidation ===")

    created = await client.post("resources", {"title": "Zen Mind, Beginner's Mind"}, invalidate_cache=True)
    print(f"Created: {created}")
    print(f"Cache still valid: {client.is_cache_valid('resources', params={'type': 'book'})}")


async def error_handling(client: RequestClient):
    """Every failure arrives as ApiError with a stable code."""
    print("\n=== Error handling ===")

    try:
        await client.get("resources/does-not-exist", retry=NO_RETRY)
    except ApiError as e:
        print(f"Code: {e.code}, status: {e.status}")
        print(f"User message: {e.get_user_message()}")
        print(f"Envelope: {handle_api_error(e, 'load resource')}")


async def main():
    config = ClientConfig.create(max_retries=2, base_delay_ms=200)

    async with RequestClient(config) as client:
        await cached_get(client)
        await create_and_refresh(client)
        await error_handling(client)


if __name__ == "__main__":
    asyncio.run(main())
