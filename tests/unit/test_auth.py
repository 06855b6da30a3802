"""Тесты BearerTokenAuth."""

import pytest

from api_client.auth import BearerTokenAuth


@pytest.mark.asyncio
async def test_sync_provider():
    auth = BearerTokenAuth(lambda: "abc")
    assert await auth.headers() == {"Authorization": "Bearer abc"}


@pytest.mark.asyncio
async def test_async_provider():
    async def provider():
        return "xyz"

    auth = BearerTokenAuth(provider)
    assert await auth.get_token() == "xyz"
    assert await auth.headers() == {"Authorization": "Bearer xyz"}


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, ""])
async def test_no_token(token):
    assert await BearerTokenAuth(lambda: token).headers() == {}


@pytest.mark.asyncio
async def test_provider_consulted_each_call():
    tokens = iter(["first", "second"])
    auth = BearerTokenAuth(lambda: next(tokens))

    assert (await auth.headers())["Authorization"] == "Bearer first"
    assert (await auth.headers())["Authorization"] == "Bearer second"


def test_provider_must_be_callable():
    with pytest.raises(TypeError):
        BearerTokenAuth("token")
