"""
Unit Tests for Remote Store Clients

REST transport is exercised through httpx.MockTransport; the native transport
through an AsyncMock standing in for redis.asyncio.Redis.
"""

import httpx
import orjson
import pytest
from unittest.mock import AsyncMock
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from storefront_cache.core.exceptions import CacheConnectionError, CacheKeyError
from storefront_cache.infrastructure.cache.remote_client import (
    RedisRemoteClient,
    RemoteClient,
    RestRemoteClient,
    connect_remote,
    decode_value,
    escape_glob,
)

URL = "https://eu1-test.upstash.io"


def rest_client(handler) -> RestRemoteClient:
    return RestRemoteClient(URL, "test-token", transport=httpx.MockTransport(handler))


class Recorder:
    """MockTransport handler that records commands and replies with canned bodies."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests: list[httpx.Request] = []

    @property
    def commands(self) -> list[list]:
        return [orjson.loads(request.content) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else {"result": None}
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)


@pytest.mark.unit
class TestValueCodec:
    def test_json_decoded(self):
        assert decode_value('{"a":[1,2]}') == {"a": [1, 2]}

    def test_non_json_returned_raw(self):
        assert decode_value("plain text") == "plain text"

    def test_none(self):
        assert decode_value(None) is None

    def test_escape_glob(self):
        assert escape_glob("a*b?c[d]\\e") == "a\\*b\\?c\\[d\\]\\\\e"
        assert escape_glob("bootstrap:t1") == "bootstrap:t1"


@pytest.mark.unit
class TestRestRemoteClient:
    @pytest.mark.asyncio
    async def test_get_sends_command_with_bearer_token(self):
        recorder = Recorder({"result": '{"name":"Shop"}'})
        client = rest_client(recorder)

        value = await client.get("tenant:t1:products")

        assert value == {"name": "Shop"}
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == URL
        assert request.headers["Authorization"] == "Bearer test-token"
        assert recorder.commands == [["GET", "tenant:t1:products"]]
        await client.close()

    @pytest.mark.asyncio
    async def test_get_miss(self):
        client = rest_client(Recorder({"result": None}))
        assert await client.get("absent") is None
        await client.close()

    @pytest.mark.asyncio
    async def test_set_encodes_value_with_ttl(self):
        recorder = Recorder({"result": "OK"})
        client = rest_client(recorder)

        await client.set("user:u1:auth", {"role": "admin"}, ttl=7200)

        assert recorder.commands == [["SET", "user:u1:auth", '{"role":"admin"}', "EX", 7200]]
        await client.close()

    @pytest.mark.asyncio
    async def test_delete_many(self):
        recorder = Recorder({"result": 2})
        client = rest_client(recorder)

        assert await client.delete("a", "b") == 2
        assert recorder.commands == [["DEL", "a", "b"]]
        await client.close()

    @pytest.mark.asyncio
    async def test_delete_nothing_sends_nothing(self):
        recorder = Recorder()
        client = rest_client(recorder)

        assert await client.delete() == 0
        assert recorder.requests == []
        await client.close()

    @pytest.mark.asyncio
    async def test_keys(self):
        recorder = Recorder({"result": ["bootstrap:t1:a", "bootstrap:t1:b"]})
        client = rest_client(recorder)

        assert await client.keys("bootstrap:t1*") == ["bootstrap:t1:a", "bootstrap:t1:b"]
        assert recorder.commands == [["KEYS", "bootstrap:t1*"]]
        await client.close()

    @pytest.mark.asyncio
    async def test_error_payload_raises_key_error(self):
        client = rest_client(Recorder(httpx.Response(400, json={"error": "ERR wrong type"})))

        with pytest.raises(CacheKeyError, match="wrong type"):
            await client.get("k")
        await client.close()

    @pytest.mark.asyncio
    async def test_http_status_raises_connection_error(self):
        client = rest_client(Recorder(httpx.Response(503, text="unavailable")))

        with pytest.raises(CacheConnectionError):
            await client.get("k")
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_error_raises_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = rest_client(handler)

        with pytest.raises(CacheConnectionError) as exc_info:
            await client.get("k")
        assert exc_info.value.details["original_error"] == "ConnectError"
        await client.close()

    @pytest.mark.asyncio
    async def test_malformed_body_raises_key_error(self):
        client = rest_client(Recorder(httpx.Response(200, text="not json")))

        with pytest.raises(CacheKeyError):
            await client.get("k")
        await client.close()

    @pytest.mark.asyncio
    async def test_unserializable_value_raises_key_error(self):
        recorder = Recorder()
        client = rest_client(recorder)

        with pytest.raises(CacheKeyError):
            await client.set("k", object(), ttl=60)
        assert recorder.requests == []
        await client.close()


@pytest.mark.unit
class TestRedisRemoteClient:
    @pytest.fixture
    def redis_mock(self):
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_get_decodes(self, redis_mock):
        redis_mock.get.return_value = '[1, 2, 3]'
        client = RedisRemoteClient("redis://localhost:6379", client=redis_mock)

        assert await client.get("k") == [1, 2, 3]
        redis_mock.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_set_uses_expiry(self, redis_mock):
        client = RedisRemoteClient("redis://localhost:6379", client=redis_mock)

        await client.set("k", {"a": 1}, ttl=300)

        redis_mock.set.assert_awaited_once_with("k", '{"a":1}', ex=300)

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self, redis_mock):
        redis_mock.keys.side_effect = RedisConnectionError("Connection refused")
        client = RedisRemoteClient("redis://localhost:6379", client=redis_mock)

        with pytest.raises(CacheConnectionError):
            await client.keys("*")

    @pytest.mark.asyncio
    async def test_error_reply_wrapped(self, redis_mock):
        redis_mock.delete.side_effect = ResponseError("WRONGTYPE")
        client = RedisRemoteClient("redis://localhost:6379", client=redis_mock)

        with pytest.raises(CacheKeyError):
            await client.delete("k")

    @pytest.mark.asyncio
    async def test_close(self, redis_mock):
        client = RedisRemoteClient("redis://localhost:6379", client=redis_mock)
        await client.close()
        redis_mock.aclose.assert_awaited_once()


@pytest.mark.unit
class TestConnectRemote:
    @pytest.mark.parametrize(("url", "token"), [(None, "t"), (URL, None), ("", ""), (None, None)])
    def test_missing_credentials_return_none(self, url, token):
        assert connect_remote(url, token) is None

    @pytest.mark.asyncio
    async def test_https_url_selects_rest(self):
        client = connect_remote(URL, "test-token")

        assert isinstance(client, RestRemoteClient)
        assert isinstance(client, RemoteClient)
        await client.close()

    @pytest.mark.asyncio
    async def test_redis_url_selects_native(self):
        client = connect_remote("rediss://default@eu1-test.upstash.io:6379", "test-token")

        assert isinstance(client, RedisRemoteClient)
        assert client.backend == "redis"
        await client.close()
