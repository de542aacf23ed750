"""
Remote Store Client (L2)

Thin async wrappers around the remote key-value store that backs the shared
cache tier. Two transports implement the same contract:

    RestRemoteClient   REST endpoint (Upstash-style): POST <url> with a JSON
                       command array and `Authorization: Bearer <token>`;
                       replies are {"result": ...} or {"error": ...}
    RedisRemoteClient  native protocol via redis.asyncio, selected when the
                       configured URL is redis:// or rediss://

Contract (one awaitable call per operation):
    get(key)               -> decoded value or None
    set(key, value, ttl)   -> stores JSON-encoded value with TTL in seconds
    delete(*keys)          -> number of keys removed
    keys(pattern)          -> keys matching a glob pattern
    close()

Clients raise CacheConnectionError (transport failure) or CacheKeyError
(command rejected). They do not swallow errors; the cache facade decides how
to degrade.

connect_remote() returns None when credentials are absent. Callers treat None
as "remote tier disabled".
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

import httpx
import orjson
import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from storefront_cache.core.config.constants import (
    CMD_DEL,
    CMD_GET,
    CMD_KEYS,
    CMD_SET,
    REDIS_URL_SCHEMES,
    Stage,
)
from storefront_cache.core.exceptions import CacheConnectionError, CacheKeyError
from storefront_cache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)

_GLOB_SPECIALS = frozenset("\\*?[]")


# =============================================================================
# VALUE CODEC
# =============================================================================


def encode_value(value: Any) -> str:
    """JSON-encode a value for storage."""
    try:
        return orjson.dumps(value).decode("utf-8")
    except TypeError as e:
        raise CacheKeyError(
            message=f"Value is not JSON serializable: {e}",
            details={"value_type": type(value).__name__},
        )


def decode_value(raw: Any) -> Any:
    """
    Decode a stored value.

    Values that are not valid JSON are returned as stored.
    """
    if raw is None or not isinstance(raw, (str, bytes)):
        return raw
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return raw


def escape_glob(fragment: str) -> str:
    """Escape glob metacharacters so the fragment matches literally in KEYS."""
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIALS else ch for ch in fragment)


# =============================================================================
# PROTOCOL INTERFACE
# =============================================================================


@runtime_checkable
class RemoteClient(Protocol):
    """Interface every remote transport implements; test doubles implement it too."""

    backend: str

    async def get(self, key: str) -> Any | None:
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        ...

    async def delete(self, *keys: str) -> int:
        ...

    async def keys(self, pattern: str) -> list[str]:
        ...

    async def close(self) -> None:
        ...


# =============================================================================
# REST TRANSPORT
# =============================================================================


class RestRemoteClient:
    """
    REST transport.

    Usage:
        client = RestRemoteClient("https://eu1-fine-fox.upstash.io", token)
        await client.set("tenant:t1:products", products, ttl=1800)
        products = await client.get("tenant:t1:products")
        await client.close()
    """

    backend = "rest"

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 5.0,
        max_connections: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            url: REST endpoint
            token: Bearer token
            timeout: Per-request timeout in seconds
            max_connections: Connection pool limit
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._url = url.rstrip("/")
        self._http = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max(1, max_connections // 2),
            ),
            transport=transport,
        )

    async def _command(self, *args: Any) -> Any:
        """
        Execute one command and return its `result`.

        Raises:
            CacheConnectionError: network failure, timeout or non-2xx status
            CacheKeyError: the store answered with an error or a malformed body
        """
        command = str(args[0])
        try:
            response = await self._http.post(self._url, content=orjson.dumps(list(args)))
        except httpx.HTTPError as e:
            log_stage(logger, Stage.REMOTE_COMMAND, "Remote command failed", level="debug",
                      command=command, error=str(e))
            raise CacheConnectionError.from_exception(
                e, message=f"Remote {command} failed: {e}", command=command
            )

        try:
            payload = orjson.loads(response.content) if response.content else None
        except orjson.JSONDecodeError:
            payload = None

        if isinstance(payload, dict) and payload.get("error"):
            raise CacheKeyError(
                message=f"Remote {command} rejected: {payload['error']}",
                details={"command": command, "status_code": response.status_code},
            )
        if response.is_error:
            raise CacheConnectionError(
                message=f"Remote {command} returned HTTP {response.status_code}",
                details={"command": command, "status_code": response.status_code},
            )
        if not isinstance(payload, dict) or "result" not in payload:
            raise CacheKeyError(
                message=f"Malformed response to remote {command}",
                details={"command": command, "status_code": response.status_code},
            )
        return payload["result"]

    async def get(self, key: str) -> Any | None:
        return decode_value(await self._command(CMD_GET, key))

    async def set(self, key: str, value: Any, ttl: int) -> None:
        await self._command(CMD_SET, key, encode_value(value), "EX", int(ttl))

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(await self._command(CMD_DEL, *keys) or 0)

    async def keys(self, pattern: str) -> list[str]:
        return list(await self._command(CMD_KEYS, pattern) or [])

    async def close(self) -> None:
        await self._http.aclose()


# =============================================================================
# NATIVE REDIS TRANSPORT
# =============================================================================


class RedisRemoteClient:
    """
    Native Redis transport built on redis.asyncio.

    The access token is sent as the connection password unless the URL already
    carries credentials.
    """

    backend = "redis"

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 5.0,
        client: redis.Redis | None = None,
    ):
        self._redis = client or redis.from_url(
            url,
            password=token or None,
            decode_responses=True,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )

    async def _execute(self, command: str, call: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await call()
        except (RedisConnectionError, RedisTimeoutError) as e:
            log_stage(logger, Stage.REMOTE_COMMAND, "Remote command failed", level="debug",
                      command=command, error=str(e))
            raise CacheConnectionError.from_exception(
                e, message=f"Remote {command} failed: {e}", command=command
            )
        except RedisError as e:
            raise CacheKeyError.from_exception(
                e, message=f"Remote {command} rejected: {e}", command=command
            )

    async def get(self, key: str) -> Any | None:
        return decode_value(await self._execute(CMD_GET, lambda: self._redis.get(key)))

    async def set(self, key: str, value: Any, ttl: int) -> None:
        encoded = encode_value(value)
        await self._execute(CMD_SET, lambda: self._redis.set(key, encoded, ex=int(ttl)))

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(await self._execute(CMD_DEL, lambda: self._redis.delete(*keys)) or 0)

    async def keys(self, pattern: str) -> list[str]:
        return list(await self._execute(CMD_KEYS, lambda: self._redis.keys(pattern)) or [])

    async def close(self) -> None:
        await self._redis.aclose()


# =============================================================================
# FACTORY
# =============================================================================


def connect_remote(
    url: str | None,
    token: str | None,
    timeout: float = 5.0,
    max_connections: int = 20,
) -> RemoteClient | None:
    """
    Build a remote client from credentials.

    STAGE-R.0: Remote client construction

    Returns None when either credential is missing or the client cannot be
    constructed; the caller runs memory-only in that case.

    Args:
        url: REST endpoint or redis:// / rediss:// URL
        token: Access token
        timeout: Request timeout in seconds
        max_connections: HTTP pool limit (REST transport)
    """
    if not url or not token:
        return None

    scheme = urlsplit(url).scheme.lower()
    try:
        if scheme in REDIS_URL_SCHEMES:
            client: RemoteClient = RedisRemoteClient(url, token, timeout=timeout)
        else:
            client = RestRemoteClient(url, token, timeout=timeout, max_connections=max_connections)
    except Exception as e:
        logger.error(
            "Remote store client could not be created",
            stage=Stage.REMOTE_CONNECT.value,
            url=url,
            error=str(e),
            error_type=type(e).__name__,
        )
        return None

    log_stage(logger, Stage.REMOTE_CONNECT, "Remote store client created",
              backend=client.backend, url=url)
    return client
