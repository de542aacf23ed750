"""
Cache Key Builder

Pure functions producing canonical cache keys. The same logical request must
always map to the same key, whatever order its parameters arrive in, so every
multi-valued or mapping-shaped argument is sorted before it is joined.

Key layout: colon-delimited, leading namespace segment.

    bootstrap:<tenant>:<k1,k2,...>
    tenant:<tenant>:products
    tenant:<tenant>:orders:<page>
    tenant:<tenant>:analytics:<period>
    user:<user>:auth
    user:<user>:permissions:<tenant>
    api:<endpoint>:<a=1&b=2>
    chat:<tenant>:messages:<limit>
    system:tenants:active
    stats:visitors:<date>

All functions are total: they never raise and never mutate their inputs.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

import orjson

from storefront_cache.core.config.constants import (
    KEY_SEPARATOR,
    NS_API,
    NS_BOOTSTRAP,
    NS_CHAT,
    NS_STATS,
    NS_SYSTEM,
    NS_TENANT,
    NS_USER,
)


def _join(*segments: Any) -> str:
    return KEY_SEPARATOR.join(str(segment) for segment in segments)


# orjson serializes signed and unsigned 64-bit integers only.
_JSON_INT_RANGE = range(-(2**63), 2**64)


def _dumps(value: Any) -> str:
    return orjson.dumps(value, option=orjson.OPT_SORT_KEYS).decode("utf-8")


def _normalize(value: Any) -> Any:
    """
    Reduce a nested parameter value to plain JSON types in canonical order.

    Mapping keys become strings, sequences and sets are sorted by their JSON
    rendering, and anything orjson cannot encode is rendered with str().
    """
    if value is None or isinstance(value, (bool, str, float)):
        return value
    if isinstance(value, int):
        return value if value in _JSON_INT_RANGE else str(value)
    if isinstance(value, Mapping):
        return {_format_value(name): _normalize(item) for name, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return sorted((_normalize(item) for item in value), key=_dumps)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        return _dumps(_normalize(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(sorted(_format_value(item) for item in value))
    return str(value)


def canonical_params(params: Mapping[str, Any] | str | None = None) -> str:
    """
    Serialize query parameters to a stable `k=v&k=v` string.

    Parameter names are sorted; list and set values are sorted at every
    depth; nested mappings are rendered as JSON with sorted keys. A pre-built
    string is passed through.

    Args:
        params: Query parameter mapping, pre-serialized string, or None

    Returns:
        Canonical parameter string ("" when there are no parameters)
    """
    if not params:
        return ""
    if isinstance(params, str):
        return params
    return "&".join(f"{name}={_format_value(params[name])}" for name in sorted(params, key=str))


# -----------------------------------------------------------------------------
# Tenant data
# -----------------------------------------------------------------------------


def tenant_bootstrap(tenant_id: str, keys: Iterable[str]) -> str:
    """Storefront bootstrap payload for a tenant, scoped to the requested sections."""
    return _join(NS_BOOTSTRAP, tenant_id, ",".join(sorted(str(k) for k in keys)))


def tenant_products(tenant_id: str) -> str:
    return _join(NS_TENANT, tenant_id, "products")


def tenant_orders(tenant_id: str, page: int = 1) -> str:
    return _join(NS_TENANT, tenant_id, "orders", page)


def tenant_analytics(tenant_id: str, period: str) -> str:
    return _join(NS_TENANT, tenant_id, "analytics", period)


# -----------------------------------------------------------------------------
# User data
# -----------------------------------------------------------------------------


def user_auth(user_id: str) -> str:
    return _join(NS_USER, user_id, "auth")


def user_permissions(user_id: str, tenant_id: str) -> str:
    return _join(NS_USER, user_id, "permissions", tenant_id)


# -----------------------------------------------------------------------------
# API responses, chat, system
# -----------------------------------------------------------------------------


def api_response(endpoint: str, params: Mapping[str, Any] | str | None = None) -> str:
    """
    Generic API-response key.

    Example:
        >>> api_response("search", {"b": 2, "a": 1})
        'api:search:a=1&b=2'
    """
    return _join(NS_API, endpoint, canonical_params(params))


def chat_messages(tenant_id: str, limit: int = 50) -> str:
    return _join(NS_CHAT, tenant_id, "messages", limit)


def tenant_list() -> str:
    return _join(NS_SYSTEM, "tenants", "active")


def visitor_stats(day: date | str) -> str:
    """Per-day visitor statistics; dates are rendered ISO-8601."""
    if isinstance(day, date):
        day = day.isoformat()
    return _join(NS_STATS, "visitors", day)


class CacheKeys:
    """Namespace bundling the key builders for call sites that prefer `CacheKeys.x(...)`."""

    canonical_params = staticmethod(canonical_params)
    tenant_bootstrap = staticmethod(tenant_bootstrap)
    tenant_products = staticmethod(tenant_products)
    tenant_orders = staticmethod(tenant_orders)
    tenant_analytics = staticmethod(tenant_analytics)
    user_auth = staticmethod(user_auth)
    user_permissions = staticmethod(user_permissions)
    api_response = staticmethod(api_response)
    chat_messages = staticmethod(chat_messages)
    tenant_list = staticmethod(tenant_list)
    visitor_stats = staticmethod(visitor_stats)
