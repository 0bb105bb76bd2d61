"""
Cache helper utilities for the Railway Police portal.

Usage:
    from utils.cache_helpers import cached_query

    @cached_query(key_prefix="dashboard")
    def get_dashboard_stats(level, station_id=None, district_id=None):
        ...
"""

from functools import wraps
from extensions import cache


def build_cache_key(name, args, kwargs, key_prefix=None):
    cache_key = f"{key_prefix or 'query'}:{name}"
    if args:
        cache_key += f":{':'.join(str(arg) for arg in args)}"
    if kwargs:
        cache_key += f":{':'.join(f'{k}={v}' for k, v in sorted(kwargs.items()))}"
    return cache_key


def cached_query(timeout=None, key_prefix=None):
    """
    Decorator to cache database query results.

    Args:
        timeout (int): Cache timeout in seconds (default: CACHE_DEFAULT_TIMEOUT)
        key_prefix (str): Optional custom cache key prefix
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            cache_key = build_cache_key(f.__name__, args, kwargs, key_prefix)

            result = cache.get(cache_key)
            if result is not None:
                return result

            result = f(*args, **kwargs)
            cache.set(cache_key, result, timeout=timeout)
            return result

        return decorated_function

    return decorator
