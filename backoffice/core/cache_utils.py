"""
Caching helpers for read-heavy endpoints.
Uses Redis pattern deletion when django_redis is the configured backend.
"""
import hashlib
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger('backoffice.core')

# Cache TTLs (in seconds)
HOMEPAGE_CACHE_TTL = 600  # 10 minutes
REFERENCE_LIST_CACHE_TTL = 300  # 5 minutes

HOMEPAGE_CACHE_KEY = 'cms_homepage'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def reference_list_prefix(business_unit_id, kind):
    return f"reference:{business_unit_id}:{kind}"


def get_cached_reference_list(business_unit_id, kind, **filters):
    """Returns tuple: (cached_data, cache_key)"""
    cache_key = make_cache_key(reference_list_prefix(business_unit_id, kind), **filters)
    return cache.get(cache_key), cache_key


def cache_reference_list(cache_key, data, ttl=REFERENCE_LIST_CACHE_TTL):
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached reference list: {cache_key}")


def uses_redis():
    return 'django_redis' in settings.CACHES['default']['BACKEND']


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern.
    Redis is scanned with SCAN; other backends are cleared entirely.
    """
    if not uses_redis():
        cache.clear()
        logger.debug(f"Cleared local cache for pattern: {pattern}")
        return

    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")

        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def invalidate_homepage_cache():
    cache.delete(HOMEPAGE_CACHE_KEY)
    logger.info("Invalidated CMS homepage cache")


def invalidate_reference_cache(business_unit_id, kind):
    invalidate_cache_pattern(reference_list_prefix(business_unit_id, kind))
