"""
Cache invalidation signals
Automatically invalidate cache when data changes
"""
import logging

from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .cache_utils import invalidate_homepage_cache, invalidate_reference_cache

logger = logging.getLogger('backoffice.core')


@receiver([post_save, post_delete])
def invalidate_reference_lists(sender, instance, **kwargs):
    """Reference models declare ``reference_cache_kind`` to opt in"""
    kind = getattr(sender, 'reference_cache_kind', None)
    if not kind:
        return
    business_unit_id = getattr(instance, 'business_unit_id', None)
    if business_unit_id is None:
        return
    # After commit, so readers never repopulate from uncommitted rows
    transaction.on_commit(lambda: invalidate_reference_cache(business_unit_id, kind))


@receiver([post_save, post_delete])
def invalidate_homepage(sender, instance, **kwargs):
    """CMS models declare ``homepage_content = True`` to opt in"""
    if not getattr(sender, 'homepage_content', False):
        return
    transaction.on_commit(invalidate_homepage_cache)
