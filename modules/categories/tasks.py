"""
Categories Celery tasks.
"""
import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def rebuild_category_catalog_cache():
    """
    Rebuild the cached category listing.

    Writes drop the cache; this warms it again ahead of the next read.
    """
    from shared.cache import category_cache
    from .services import CATALOG_CACHE_KEY, TaxonomyService

    category_cache.delete(CATALOG_CACHE_KEY)
    catalog = TaxonomyService().get_catalog()

    logger.info(f"Rebuilt category catalog cache ({len(catalog)} categories)")
    return len(catalog)


@shared_task
def audit_taxonomy_slugs():
    """
    Find sibling entries sharing a slug.

    Informational only, nothing is renamed. Clashes come from renames and
    from secondary subcategories, neither of which is checked on write.
    """
    from .services import TaxonomyService

    duplicates = TaxonomyService().find_duplicate_slugs()

    if duplicates:
        logger.warning(f"Found {len(duplicates)} duplicate sibling slugs")
        for item in duplicates[:10]:
            logger.warning(
                f"  - category {item['category_id']} {item['tree']} "
                f"under {item['parent_path'] or 'root'}: {item['slug']}"
            )

    return len(duplicates)
