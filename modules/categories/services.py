"""
Categories business logic services.
"""
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from django.conf import settings
from django.db import transaction

from shared.cache import category_cache
from shared.utils import slugify

from .exceptions import (
    CategoryAlreadyExistsError,
    InvalidTaxonomyNameError,
    TaxonomyEntryExistsError,
)
from .models import CategoryModel
from .repositories import CategoryRepository
from .serializers import CategorySerializer
from .tree import (
    LEGACY_TREE,
    NODE_TREE,
    TreeShape,
    delete_entry,
    find_duplicate_slugs,
    insert_entry,
    locate,
    rename_entry,
)

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = 'catalog'


def node_tree_shape() -> TreeShape:
    """Node tree rules with the configured depth limit."""
    max_depth = getattr(settings, 'TAXONOMY_MAX_NODE_DEPTH', NODE_TREE.max_depth)
    return replace(NODE_TREE, max_depth=max_depth)


def category_slug(name: str) -> str:
    """Slug for a category name; raises if nothing sluggable is left."""
    slug = slugify(name)
    if not slug:
        raise InvalidTaxonomyNameError(
            "Name must contain at least one letter or digit"
        )
    return slug


def invalidate_catalog() -> None:
    """Drop the cached category listing once the current transaction commits."""
    transaction.on_commit(lambda: category_cache.delete(CATALOG_CACHE_KEY))


class TaxonomyService:
    """
    Service for category and taxonomy operations.

    Every tree mutation loads the whole category, changes it in memory and
    saves it back in one write. A concurrent change to the same category
    makes the later save fail with a version conflict.
    """

    def __init__(self, repository: Optional[CategoryRepository] = None):
        self.repository = repository or CategoryRepository()

    # === Categories ===

    def list_categories(self) -> List[CategoryModel]:
        """Get all categories, newest first."""
        return self.repository.list_all()

    def get_category(self, category_id: int) -> CategoryModel:
        """Get category by ID."""
        return self.repository.load(category_id)

    def get_catalog(self) -> List[Dict[str, Any]]:
        """Serialized category listing, served from cache when warm."""
        return category_cache.get_or_set(
            CATALOG_CACHE_KEY,
            lambda: CategorySerializer(self.list_categories(), many=True).data,
            timeout=settings.CATEGORY_CACHE_TIMEOUT,
        )

    @transaction.atomic
    def create_category(
        self,
        name: str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        owner=None,
    ) -> CategoryModel:
        """Create a new, empty category."""
        name = (name or '').strip()
        if not name:
            raise InvalidTaxonomyNameError("Name is required")
        slug = category_slug(name)

        if self.repository.exists_with_name(name, slug):
            raise CategoryAlreadyExistsError(name=name)

        category = self.repository.create(
            name=name,
            slug=slug,
            icon=icon or '',
            color=color or '',
            created_by=owner,
        )
        invalidate_catalog()

        logger.info(f"Created category: {category.name} ({category.id})")
        return category

    @transaction.atomic
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> CategoryModel:
        """Update category attributes. Blank or missing values are left as is."""
        category = self.repository.load(category_id)

        name = (name or '').strip()
        if name:
            slug = category_slug(name)
            if self.repository.exists_with_name(name, slug, exclude_id=category.id):
                raise CategoryAlreadyExistsError(name=name)
            category.name = name
            category.slug = slug
        if icon is not None:
            category.icon = icon
        if color is not None:
            category.color = color

        self._save(category)
        logger.info(f"Updated category: {category.name} ({category.id})")
        return category

    @transaction.atomic
    def delete_category(self, category_id: int) -> bool:
        """Delete a category with both of its trees."""
        self.repository.delete(category_id)
        invalidate_catalog()
        logger.info(f"Deleted category: {category_id}")
        return True

    # === Node tree ===

    @transaction.atomic
    def add_node(
        self,
        category_id: int,
        parent_path: Sequence,
        name: str,
        legacy_ref: Optional[str] = None,
    ) -> CategoryModel:
        """Add a node under ``parent_path`` (empty path = top level)."""
        parent_path = list(parent_path or [])
        category = self.repository.load(category_id)
        node = insert_entry(
            category.nodes, parent_path, name, node_tree_shape(), legacy_ref=legacy_ref
        )
        self._save(category)
        logger.info(
            f"Added node {node['slug']} ({node['id']}) to category {category.id} "
            f"at depth {len(parent_path)}"
        )
        return category

    @transaction.atomic
    def update_node(
        self,
        category_id: int,
        path: Sequence,
        name: Optional[str] = None,
    ) -> CategoryModel:
        """Rename the node at ``path``."""
        category = self.repository.load(category_id)
        node = rename_entry(category.nodes, list(path or []), name, node_tree_shape())
        self._save(category)
        logger.info(f"Updated node {node['id']} in category {category.id}")
        return category

    @transaction.atomic
    def delete_node(self, category_id: int, path: Sequence) -> CategoryModel:
        """Delete the node at ``path`` and everything below it."""
        category = self.repository.load(category_id)
        node = delete_entry(category.nodes, list(path or []), node_tree_shape())
        self._save(category)
        logger.info(f"Deleted node {node['id']} from category {category.id}")
        return category

    # === Legacy subcategories ===

    @transaction.atomic
    def add_subcategory(self, category_id: int, name: str) -> CategoryModel:
        category = self.repository.load(category_id)
        sub = insert_entry(category.legacy_subcategories, [], name, LEGACY_TREE)
        self._save(category)
        logger.info(f"Added subcategory {sub['slug']} ({sub['id']}) to category {category.id}")
        return category

    @transaction.atomic
    def update_subcategory(
        self, category_id: int, sub_id: str, name: Optional[str] = None
    ) -> CategoryModel:
        category = self.repository.load(category_id)
        rename_entry(category.legacy_subcategories, [sub_id], name, LEGACY_TREE)
        self._save(category)
        logger.info(f"Updated subcategory {sub_id} in category {category.id}")
        return category

    @transaction.atomic
    def delete_subcategory(self, category_id: int, sub_id: str) -> CategoryModel:
        category = self.repository.load(category_id)
        delete_entry(category.legacy_subcategories, [sub_id], LEGACY_TREE)
        self._save(category)
        logger.info(f"Deleted subcategory {sub_id} from category {category.id}")
        return category

    @transaction.atomic
    def add_secondary(self, category_id: int, sub_id: str, name: str) -> CategoryModel:
        category = self.repository.load(category_id)
        sec = insert_entry(category.legacy_subcategories, [sub_id], name, LEGACY_TREE)
        self._save(category)
        logger.info(
            f"Added secondary subcategory {sec['slug']} ({sec['id']}) "
            f"under {sub_id} in category {category.id}"
        )
        return category

    @transaction.atomic
    def update_secondary(
        self, category_id: int, sub_id: str, sec_id: str, name: Optional[str] = None
    ) -> CategoryModel:
        category = self.repository.load(category_id)
        rename_entry(category.legacy_subcategories, [sub_id, sec_id], name, LEGACY_TREE)
        self._save(category)
        logger.info(f"Updated secondary subcategory {sec_id} in category {category.id}")
        return category

    @transaction.atomic
    def delete_secondary(self, category_id: int, sub_id: str, sec_id: str) -> CategoryModel:
        category = self.repository.load(category_id)
        delete_entry(category.legacy_subcategories, [sub_id, sec_id], LEGACY_TREE)
        self._save(category)
        logger.info(f"Deleted secondary subcategory {sec_id} from category {category.id}")
        return category

    # === Legacy migration ===

    @transaction.atomic
    def migrate_legacy_subcategories(self, category_id: int) -> int:
        """
        Copy legacy subcategories into the node tree.

        Subcategories become top-level nodes and their secondary
        subcategories become children, each tagged with the legacy id as
        ``legacy_ref``. Entries already carried over are matched by that
        reference, so running it again only adds what is new. Entries whose
        slug clashes with an existing sibling, or whose name has no letters or
        digits, are skipped and logged.

        Returns:
            Number of nodes created.
        """
        category = self.repository.load(category_id)
        shape = node_tree_shape()
        created = 0

        for sub in category.legacy_subcategories:
            node, is_new = self._carry_over(category, [], sub, shape)
            if node is None:
                continue
            created += is_new
            for sec in sub.get('secondary_subcategories') or []:
                _, is_new = self._carry_over(category, [node['id']], sec, shape)
                created += is_new

        if created:
            self._save(category)
        logger.info(f"Migrated {created} legacy entries to nodes in category {category.id}")
        return created

    def _carry_over(self, category, parent_path, legacy_entry, shape):
        legacy_ref = str(legacy_entry.get('id'))
        siblings = locate(category.nodes, parent_path, shape).children
        for node in siblings:
            if node.get('legacy_ref') == legacy_ref:
                return node, False
        try:
            node = insert_entry(
                category.nodes, parent_path, legacy_entry.get('name'), shape, legacy_ref=legacy_ref
            )
        except (TaxonomyEntryExistsError, InvalidTaxonomyNameError) as e:
            logger.warning(f"Skipped legacy entry {legacy_ref} in category {category.id}: {e.message}")
            return None, False
        return node, True

    # === Integrity ===

    def find_duplicate_slugs(self) -> List[Dict[str, Any]]:
        """
        Report sibling slug clashes across all categories.

        Renames and secondary subcategories are not checked on write, so
        clashes can exist in stored data.
        """
        report = []
        for category in self.list_categories():
            for tree_name, root, shape in (
                ('nodes', category.nodes, node_tree_shape()),
                ('legacy_subcategories', category.legacy_subcategories, LEGACY_TREE),
            ):
                for parent_path, slug in find_duplicate_slugs(root, shape):
                    report.append({
                        'category_id': category.id,
                        'tree': tree_name,
                        'parent_path': list(parent_path),
                        'slug': slug,
                    })
        return report

    # === Helpers ===

    def _save(self, category: CategoryModel) -> None:
        self.repository.save(category)
        invalidate_catalog()
