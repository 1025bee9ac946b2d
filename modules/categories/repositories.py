"""
Category aggregate persistence.

A category row is the unit of loading and saving: the legacy subcategory
tree and the node tree are never written on their own.
"""
import logging
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from .exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    CategoryVersionConflictError,
)
from .models import CategoryModel

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Loads and stores whole category aggregates."""

    def list_all(self) -> List[CategoryModel]:
        """Return all categories, newest first."""
        return list(CategoryModel.objects.order_by('-created_at', '-id'))

    def load(self, category_id: int) -> CategoryModel:
        """Load one aggregate or raise ``CategoryNotFoundError``."""
        try:
            return CategoryModel.objects.get(pk=category_id)
        except (CategoryModel.DoesNotExist, ValueError, TypeError):
            raise CategoryNotFoundError(category_id=category_id)

    def exists_with_name(self, name: str, slug: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether another category already uses ``name`` or ``slug``."""
        queryset = CategoryModel.objects.filter(Q(name__iexact=name) | Q(slug=slug))
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.exists()

    def create(self, **fields) -> CategoryModel:
        """Insert a new, empty aggregate."""
        try:
            with transaction.atomic():
                return CategoryModel.objects.create(
                    legacy_subcategories=[],
                    nodes=[],
                    **fields
                )
        except IntegrityError:
            raise CategoryAlreadyExistsError(name=fields.get('name'))

    def save(self, category: CategoryModel) -> CategoryModel:
        """
        Replace the stored aggregate with ``category``.

        The write only succeeds if the row still carries the version the
        aggregate was loaded with; the in-memory version is bumped to match.

        Raises:
            CategoryVersionConflictError: if the row changed since ``load``.
            CategoryAlreadyExistsError: if the new name or slug is taken.
        """
        now = timezone.now()
        try:
            with transaction.atomic():
                updated = CategoryModel.objects.filter(
                    pk=category.pk,
                    version=category.version,
                ).update(
                    name=category.name,
                    slug=category.slug,
                    icon=category.icon,
                    color=category.color,
                    legacy_subcategories=category.legacy_subcategories,
                    nodes=category.nodes,
                    version=F('version') + 1,
                    updated_at=now,
                )
        except IntegrityError:
            raise CategoryAlreadyExistsError(name=category.name)

        if not updated:
            if not CategoryModel.objects.filter(pk=category.pk).exists():
                raise CategoryNotFoundError(category_id=category.pk)
            logger.warning(
                f"Rejected stale save for category {category.pk} (version {category.version})"
            )
            raise CategoryVersionConflictError(category.pk, category.version)

        category.version += 1
        category.updated_at = now
        return category

    def delete(self, category_id: int) -> None:
        """Delete an aggregate together with both trees."""
        deleted, _ = CategoryModel.objects.filter(pk=category_id).delete()
        if not deleted:
            raise CategoryNotFoundError(category_id=category_id)
