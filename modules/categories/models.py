"""
Categories models.

A category is one aggregate: both taxonomy trees live inside the row as
JSON documents and are loaded and saved together.
"""
from django.conf import settings
from django.db import models


class CategoryModel(models.Model):
    """Top-level category owning a legacy two-tier tree and a node tree."""

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='Category name'
    )
    slug = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='Slug'
    )
    icon = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name='Icon'
    )
    color = models.CharField(
        max_length=32,
        blank=True,
        default='',
        verbose_name='Color'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='categories',
        verbose_name='Owner'
    )
    legacy_subcategories = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Legacy subcategories',
        help_text='[{id, name, slug, secondary_subcategories: [{id, name, slug}]}]'
    )
    nodes = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Nodes',
        help_text='[{id, name, slug, legacy_ref, children: [...]}]'
    )
    version = models.PositiveIntegerField(
        default=0,
        verbose_name='Version',
        help_text='Bumped on every save; stale writers are rejected'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    class Meta:
        db_table = 'categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name

    @property
    def node_count(self) -> int:
        """Count every node in the generic tree."""
        from .tree import NODE_TREE, iter_entries

        return sum(1 for _ in iter_entries(self.nodes, NODE_TREE))
