"""
Categories serializers.
"""
from rest_framework import serializers

from .models import CategoryModel


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for a whole category aggregate."""

    node_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = CategoryModel
        fields = [
            'id',
            'name',
            'slug',
            'icon',
            'color',
            'created_by',
            'legacy_subcategories',
            'nodes',
            'node_count',
            'version',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CategoryCreateSerializer(serializers.Serializer):
    """Serializer for creating category."""

    name = serializers.CharField(max_length=100)
    icon = serializers.CharField(max_length=255, required=False, allow_blank=True)
    color = serializers.CharField(max_length=32, required=False, allow_blank=True)


class CategoryUpdateSerializer(serializers.Serializer):
    """Serializer for updating category."""

    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    icon = serializers.CharField(max_length=255, required=False, allow_blank=True)
    color = serializers.CharField(max_length=32, required=False, allow_blank=True)


class NodeCreateSerializer(serializers.Serializer):
    """Serializer for adding a node; ``parent_path`` lists ancestor ids from the top."""

    parent_path = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        default=list,
    )
    name = serializers.CharField(max_length=100)
    legacy_ref = serializers.CharField(
        max_length=100,
        required=False,
        allow_null=True,
        allow_blank=True,
    )


class NodeUpdateSerializer(serializers.Serializer):
    """Serializer for renaming a node addressed by its full path."""

    path = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)


class NodeDeleteSerializer(serializers.Serializer):
    """Serializer for deleting a node addressed by its full path."""

    path = serializers.ListField(child=serializers.CharField(), allow_empty=False)


class SubcategoryNameSerializer(serializers.Serializer):
    """Serializer for legacy subcategory and secondary subcategory names."""

    name = serializers.CharField(max_length=100)


class SubcategoryRenameSerializer(serializers.Serializer):
    """Serializer for renaming a legacy entry; a blank name changes nothing."""

    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
