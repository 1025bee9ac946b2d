"""
Categories API views.
"""
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from shared.permissions import IsAdminOrReadOnly

from .services import TaxonomyService
from .serializers import (
    CategorySerializer,
    CategoryCreateSerializer,
    CategoryUpdateSerializer,
    NodeCreateSerializer,
    NodeUpdateSerializer,
    NodeDeleteSerializer,
    SubcategoryNameSerializer,
    SubcategoryRenameSerializer,
)


class TaxonomyAPIView(APIView):
    """Base view holding the taxonomy service."""

    permission_classes = [IsAdminUser]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.taxonomy_service = TaxonomyService()

    def category_response(self, category, status_code=status.HTTP_200_OK):
        return Response(CategorySerializer(category).data, status=status_code)


class CategoryListCreateView(TaxonomyAPIView):
    """List and create categories."""

    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(
        tags=['Categories'],
        summary='List categories',
        responses={200: CategorySerializer(many=True)},
    )
    def get(self, request):
        """Get all categories, newest first."""
        return Response(self.taxonomy_service.get_catalog())

    @extend_schema(
        tags=['Categories'],
        summary='Create category',
        request=CategoryCreateSerializer,
        responses={201: CategorySerializer},
    )
    def post(self, request):
        """Create a new category."""
        serializer = CategoryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        owner = request.user if request.user.is_authenticated else None
        category = self.taxonomy_service.create_category(
            owner=owner,
            **serializer.validated_data
        )
        return self.category_response(category, status.HTTP_201_CREATED)


class CategoryDetailView(TaxonomyAPIView):
    """Category detail operations."""

    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(
        tags=['Categories'],
        summary='Get category',
        responses={200: CategorySerializer},
    )
    def get(self, request, category_id):
        """Get category by ID."""
        category = self.taxonomy_service.get_category(category_id)
        return self.category_response(category)

    @extend_schema(
        tags=['Categories'],
        summary='Update category',
        request=CategoryUpdateSerializer,
        responses={200: CategorySerializer},
    )
    def patch(self, request, category_id):
        """Update a category."""
        serializer = CategoryUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.update_category(
            category_id=category_id,
            **serializer.validated_data
        )
        return self.category_response(category)

    @extend_schema(
        tags=['Categories'],
        summary='Delete category',
    )
    def delete(self, request, category_id):
        """Delete a category with all of its subcategories and nodes."""
        success = self.taxonomy_service.delete_category(category_id=category_id)
        return Response({'success': success})


class CategoryNodesView(TaxonomyAPIView):
    """Add, rename and delete nodes of the generic tree."""

    @extend_schema(
        tags=['Categories'],
        summary='Add node',
        request=NodeCreateSerializer,
        responses={201: CategorySerializer},
    )
    def post(self, request, category_id):
        serializer = NodeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.add_node(
            category_id=category_id,
            **serializer.validated_data
        )
        return self.category_response(category, status.HTTP_201_CREATED)

    @extend_schema(
        tags=['Categories'],
        summary='Rename node',
        request=NodeUpdateSerializer,
        responses={200: CategorySerializer},
    )
    def patch(self, request, category_id):
        serializer = NodeUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.update_node(
            category_id=category_id,
            **serializer.validated_data
        )
        return self.category_response(category)

    @extend_schema(
        tags=['Categories'],
        summary='Delete node',
        request=NodeDeleteSerializer,
        responses={200: CategorySerializer},
    )
    def delete(self, request, category_id):
        serializer = NodeDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.delete_node(
            category_id=category_id,
            path=serializer.validated_data['path'],
        )
        return self.category_response(category)


class SubcategoryListView(TaxonomyAPIView):
    """Add legacy subcategories."""

    @extend_schema(
        tags=['Categories'],
        summary='Add subcategory',
        request=SubcategoryNameSerializer,
        responses={201: CategorySerializer},
    )
    def post(self, request, category_id):
        serializer = SubcategoryNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.add_subcategory(
            category_id, serializer.validated_data['name']
        )
        return self.category_response(category, status.HTTP_201_CREATED)


class SubcategoryDetailView(TaxonomyAPIView):
    """Rename and delete legacy subcategories."""

    @extend_schema(
        tags=['Categories'],
        summary='Rename subcategory',
        request=SubcategoryRenameSerializer,
        responses={200: CategorySerializer},
    )
    def patch(self, request, category_id, sub_id):
        serializer = SubcategoryRenameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.update_subcategory(
            category_id, sub_id, serializer.validated_data.get('name')
        )
        return self.category_response(category)

    @extend_schema(
        tags=['Categories'],
        summary='Delete subcategory',
        responses={200: CategorySerializer},
    )
    def delete(self, request, category_id, sub_id):
        category = self.taxonomy_service.delete_subcategory(category_id, sub_id)
        return self.category_response(category)


class SecondaryListView(TaxonomyAPIView):
    """Add secondary subcategories under a legacy subcategory."""

    @extend_schema(
        tags=['Categories'],
        summary='Add secondary subcategory',
        request=SubcategoryNameSerializer,
        responses={201: CategorySerializer},
    )
    def post(self, request, category_id, sub_id):
        serializer = SubcategoryNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.add_secondary(
            category_id, sub_id, serializer.validated_data['name']
        )
        return self.category_response(category, status.HTTP_201_CREATED)


class SecondaryDetailView(TaxonomyAPIView):
    """Rename and delete secondary subcategories."""

    @extend_schema(
        tags=['Categories'],
        summary='Rename secondary subcategory',
        request=SubcategoryRenameSerializer,
        responses={200: CategorySerializer},
    )
    def patch(self, request, category_id, sub_id, sec_id):
        serializer = SubcategoryRenameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = self.taxonomy_service.update_secondary(
            category_id, sub_id, sec_id, serializer.validated_data.get('name')
        )
        return self.category_response(category)

    @extend_schema(
        tags=['Categories'],
        summary='Delete secondary subcategory',
        responses={200: CategorySerializer},
    )
    def delete(self, request, category_id, sub_id, sec_id):
        category = self.taxonomy_service.delete_secondary(category_id, sub_id, sec_id)
        return self.category_response(category)
