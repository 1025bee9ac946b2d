"""
Categories URL configuration.
"""
from django.urls import path

from .views import (
    CategoryListCreateView,
    CategoryDetailView,
    CategoryNodesView,
    SubcategoryListView,
    SubcategoryDetailView,
    SecondaryListView,
    SecondaryDetailView,
)

app_name = 'categories'

urlpatterns = [
    path('', CategoryListCreateView.as_view(), name='category-list-create'),
    path('<int:category_id>/', CategoryDetailView.as_view(), name='category-detail'),
    path('<int:category_id>/nodes/', CategoryNodesView.as_view(), name='category-nodes'),
    path(
        '<int:category_id>/subcategories/',
        SubcategoryListView.as_view(),
        name='subcategory-list',
    ),
    path(
        '<int:category_id>/subcategories/<str:sub_id>/',
        SubcategoryDetailView.as_view(),
        name='subcategory-detail',
    ),
    path(
        '<int:category_id>/subcategories/<str:sub_id>/secondary/',
        SecondaryListView.as_view(),
        name='secondary-list',
    ),
    path(
        '<int:category_id>/subcategories/<str:sub_id>/secondary/<str:sec_id>/',
        SecondaryDetailView.as_view(),
        name='secondary-detail',
    ),
]
