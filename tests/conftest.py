"""
Pytest configuration and fixtures.
"""
import pytest


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty cache."""
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Create an API client for testing."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def user_model():
    """Get the user model."""
    from django.contrib.auth import get_user_model
    return get_user_model()


@pytest.fixture
def create_user(db, user_model):
    """Factory fixture to create users."""
    def _create_user(
        username='testuser',
        email='test@example.com',
        password='testpass123',
        **kwargs
    ):
        return user_model.objects.create_user(
            username=username,
            email=email,
            password=password,
            **kwargs
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    """Create an authenticated API client."""
    user = create_user()
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def admin_user(db, user_model):
    """Create an admin user."""
    return user_model.objects.create_superuser(
        username='admin',
        email='admin@example.com',
        password='adminpass123',
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    """Create an authenticated admin API client."""
    api_client.force_authenticate(user=admin_user)
    return api_client


# Service fixtures

@pytest.fixture
def taxonomy_service():
    """Get taxonomy service instance."""
    from modules.categories.services import TaxonomyService
    return TaxonomyService()


# Model fixtures

@pytest.fixture
def category(db, taxonomy_service):
    """Create a test category."""
    return taxonomy_service.create_category(name='Fashion', icon='shirt', color='#ff0000')
