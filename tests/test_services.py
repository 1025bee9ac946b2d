"""
Tests for the taxonomy service.
"""
import pytest

from modules.categories.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    CategoryVersionConflictError,
    InvalidTaxonomyNameError,
    TaxonomyDepthExceededError,
    TaxonomyEntryExistsError,
    TaxonomyEntryNotFoundError,
)
from modules.categories.models import CategoryModel
from modules.categories.repositories import CategoryRepository
from modules.categories.tree import NODE_TREE, iter_entries
from shared.utils import slugify


def reload(category):
    return CategoryModel.objects.get(pk=category.pk)


def node_ids(category):
    return {entry['id'] for _, entry in iter_entries(category.nodes, NODE_TREE)}


@pytest.mark.django_db
class TestCategories:
    """Tests for category CRUD."""

    def test_create_category_starts_empty(self, taxonomy_service, admin_user):
        category = taxonomy_service.create_category(
            name='Home & Garden', icon='leaf', color='#00ff00', owner=admin_user
        )

        stored = reload(category)
        assert stored.slug == 'home-garden'
        assert stored.created_by == admin_user
        assert stored.nodes == []
        assert stored.legacy_subcategories == []
        assert stored.version == 0

    def test_create_requires_name(self, taxonomy_service):
        with pytest.raises(InvalidTaxonomyNameError):
            taxonomy_service.create_category(name='   ')

    def test_create_rejects_name_without_slug(self, taxonomy_service):
        with pytest.raises(InvalidTaxonomyNameError):
            taxonomy_service.create_category(name='***')

    def test_duplicate_name_conflicts(self, taxonomy_service):
        taxonomy_service.create_category(name='Electronics')

        with pytest.raises(CategoryAlreadyExistsError):
            taxonomy_service.create_category(name='Electronics')
        assert CategoryModel.objects.count() == 1

    def test_duplicate_slug_conflicts(self, taxonomy_service):
        taxonomy_service.create_category(name='Home Garden')

        with pytest.raises(CategoryAlreadyExistsError):
            taxonomy_service.create_category(name='home  garden!')

    def test_list_newest_first(self, taxonomy_service):
        first = taxonomy_service.create_category(name='First')
        second = taxonomy_service.create_category(name='Second')

        listed = taxonomy_service.list_categories()

        assert [c.id for c in listed] == [second.id, first.id]

    def test_update_category(self, taxonomy_service, category):
        updated = taxonomy_service.update_category(category.id, name='Apparel', color='#000000')

        stored = reload(updated)
        assert stored.name == 'Apparel'
        assert stored.slug == 'apparel'
        assert stored.color == '#000000'
        assert stored.icon == 'shirt'

    def test_update_blank_name_keeps_name(self, taxonomy_service, category):
        taxonomy_service.update_category(category.id, name='', icon='tag')

        stored = reload(category)
        assert stored.name == 'Fashion'
        assert stored.icon == 'tag'

    def test_update_to_taken_name_conflicts(self, taxonomy_service, category):
        taxonomy_service.create_category(name='Electronics')

        with pytest.raises(CategoryAlreadyExistsError):
            taxonomy_service.update_category(category.id, name='electronics')

    def test_update_missing_category(self, taxonomy_service):
        with pytest.raises(CategoryNotFoundError):
            taxonomy_service.update_category(999, name='Nothing')

    def test_delete_category(self, taxonomy_service, category):
        assert taxonomy_service.delete_category(category.id) is True
        assert not CategoryModel.objects.filter(pk=category.pk).exists()

    def test_delete_missing_category(self, taxonomy_service):
        with pytest.raises(CategoryNotFoundError):
            taxonomy_service.delete_category(999)


@pytest.mark.django_db
class TestNodes:
    """Tests for the generic node tree."""

    def test_nested_scenario_up_to_deepest_level(self, taxonomy_service):
        category = taxonomy_service.create_category(name='Fashion')
        path = []
        for name in ['Men', 'Shirts', 'Formal', 'Cotton', 'Organic']:
            category = taxonomy_service.add_node(category.id, path, name)
            parent = category.nodes
            for node_id in path:
                parent = next(n for n in parent if n['id'] == node_id)['children']
            path.append(next(n for n in parent if n['name'] == name)['id'])

        with pytest.raises(TaxonomyDepthExceededError):
            taxonomy_service.add_node(category.id, path, 'Too Deep')

        stored = reload(category)
        assert len(node_ids(stored)) == 5

    def test_add_duplicate_top_level_conflicts(self, taxonomy_service, category):
        taxonomy_service.add_node(category.id, [], 'phones')

        with pytest.raises(TaxonomyEntryExistsError):
            taxonomy_service.add_node(category.id, [], 'Phones')
        assert len(reload(category).nodes) == 1

    def test_add_with_duplicate_legacy_ref_conflicts(self, taxonomy_service, category):
        taxonomy_service.add_node(category.id, [], 'Men', legacy_ref='sub-1')

        with pytest.raises(TaxonomyEntryExistsError):
            taxonomy_service.add_node(category.id, [], 'Women', legacy_ref='sub-1')

    def test_add_under_missing_parent(self, taxonomy_service, category):
        with pytest.raises(TaxonomyEntryNotFoundError):
            taxonomy_service.add_node(category.id, ['missing'], 'Shirts')

    def test_add_to_missing_category(self, taxonomy_service, db):
        with pytest.raises(CategoryNotFoundError):
            taxonomy_service.add_node(999, [], 'Shirts')

    def test_add_requires_name(self, taxonomy_service, category):
        with pytest.raises(InvalidTaxonomyNameError):
            taxonomy_service.add_node(category.id, [], '')

    def test_rename_round_trip(self, taxonomy_service, category):
        category = taxonomy_service.add_node(category.id, [], 'Men')
        men_id = category.nodes[0]['id']
        category = taxonomy_service.add_node(category.id, [men_id], 'Shirts')
        children_before = category.nodes[0]['children']

        taxonomy_service.update_node(category.id, [men_id], name='Renamed')

        stored = reload(category)
        assert stored.nodes[0]['name'] == 'Renamed'
        assert stored.nodes[0]['slug'] == slugify('Renamed')
        assert stored.nodes[0]['children'] == children_before

    def test_rename_missing_node(self, taxonomy_service, category):
        with pytest.raises(TaxonomyEntryNotFoundError):
            taxonomy_service.update_node(category.id, ['missing'], name='Renamed')

    def test_delete_removes_subtree(self, taxonomy_service, category):
        category = taxonomy_service.add_node(category.id, [], 'Men')
        men_id = category.nodes[0]['id']
        category = taxonomy_service.add_node(category.id, [men_id], 'Shirts')
        shirts_id = category.nodes[0]['children'][0]['id']
        category = taxonomy_service.add_node(category.id, [men_id, shirts_id], 'Formal')
        category = taxonomy_service.add_node(category.id, [], 'Women')
        removed = node_ids(category) - {category.nodes[1]['id']}

        taxonomy_service.delete_node(category.id, [men_id])

        stored = reload(category)
        assert not node_ids(stored) & removed
        assert [n['name'] for n in stored.nodes] == ['Women']

    def test_delete_missing_node_leaves_category_unchanged(self, taxonomy_service, category):
        category = taxonomy_service.add_node(category.id, [], 'Men')
        men_id = category.nodes[0]['id']
        category = taxonomy_service.add_node(category.id, [men_id], 'Shirts')
        before = reload(category)

        with pytest.raises(TaxonomyEntryNotFoundError):
            taxonomy_service.delete_node(category.id, [men_id, 'missing'])

        after = reload(category)
        assert after.nodes == before.nodes
        assert after.version == before.version

    def test_each_write_bumps_version(self, taxonomy_service, category):
        taxonomy_service.add_node(category.id, [], 'Men')
        taxonomy_service.add_node(category.id, [], 'Women')

        assert reload(category).version == 2


@pytest.mark.django_db
class TestLegacySubcategories:
    """Tests for the two-tier subcategory structure."""

    def test_add_update_delete_subcategory(self, taxonomy_service, category):
        category = taxonomy_service.add_subcategory(category.id, 'Phones')
        sub_id = category.legacy_subcategories[0]['id']

        taxonomy_service.update_subcategory(category.id, sub_id, 'Mobile Phones')
        stored = reload(category)
        assert stored.legacy_subcategories[0]['slug'] == 'mobile-phones'
        assert stored.legacy_subcategories[0]['secondary_subcategories'] == []

        taxonomy_service.delete_subcategory(category.id, sub_id)
        assert reload(category).legacy_subcategories == []

    def test_duplicate_subcategory_conflicts(self, taxonomy_service, category):
        taxonomy_service.add_subcategory(category.id, 'Phones')

        with pytest.raises(TaxonomyEntryExistsError):
            taxonomy_service.add_subcategory(category.id, 'PHONES')

    def test_secondary_lifecycle(self, taxonomy_service, category):
        category = taxonomy_service.add_subcategory(category.id, 'Phones')
        sub_id = category.legacy_subcategories[0]['id']
        category = taxonomy_service.add_secondary(category.id, sub_id, 'Android')
        category = taxonomy_service.add_secondary(category.id, sub_id, 'Android')
        secondaries = category.legacy_subcategories[0]['secondary_subcategories']
        assert [s['slug'] for s in secondaries] == ['android', 'android']

        sec_id = secondaries[0]['id']
        taxonomy_service.update_secondary(category.id, sub_id, sec_id, 'iOS')
        taxonomy_service.delete_secondary(category.id, sub_id, secondaries[1]['id'])

        stored = reload(category)
        assert stored.legacy_subcategories[0]['secondary_subcategories'] == [
            {'id': sec_id, 'name': 'iOS', 'slug': 'ios'}
        ]

    def test_secondary_under_missing_subcategory(self, taxonomy_service, category):
        with pytest.raises(TaxonomyEntryNotFoundError):
            taxonomy_service.add_secondary(category.id, 'missing', 'Android')

    def test_delete_missing_secondary(self, taxonomy_service, category):
        category = taxonomy_service.add_subcategory(category.id, 'Phones')
        sub_id = category.legacy_subcategories[0]['id']

        with pytest.raises(TaxonomyEntryNotFoundError):
            taxonomy_service.delete_secondary(category.id, sub_id, 'missing')

    def test_trees_are_independent(self, taxonomy_service, category):
        taxonomy_service.add_subcategory(category.id, 'Phones')
        taxonomy_service.add_node(category.id, [], 'Phones')

        stored = reload(category)
        assert len(stored.legacy_subcategories) == 1
        assert len(stored.nodes) == 1


@pytest.mark.django_db
class TestConcurrency:
    """Tests for optimistic concurrency on save."""

    def test_stale_save_rejected(self, category):
        repository = CategoryRepository()
        first = repository.load(category.id)
        second = repository.load(category.id)

        first.nodes.append({'id': 'a', 'name': 'A', 'slug': 'a', 'legacy_ref': None, 'children': []})
        repository.save(first)

        second.nodes.append({'id': 'b', 'name': 'B', 'slug': 'b', 'legacy_ref': None, 'children': []})
        with pytest.raises(CategoryVersionConflictError):
            repository.save(second)

        assert [n['id'] for n in reload(category).nodes] == ['a']

    def test_save_of_deleted_category(self, category):
        repository = CategoryRepository()
        loaded = repository.load(category.id)
        CategoryModel.objects.filter(pk=category.pk).delete()

        with pytest.raises(CategoryNotFoundError):
            repository.save(loaded)

    def test_load_with_invalid_id(self, db):
        with pytest.raises(CategoryNotFoundError):
            CategoryRepository().load('not-a-number')


@pytest.mark.django_db
class TestLegacyMigration:
    """Tests for carrying legacy subcategories into the node tree."""

    def test_migrate_copies_both_tiers(self, taxonomy_service, category):
        category = taxonomy_service.add_subcategory(category.id, 'Phones')
        sub_id = category.legacy_subcategories[0]['id']
        taxonomy_service.add_secondary(category.id, sub_id, 'Android')

        created = taxonomy_service.migrate_legacy_subcategories(category.id)

        stored = reload(category)
        assert created == 2
        assert stored.nodes[0]['legacy_ref'] == sub_id
        assert stored.nodes[0]['children'][0]['slug'] == 'android'

    def test_migrate_is_repeatable(self, taxonomy_service, category):
        taxonomy_service.add_subcategory(category.id, 'Phones')
        taxonomy_service.migrate_legacy_subcategories(category.id)
        version = reload(category).version

        assert taxonomy_service.migrate_legacy_subcategories(category.id) == 0
        assert reload(category).version == version

    def test_migrate_skips_duplicate_secondary_slugs(self, taxonomy_service, category):
        category = taxonomy_service.add_subcategory(category.id, 'Phones')
        sub_id = category.legacy_subcategories[0]['id']
        taxonomy_service.add_secondary(category.id, sub_id, 'Android')
        taxonomy_service.add_secondary(category.id, sub_id, 'Android')

        created = taxonomy_service.migrate_legacy_subcategories(category.id)

        stored = reload(category)
        assert created == 2
        assert len(stored.nodes[0]['children']) == 1

    def test_migrate_skips_names_without_slug(self, taxonomy_service, category, caplog):
        CategoryModel.objects.filter(pk=category.pk).update(legacy_subcategories=[
            {'id': 's1', 'name': '!!!', 'slug': '', 'secondary_subcategories': []},
            {
                'id': 's2',
                'name': 'Phones',
                'slug': 'phones',
                'secondary_subcategories': [{'id': 's3', 'name': '???', 'slug': ''}],
            },
        ])

        with caplog.at_level('WARNING', logger='modules.categories.services'):
            created = taxonomy_service.migrate_legacy_subcategories(category.id)

        stored = reload(category)
        assert created == 1
        assert [n['legacy_ref'] for n in stored.nodes] == ['s2']
        assert stored.nodes[0]['children'] == []
        assert 'Skipped legacy entry s1' in caplog.text
        assert 'Skipped legacy entry s3' in caplog.text


@pytest.mark.django_db
class TestDuplicateReport:
    """Tests for the sibling slug report."""

    def test_reports_rename_clash(self, taxonomy_service, category):
        category = taxonomy_service.add_node(category.id, [], 'Men')
        category = taxonomy_service.add_node(category.id, [], 'Women')
        taxonomy_service.update_node(category.id, [category.nodes[1]['id']], name='Men')

        report = taxonomy_service.find_duplicate_slugs()

        assert report == [{
            'category_id': category.id,
            'tree': 'nodes',
            'parent_path': [],
            'slug': 'men',
        }]

    def test_clean_taxonomy_reports_nothing(self, taxonomy_service, category):
        taxonomy_service.add_node(category.id, [], 'Men')
        assert taxonomy_service.find_duplicate_slugs() == []
