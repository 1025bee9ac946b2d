#!/usr/bin/env python
"""Copy legacy subcategories of every category into the node tree."""
import os
import sys
import django

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')
django.setup()

from modules.categories.services import TaxonomyService
from shared.exceptions import AppException


def main():
    service = TaxonomyService()

    print("=" * 60)
    print("Legacy subcategories -> nodes")
    print("=" * 60)

    total = 0
    failed = 0
    for category in service.list_categories():
        try:
            created = service.migrate_legacy_subcategories(category.id)
        except AppException as e:
            failed += 1
            print(f"✗ [{category.id}] {category.name}: {e.message}")
            continue
        total += created
        print(f"✓ [{category.id}] {category.name}: {created} nodes created")

    print("=" * 60)
    print(f"Done: {total} nodes created, {failed} categories failed")


if __name__ == '__main__':
    main()
