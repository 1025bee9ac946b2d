"""
Taxonomy tree engine.

Both taxonomy structures of a category are stored as nested lists of dicts.
Every operation here works on those lists in place and is addressed by a
path of entry ids, starting at the root list.

A ``TreeShape`` describes one structure: how deep it may go, which key holds
the children of an entry at a given depth, and whether slugs must be unique
among siblings at that depth. The generic node tree and the legacy
subcategory tree are two shapes over the same code.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from shared.utils import generate_uuid, slugify

from .exceptions import (
    InvalidTaxonomyNameError,
    TaxonomyDepthExceededError,
    TaxonomyEntryExistsError,
    TaxonomyEntryNotFoundError,
)

Entry = Dict[str, Any]


@dataclass(frozen=True)
class TreeShape:
    """Structural rules for one taxonomy tree.

    Per-depth tuples repeat their last element for deeper levels.
    A ``None`` children key marks a leaf tier.
    """

    labels: Tuple[str, ...]
    children_keys: Tuple[Optional[str], ...]
    unique_slugs: Tuple[bool, ...]
    max_depth: int
    legacy_refs: bool = False

    @staticmethod
    def _at(values: Tuple, depth: int):
        return values[min(depth, len(values) - 1)]

    def label(self, depth: int) -> str:
        return self._at(self.labels, depth)

    def children_key(self, depth: int) -> Optional[str]:
        return self._at(self.children_keys, depth)

    def slug_unique(self, depth: int) -> bool:
        return self._at(self.unique_slugs, depth)


NODE_TREE = TreeShape(
    labels=('Node',),
    children_keys=('children',),
    unique_slugs=(True,),
    max_depth=4,
    legacy_refs=True,
)

# Secondary subcategory slugs are not checked for uniqueness (legacy data).
LEGACY_TREE = TreeShape(
    labels=('Subcategory', 'Secondary subcategory'),
    children_keys=('secondary_subcategories', None),
    unique_slugs=(True, False),
    max_depth=1,
)


@dataclass
class Location:
    """Result of resolving a path.

    ``ancestors`` holds every entry on the path in order, so ``resolved`` is
    its last element. ``parent_list`` directly contains ``resolved``;
    ``children`` is the list new entries go into (the root itself for an
    empty path).
    """

    ancestors: List[Entry] = field(default_factory=list)
    resolved: Optional[Entry] = None
    parent_list: Optional[List[Entry]] = None
    children: Optional[List[Entry]] = None


def _find(entries: List[Entry], entry_id) -> Optional[Entry]:
    for entry in entries:
        if str(entry.get('id')) == str(entry_id):
            return entry
    return None


def locate(root: List[Entry], path: Sequence, shape: TreeShape) -> Location:
    """
    Walk ``path`` from ``root`` and return the resolved location.

    Raises:
        TaxonomyEntryNotFoundError: naming the first segment that does not
            resolve.
    """
    location = Location(parent_list=root, children=root)
    current = root

    for depth, segment in enumerate(path):
        entry = _find(current, segment)
        if entry is None:
            raise TaxonomyEntryNotFoundError(shape.label(depth), segment)

        location.ancestors.append(entry)
        location.resolved = entry
        location.parent_list = current

        key = shape.children_key(depth)
        if key is None:
            current = []
            location.children = None
        else:
            if not isinstance(entry.get(key), list):
                entry[key] = []
            current = entry[key]
            location.children = current

    return location


def _clean_name(name: Optional[str]) -> str:
    return (name or '').strip()


def _require_slug(name: str, label: str) -> str:
    slug = slugify(name)
    if not slug:
        raise InvalidTaxonomyNameError(
            f"{label} name must contain at least one letter or digit"
        )
    return slug


def insert_entry(
    root: List[Entry],
    parent_path: Sequence,
    name: Optional[str],
    shape: TreeShape,
    legacy_ref: Optional[str] = None,
) -> Entry:
    """
    Append a new entry under ``parent_path`` and return it.

    Checks run in order: name, parent path, depth, sibling uniqueness.
    """
    depth = len(parent_path)
    label = shape.label(depth)

    name = _clean_name(name)
    if not name:
        raise InvalidTaxonomyNameError(f"{label} name is required")
    slug = _require_slug(name, label)

    location = locate(root, parent_path, shape)

    if depth > shape.max_depth or location.children is None:
        raise TaxonomyDepthExceededError(label, shape.max_depth)

    siblings = location.children
    if shape.slug_unique(depth) and any(s.get('slug') == slug for s in siblings):
        raise TaxonomyEntryExistsError(label, slug)
    if shape.legacy_refs and legacy_ref:
        if any(s.get('legacy_ref') == legacy_ref for s in siblings):
            raise TaxonomyEntryExistsError(label, legacy_ref)

    entry = {'id': generate_uuid(), 'name': name, 'slug': slug}
    if shape.legacy_refs:
        entry['legacy_ref'] = legacy_ref or None
    key = shape.children_key(depth)
    if key is not None:
        entry[key] = []

    siblings.append(entry)
    return entry


def rename_entry(
    root: List[Entry],
    full_path: Sequence,
    name: Optional[str],
    shape: TreeShape,
) -> Entry:
    """
    Rename the entry at ``full_path`` in place.

    A blank name leaves the entry untouched. Siblings are not re-checked for
    slug clashes.
    """
    location = locate(root, full_path, shape)
    entry = location.resolved
    if entry is None:
        raise TaxonomyEntryNotFoundError(shape.label(0), None)

    name = _clean_name(name)
    if name:
        slug = _require_slug(name, shape.label(len(full_path) - 1))
        entry['name'] = name
        entry['slug'] = slug
    return entry


def delete_entry(root: List[Entry], full_path: Sequence, shape: TreeShape) -> Entry:
    """
    Remove the entry at ``full_path`` together with its subtree.

    The sibling list is spliced in place so the same list object stays
    attached to its parent.
    """
    if not full_path:
        raise TaxonomyEntryNotFoundError(shape.label(0), None)

    parent_path, target = list(full_path[:-1]), full_path[-1]
    depth = len(parent_path)
    location = locate(root, parent_path, shape)
    siblings = location.children or []

    for index, entry in enumerate(siblings):
        if str(entry.get('id')) == str(target):
            return siblings.pop(index)

    raise TaxonomyEntryNotFoundError(shape.label(depth), target)


def iter_entries(
    root: List[Entry],
    shape: TreeShape,
    path: Tuple = (),
) -> Iterator[Tuple[Tuple, Entry]]:
    """Yield ``(path, entry)`` for every entry, depth first."""
    key = shape.children_key(len(path))
    for entry in root:
        entry_path = path + (entry.get('id'),)
        yield entry_path, entry
        if key is not None:
            yield from iter_entries(entry.get(key) or [], shape, entry_path)


def find_duplicate_slugs(
    root: List[Entry],
    shape: TreeShape,
    path: Tuple = (),
) -> List[Tuple[Tuple, str]]:
    """Return ``(parent_path, slug)`` for every slug shared by siblings."""
    counts = Counter(entry.get('slug') for entry in root)
    duplicates = [(path, slug) for slug, count in counts.items() if count > 1]

    key = shape.children_key(len(path))
    if key is not None:
        for entry in root:
            duplicates.extend(
                find_duplicate_slugs(entry.get(key) or [], shape, path + (entry.get('id'),))
            )
    return duplicates
