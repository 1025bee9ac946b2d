"""
Categories module exceptions.
"""
from shared.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class CategoryNotFoundError(NotFoundError):
    """Raised when category is not found."""

    def __init__(self, category_id=None):
        self.category_id = category_id
        super().__init__('Category', category_id, code='CATEGORY_NOT_FOUND')


class CategoryAlreadyExistsError(ConflictError):
    """Raised when category already exists."""

    def __init__(self, name: str):
        self.name = name
        message = f"Category already exists: {name}"
        super().__init__(message, code='CATEGORY_ALREADY_EXISTS')


class CategoryVersionConflictError(ConflictError):
    """Raised when a category was modified by someone else since it was loaded."""

    def __init__(self, category_id, version: int):
        self.category_id = category_id
        self.version = version
        message = f"Category {category_id} was modified concurrently (expected version {version})"
        super().__init__(message, code='CATEGORY_VERSION_CONFLICT')


class InvalidTaxonomyNameError(ValidationError):
    """Raised when a name is missing or normalizes to an empty slug."""

    def __init__(self, message: str, field: str = 'name'):
        super().__init__(message, field=field)


class TaxonomyEntryNotFoundError(NotFoundError):
    """Raised when a path segment does not resolve to an entry."""

    def __init__(self, entity_name: str, segment):
        self.segment = segment
        super().__init__(entity_name, segment, code='TAXONOMY_ENTRY_NOT_FOUND')


class TaxonomyEntryExistsError(ConflictError):
    """Raised when a sibling already uses the slug or legacy reference."""

    def __init__(self, entity_name: str, value: str):
        self.entity_name = entity_name
        self.value = value
        message = f"{entity_name} already exists: {value}"
        super().__init__(message, code='TAXONOMY_ENTRY_EXISTS')


class TaxonomyDepthExceededError(BusinessRuleError):
    """Raised when an insert would go below the deepest allowed level."""

    def __init__(self, entity_name: str, max_depth: int):
        self.max_depth = max_depth
        message = f"Maximum {entity_name.lower()} depth ({max_depth}) reached"
        super().__init__(message, rule='max_depth')
