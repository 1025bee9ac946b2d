# Shared module for modular monolith architecture
#
# This module contains common utilities shared across all modules:
# - exceptions.py: Base exceptions and custom exception handler
# - permissions.py: Common DRF permission classes
# - utils.py: Slug and identifier helpers
# - cache.py: Redis cache utilities
