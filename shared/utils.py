"""
Shared utility functions.
"""
import re
import uuid


def generate_uuid() -> str:
    """Generate a new UUID hex string."""
    return uuid.uuid4().hex


def slugify(text: str) -> str:
    """
    Convert text to a machine-safe slug.

    Only ``[a-z0-9-]`` survives, so the result can be empty (e.g. for "!!!").
    Callers must reject an empty slug.

    >>> slugify("  Home & Garden!!  ")
    'home-garden'
    """
    text = str(text).lower().strip()
    text = re.sub(r'\s+', '-', text)
    text = re.sub(r'[^a-z0-9-]', '', text)
    text = re.sub(r'-+', '-', text)
    return text

