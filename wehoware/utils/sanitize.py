"""Slug and search-input sanitization utilities."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_LIKE_SPECIALS = re.compile(r"([\\%_])")


def slugify(value: str, fallback: str = "item") -> str:
    """Lowercase, hyphen-separated slug for titles ("Hello, World!" -> "hello-world")."""
    slug = _NON_ALNUM.sub("-", value.strip().lower())
    slug = re.sub(r"-{2,}", "-", slug).strip("-")
    return slug or fallback


def like_pattern(term: str) -> str:
    """Build a case-insensitive LIKE pattern with wildcards escaped (escape char ``\\``)."""
    escaped = _LIKE_SPECIALS.sub(r"\\\1", term.strip())
    return f"%{escaped}%"
