"""Turn free-text project names into package identifiers."""

from __future__ import annotations

import re

__all__ = ["DEFAULT_SLUG", "manifest_file_name", "sanitize", "slugify"]


DEFAULT_SLUG = "office-add-in"

_SEPARATORS = re.compile(r"[\s\-_]+")
_INVALID = re.compile(r"[^a-z0-9 ]")
_REPEATED = re.compile(r" +")


def slugify(value: str, *, separator: str = "-") -> str:
    """Create a lowercase ASCII slug from ``value``.

    Whitespace, hyphens and underscores separate words. Every other character
    outside ``[a-z0-9]`` is dropped without splitting the word it sits in, so
    ``"Some's app"`` becomes ``"somes-app"``. Non-ASCII letters and digits are
    dropped too. The result may be empty.
    """

    text = _SEPARATORS.sub(" ", str(value).lower())
    text = _INVALID.sub("", text)
    text = _REPEATED.sub(" ", text).strip()
    return text.replace(" ", separator)


def sanitize(display_name: str) -> str:
    """Return the package-safe slug for ``display_name``.

    Never raises. Names without a single ASCII letter or digit fall back to
    :data:`DEFAULT_SLUG`.
    """

    return slugify(display_name) or DEFAULT_SLUG


def manifest_file_name(slug: str) -> str:
    return f"manifest-{slug}.xml"
