"""Human-readable project keys (e.g. ACME-7Q2X) for converted cases and new projects."""

import re
import secrets
import uuid
from collections.abc import Callable

KEY_SLUG_MAX_LEN = 12
KEY_SUFFIX_LEN = 4
DEFAULT_KEY_SLUG = "PROJ"
DEFAULT_MAX_ATTEMPTS = 5

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_NON_ALNUM = re.compile(r"[^A-Z0-9]+")


def slugify_key(value: str | None) -> str:
    """Upper-case, collapse non-alphanumerics to '-', trim dashes, cap at 12 chars."""
    slug = _NON_ALNUM.sub("-", (value or "").upper()).strip("-")
    return slug[:KEY_SLUG_MAX_LEN]


def _random_suffix() -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(KEY_SUFFIX_LEN))


def fallback_project_key() -> str:
    return f"{DEFAULT_KEY_SLUG}-{uuid.uuid4().hex[:8].upper()}"


def generate_project_key(
    base: str | None,
    key_exists: Callable[[str], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """
    Return a key not reported taken by key_exists.

    Tries ``{slug}-{4 random chars}`` up to max_attempts times, then falls back
    to a UUID-derived key instead of failing.
    """
    slug = slugify_key(base) or DEFAULT_KEY_SLUG
    for _ in range(max_attempts):
        candidate = f"{slug}-{_random_suffix()}"
        if not key_exists(candidate):
            return candidate
    return fallback_project_key()
