"""Input validation utilities for query parameters."""

import re

# Maximum lengths for common fields
MAX_SEARCH_LENGTH = 200
MAX_USERNAME_LENGTH = 100

# Usernames: letters, digits and . _ - only
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9._\-]+$")


def sanitize_search(search: str | None, max_length: int = MAX_SEARCH_LENGTH) -> str | None:
    """Sanitize search input.

    Args:
        search: Raw search string
        max_length: Maximum allowed length

    Returns:
        Sanitized search string or None
    """
    if search is None:
        return None

    search = search[:max_length]

    # SQLAlchemy parameterizes these anyway
    search = search.replace(";", "").replace("--", "")

    return search.strip() or None


def escape_like_wildcards(value: str) -> str:
    """Escape SQL LIKE wildcards so they match literally.

    Args:
        value: Raw string value to escape

    Returns:
        Escaped string safe for use in LIKE patterns
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def normalize_username(username: str | None) -> str | None:
    """Trim a username and reject values outside the allowed pattern.

    Args:
        username: Raw username

    Returns:
        Normalized username or None if invalid
    """
    if username is None:
        return None

    username = username.strip()
    if not username or len(username) > MAX_USERNAME_LENGTH:
        return None

    if not USERNAME_PATTERN.match(username):
        return None

    return username
