import re

_ISBN_SEPARATORS = re.compile(r"[\s-]+")
_ISBN_10 = re.compile(r"^\d{9}[\dX]$")
_ISBN_13 = re.compile(r"^\d{13}$")


def normalize_isbn(value: str) -> str:
    """
    Strip hyphens and whitespace from an ISBN and upper-case a trailing 'x'.
    Example: "978-0-261-10221-7" -> "9780261102217"
    """
    if not value:
        return value
    return _ISBN_SEPARATORS.sub("", value.strip()).upper()


def is_valid_isbn(value: str) -> bool:
    """True for a normalized ISBN-10 (may end in X) or ISBN-13."""
    if not value:
        return False
    return bool(_ISBN_10.match(value) or _ISBN_13.match(value))


def rating_stars(value) -> str:
    try:
        value = int(value)
    except (ValueError, TypeError):
        value = 0
    value = max(0, min(5, value))

    # Filled stars + empty stars
    return '★' * value + '☆' * (5 - value)
