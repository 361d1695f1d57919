"""
Input validation helpers for NichePulse.

Used to sanitize query parameters and to read numeric fields out of
vendor payloads, which arrive as ints, floats, numeric strings or null.
"""

import logging
import re
from typing import Optional, List
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


MAX_NICHE_LENGTH = 64


# ============== Numbers ==============

def safe_int(value, default: int = 0, min_val: Optional[int] = None, max_val: Optional[int] = None) -> int:
    """
    Convert a vendor value to int with optional bounds.

    Accepts ints, floats and numeric strings ("1200", "1.2e3"). Booleans and
    anything unparseable fall back to the default.

    Args:
        value: The value to convert
        default: Value used when conversion fails
        min_val: Lower bound (optional)
        max_val: Upper bound (optional)
    """
    if value is None or isinstance(value, bool):
        result = default
    else:
        try:
            result = int(value)
        except (ValueError, TypeError):
            try:
                result = int(float(value))
            except (ValueError, TypeError, OverflowError):
                result = default

    if min_val is not None:
        result = max(min_val, result)
    if max_val is not None:
        result = min(max_val, result)

    return result


# ============== Strings ==============

def validate_string(
    value: Optional[str],
    max_length: int = 255,
    default: str = '',
    strip: bool = True,
    allow_empty: bool = True
) -> str:
    """
    Sanitize a string input: strip, fall back to default, truncate.
    """
    if value is None:
        return default

    value = str(value)

    if strip:
        value = value.strip()

    if not allow_empty and not value:
        return default

    if len(value) > max_length:
        value = value[:max_length]

    return value


def safe_str(value, default: str = '') -> str:
    """
    Return a vendor value only if it is already a string.

    Objects and lists where a string was expected become the default
    instead of their repr.
    """
    return value if isinstance(value, str) else default


def first_url(value) -> str:
    """
    Pull a URL out of a vendor media field.

    Covers arrive as a plain string, as {"url_list": [...]} / {"url": ...},
    or as a list of either. Returns "" when nothing usable is found.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return first_url(value.get("url_list")) or first_url(value.get("url"))
    if isinstance(value, list):
        for entry in value:
            url = first_url(entry)
            if url:
                return url
    return ''


def validate_niche(niche: Optional[str]) -> str:
    """
    Clean a niche query parameter.

    Control characters are removed and whitespace runs collapsed; the
    result is capped at MAX_NICHE_LENGTH. May return an empty string.
    """
    cleaned = validate_string(niche, max_length=MAX_NICHE_LENGTH * 2)
    cleaned = re.sub(r"[\x00-\x1f\x7f]", "", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned[:MAX_NICHE_LENGTH].strip()


# ============== URLs ==============

def validate_url(url: str, require_https: bool = False, allowed_schemes: Optional[List[str]] = None) -> bool:
    """
    Check that a URL has an allowed scheme and a host.

    Args:
        url: The URL to validate
        require_https: Reject plain http
        allowed_schemes: Defaults to http and https

    Returns:
        True if valid, False otherwise
    """
    if not url:
        return False

    try:
        result = urlparse(url)
    except ValueError:
        return False

    if allowed_schemes is None:
        allowed_schemes = ['http', 'https']

    if result.scheme not in allowed_schemes:
        return False

    if require_https and result.scheme != 'https':
        return False

    return bool(result.netloc)
