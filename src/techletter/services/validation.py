"""Article URL validation for Techletter."""

from urllib.parse import urlsplit

from techletter.errors import InputValidationError


def validate_url(url: str, domain: str) -> bool:
    """Check that a URL is absolute and hosted on the expected domain.

    The host match is a case-insensitive substring match, so subdomains such as
    ``www.`` or ``m.`` are accepted. Never raises.

    Args:
        url: Candidate URL.
        domain: Domain the host must contain, e.g. ``techcrunch.com``.

    Returns:
        True if the URL parses with a scheme and host containing ``domain``.
    """
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except (AttributeError, ValueError):
        return False

    if not parts.scheme or not hostname:
        return False
    return domain.lower() in hostname.lower()


def check_url(url: str | None, domain: str, source_name: str) -> str:
    """Validate a submitted URL and return it stripped of whitespace.

    Raises:
        InputValidationError: If the URL is empty or not on ``domain``.
    """
    if url is None or not url.strip():
        raise InputValidationError("Please enter a URL")
    if not validate_url(url, domain):
        raise InputValidationError(f"Please enter a valid {source_name} article URL")
    return url.strip()
