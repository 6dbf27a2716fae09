"""URL validation utilities."""

import ipaddress
import re
from urllib.parse import urlparse

from pulseaudit.errors.exceptions import ValidationError

_DOMAIN_PATTERN = re.compile(r"^[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_url(url: str) -> str:
    """
    Clean and validate a target URL before sending it to PSI.

    Adds ``https://`` when no scheme is given. PSI can only analyze publicly
    reachable pages, so localhost and private addresses are rejected.
    Internationalized domain names are accepted and returned unchanged.
    Returns the cleaned URL or raises ValidationError.
    """
    if not url or not url.strip():
        raise ValidationError("URL is required and must be a non-empty string")

    url = url.strip()

    if not url.startswith(("http://", "https://")):
        if "://" in url:
            raise ValidationError("URL must use http or https protocol")
        url = f"https://{url}"

    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError as e:
        raise ValidationError(f"Invalid URL format: {str(e)}")

    hostname = parsed.hostname
    if not hostname:
        raise ValidationError("URL must include a valid domain")

    if port is not None and not (1 <= port <= 65535):
        raise ValidationError(f"Port {port} is out of valid range (1-65535)")

    if hostname == "localhost":
        raise ValidationError("PageSpeed Insights cannot analyze localhost URLs")

    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        # Internationalized names are checked in their ASCII (punycode) form
        try:
            ascii_hostname = hostname.encode("idna").decode("ascii")
        except UnicodeError:
            raise ValidationError("URL domain format appears invalid")
        if not _DOMAIN_PATTERN.match(ascii_hostname):
            raise ValidationError("URL domain format appears invalid")
    else:
        if not address.is_global:
            raise ValidationError("PageSpeed Insights can only analyze public addresses")

    return url
