"""Tests for URL validation."""

import pytest

from pulseaudit.errors.exceptions import ValidationError
from pulseaudit.services.validators import validate_url


class TestValidateUrl:
    """Test URL cleaning and validation."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("example.com", "https://example.com"),
            ("  example.com/path?q=1  ", "https://example.com/path?q=1"),
            ("http://example.com", "http://example.com"),
            ("https://sub.example.co.uk:8443/", "https://sub.example.co.uk:8443/"),
            ("https://8.8.8.8/", "https://8.8.8.8/"),
            ("bücher.de", "https://bücher.de"),
            ("https://münchen.example.com/karte", "https://münchen.example.com/karte"),
        ],
    )
    def test_valid_urls(self, raw, expected):
        assert validate_url(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "ftp://example.com",
            "https://",
            "https://localhost:3000",
            "https://192.168.1.10",
            "https://127.0.0.1",
            "https://not_a_domain",
            "https://example.com:99999",
            "https://bad..domain.com",
        ],
    )
    def test_invalid_urls(self, raw):
        with pytest.raises(ValidationError):
            validate_url(raw)
