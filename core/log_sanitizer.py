"""
Centralized Log Sanitizer
=========================

Redacts provider credentials before they reach a log line:
- API keys in query strings (The Odds API takes `apiKey=` in the URL)
- Authorization / X-API-Key headers
- Values of configured secret environment variables

Usage:
    from core.log_sanitizer import sanitize_url, sanitize_dict

    logger.info(f"GET {sanitize_url(url)}")
"""

import os
import re
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

# Header / parameter names that are always redacted
SENSITIVE_NAMES = frozenset({
    "apikey",
    "api_key",
    "x_api_key",
    "authorization",
    "cookie",
    "token",
    "access_token",
    "secret",
    "password",
})

# Environment variables whose values must never be logged
SENSITIVE_ENV_VARS = frozenset({
    "ODDS_API_KEY",
    "SPORTRADAR_API_KEY",
    "PRIZEPICKS_API_KEY",
    "BETTING_API_KEY",
    "API_AUTH_KEY",
})

# Redaction placeholder
REDACTED = "[REDACTED]"

_QUERY_SECRET = re.compile(r'((?:api_?key|token|key)=)[^&\s]+', re.IGNORECASE)


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    key_lower = key.lower().replace("-", "_").replace(" ", "_")
    return (
        key_lower in SENSITIVE_NAMES
        or "key" in key_lower
        or "token" in key_lower
        or "secret" in key_lower
        or "password" in key_lower
        or "auth" in key_lower
    )


def _env_secret_values() -> set:
    values = set()
    for var_name in SENSITIVE_ENV_VARS:
        value = os.environ.get(var_name, "")
        if len(value) >= 8:  # Only redact non-trivial values
            values.add(value)
    return values


def sanitize_dict(data: Optional[Dict[str, Any]], depth: int = 0) -> Dict[str, Any]:
    """
    Recursively sanitize a dictionary (params, headers, log extras).

    Args:
        data: Dictionary to sanitize
        depth: Current recursion depth (max 5)

    Returns:
        New dictionary with sensitive values redacted
    """
    if not data or depth > 5:
        return dict(data) if data else {}

    secrets = _env_secret_values()
    sanitized: Dict[str, Any] = {}
    for key, value in data.items():
        key_str = str(key)
        if _is_sensitive_key(key_str):
            sanitized[key_str] = REDACTED
        elif isinstance(value, dict):
            sanitized[key_str] = sanitize_dict(value, depth + 1)
        elif isinstance(value, str) and value in secrets:
            sanitized[key_str] = REDACTED
        else:
            sanitized[key_str] = value
    return sanitized


def sanitize_url(url: str) -> str:
    """
    Redact sensitive query parameters from a URL.

    Example:
        >>> sanitize_url("https://api.the-odds-api.com/v4/sports?apiKey=abc123")
        'https://api.the-odds-api.com/v4/sports?apiKey=%5BREDACTED%5D'
    """
    if not url:
        return url

    try:
        parsed = urlparse(url)
        params = parse_qs(parsed.query, keep_blank_values=True)
        cleaned = {
            key: [REDACTED] if _is_sensitive_key(key) else values
            for key, values in params.items()
        }
        return urlunparse(parsed._replace(query=urlencode(cleaned, doseq=True)))
    except ValueError:
        return _QUERY_SECRET.sub(r'\1' + REDACTED, url)


def sanitize(text: str) -> str:
    """Redact secret env values and key=value query fragments from free text."""
    if not text:
        return text
    result = text
    for value in _env_secret_values():
        result = result.replace(value, REDACTED)
    return _QUERY_SECRET.sub(r'\1' + REDACTED, result)


__all__ = [
    'REDACTED',
    'SENSITIVE_ENV_VARS',
    'sanitize',
    'sanitize_dict',
    'sanitize_url',
]
