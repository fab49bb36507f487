"""
ERRORS.PY - Exception types shared by upstream clients and the data service

Upstream clients raise; UnifiedDataService catches at its boundary and turns
the failure into a `success: false` envelope.
"""

from typing import Optional


class UnifiedDataError(Exception):
    """Base class for errors raised inside the unified data layer."""


class UpstreamError(UnifiedDataError):
    """An upstream provider call failed (network, non-2xx, bad JSON, error body)."""

    def __init__(self, source: str, message: str, status_code: Optional[int] = None):
        self.source = source
        self.message = message
        self.status_code = status_code
        super().__init__(f"{source}: {message}")


class UpstreamNotConfigured(UpstreamError):
    """Required base URL or API key is missing for a provider."""

    def __init__(self, source: str, setting: str):
        self.setting = setting
        super().__init__(source, f"{setting} not configured")


__all__ = [
    'UnifiedDataError',
    'UpstreamError',
    'UpstreamNotConfigured',
]
