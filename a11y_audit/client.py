"""Accessibility scan service client.

Usage:
    client = ScannerClient(url="http://localhost:3000")
    scan   = client.analyze("https://example.com")
    scan.page_info, scan.results      # page metadata, RawScanResult

The scan service loads the page in a headless browser, runs axe-core and
answers ``POST /analyze`` with ``{"success": true, "pageInfo": {...},
"results": {...}}``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from a11y_audit.models import RawScanResult

logger = logging.getLogger("a11y_audit.client")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ScannerError(Exception):
    """Base exception for all scan service errors."""


class ScannerNetworkError(ScannerError):
    """Raised on connection timeout or unreachable scan service."""


class ScanFailedError(ScannerError):
    """Raised when the scan service reports it could not analyze the page."""


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScanResponse:
    page_info: dict[str, Any] = field(default_factory=dict)
    results: RawScanResult = field(default_factory=RawScanResult)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanResponse":
        """Parse a scan service envelope, or bare axe results without one."""
        if "results" in data:
            return cls(
                page_info=dict(data.get("pageInfo") or {}),
                results=RawScanResult.from_dict(data.get("results") or {}),
            )
        return cls(results=RawScanResult.from_dict(data))


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class ScannerClient:
    """Thin wrapper around the scan service HTTP API."""

    def __init__(self, url: str, timeout: int = 60) -> None:
        self.base_url = url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()

    def analyze(self, target_url: str) -> ScanResponse:
        """Scan *target_url* and return its page info and raw findings.

        Raises:
            ScannerNetworkError: Timeout or connection failure
            ScanFailedError:     Non-2xx response or ``success: false``
        """
        endpoint = f"{self.base_url}/analyze"
        logger.info("Requesting scan of %s from %s", target_url, self.base_url)
        try:
            response = self._session.post(endpoint, json={"url": target_url}, timeout=self._timeout)
        except requests.exceptions.Timeout as exc:
            raise ScannerNetworkError(
                f"Scan timed out after {self._timeout}s while contacting '{endpoint}'"
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise ScannerNetworkError(
                f"Unable to reach scan service at '{self.base_url}'"
            ) from exc

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}

        if not response.ok:
            detail = data.get("details") or data.get("error") or response.text[:200]
            raise ScanFailedError(
                f"Scan of '{target_url}' failed with status {response.status_code}: {detail}"
            )
        if not data.get("success"):
            raise ScanFailedError(
                f"Scan of '{target_url}' failed: {data.get('error', 'no results returned')}"
            )

        return ScanResponse.from_dict(data)
