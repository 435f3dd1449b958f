# utils/api.py
from __future__ import annotations

import logging
import random
import time
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urljoin

import requests

# --- Tunables ---------------------------------------------------------------
DEFAULT_TIMEOUT: tuple[float, float] = (5, 30)  # (connect, read) seconds
DEFAULT_PER_PAGE = 100
USER_AGENT = "GradebookExport/1.0"
API_PREFIX = "/api/v1"
MAX_ATTEMPTS = 4

log = logging.getLogger(__name__)


def parse_timeout(value: Optional[str]) -> tuple[float, float]:
    """
    Parse "connect,read" seconds (e.g. "10,300"). Falls back to DEFAULT_TIMEOUT.
    """
    if not value:
        return DEFAULT_TIMEOUT
    try:
        parts = [float(p.strip()) for p in value.split(",")]
    except ValueError:
        log.warning("Ignoring malformed HTTP timeout %r", value)
        return DEFAULT_TIMEOUT
    if len(parts) == 1:
        return (parts[0], parts[0])
    if len(parts) == 2:
        return (parts[0], parts[1])
    log.warning("Ignoring malformed HTTP timeout %r", value)
    return DEFAULT_TIMEOUT


class HostAPI:
    """Thin JSON client for the host's REST API (bearer auth, retries, pagination)."""

    def __init__(
        self,
        base_url: str | None,
        token: str | None,
        *,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
    ) -> None:
        if not base_url or not token:
            raise ValueError("HostAPI base_url and token are required (check your .env)")

        base = base_url.rstrip("/")
        # Ensure exactly one /api/v1 for the API root
        if base.endswith(API_PREFIX):
            api_root = base
        else:
            api_root = base + API_PREFIX

        self.api_root = api_root + "/"
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })

    # Accept endpoints with or without /api/v1 and build a full API URL
    def _full_url(self, endpoint: str) -> str:
        ep = (endpoint or "").strip()
        if ep.startswith(API_PREFIX):
            ep = ep[len(API_PREFIX):]
        ep = ep.lstrip("/")
        return urljoin(self.api_root, ep)

    # Basic retry/backoff for 429/5xx + timeouts
    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        delay = 1.0
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                resp = self.session.request(method, url, timeout=self.timeout, **kwargs)

                if resp.status_code == 429 and attempt < MAX_ATTEMPTS:
                    retry_after = float(resp.headers.get("Retry-After", delay))
                    jitter = random.uniform(0, 0.25 * retry_after)
                    wait_time = retry_after + jitter
                    log.warning(
                        "Rate limited: 429 received. Retrying after %.2fs (attempt %s/%s)",
                        wait_time, attempt, MAX_ATTEMPTS,
                        extra={"url": url, "retry_after": retry_after},
                    )
                    time.sleep(wait_time)
                    continue

                resp.raise_for_status()
                return resp

            except requests.HTTPError as e:
                status = getattr(e.response, "status_code", None)
                if status and status >= 500 and attempt < MAX_ATTEMPTS:
                    jitter = random.uniform(0, 0.25 * delay)
                    wait_time = delay + jitter
                    log.warning(
                        "Server error %s. Retrying after %.2fs (attempt %s/%s)",
                        status, wait_time, attempt, MAX_ATTEMPTS,
                        extra={"url": url},
                    )
                    time.sleep(wait_time)
                    delay *= 2
                    continue
                raise

            except (requests.ConnectionError, requests.Timeout):
                if attempt < MAX_ATTEMPTS:
                    jitter = random.uniform(0, 0.25 * delay)
                    wait_time = delay + jitter
                    log.warning(
                        "Connection/timeout error. Retrying after %.2fs (attempt %s/%s)",
                        wait_time, attempt, MAX_ATTEMPTS,
                        extra={"url": url},
                    )
                    time.sleep(wait_time)
                    delay *= 2
                    continue
                raise
        raise requests.HTTPError(f"giving up on {url} after {MAX_ATTEMPTS} attempts")

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """
        GET with transparent pagination.
        - If the endpoint returns a list, we return a combined list across pages.
        - If it returns a single object, we return that dict.
        """
        url: Optional[str] = self._full_url(endpoint)

        params = dict(params or {})
        params.setdefault("per_page", DEFAULT_PER_PAGE)

        results: List[Dict[str, Any]] = []
        first = True
        while url:
            # Only send params on the first request; follow-ups use absolute next URLs.
            r = self._request("GET", url, params=params if first else None)
            first = False
            data = r.json()

            if isinstance(data, list):
                results.extend(data)
            else:
                return data  # single object; no pagination

            url = self._next_link(r.headers)

        return results

    def get_list(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return a list (empty if the server returned an object by mistake)."""
        data = self.get(endpoint, params=params)
        return data if isinstance(data, list) else []

    def get_object(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Return a single JSON object, or {} if the server returned a list."""
        data = self.get(endpoint, params=params)
        return data if isinstance(data, dict) else {}

    def _next_link(self, headers: Dict[str, Any]) -> Optional[str]:
        """
        Extract the 'next' URL from an RFC5988 Link header.
        Accepts rel=next and rel="next". Returns None if not present.
        """
        link_hdr = headers.get("Link") or headers.get("link")
        if not link_hdr:
            return None
        for raw in link_hdr.split(","):
            parts = [p.strip() for p in raw.split(";")]
            if not parts or not (parts[0].startswith("<") and ">" in parts[0]):
                continue
            url_part = parts[0]
            rel_parts = [p.lower() for p in parts[1:]]
            if any(r == "rel=next" or r == 'rel="next"' for r in rel_parts):
                return url_part[url_part.find("<") + 1 : url_part.find(">")]
        return None


__all__ = [
    "HostAPI",
    "DEFAULT_TIMEOUT",
    "DEFAULT_PER_PAGE",
    "USER_AGENT",
    "API_PREFIX",
    "parse_timeout",
]
