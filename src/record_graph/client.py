"""
Xano Metadata API client

Thin wrapper over requests. Every call waits a fixed delay first so the
wizard stays under the meta API rate limit.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_RATE_LIMIT
from .exceptions import XanoAPIError

logger = logging.getLogger(__name__)

XANOSCRIPT_CONTENT_TYPE = 'text/x-xanoscript'


def list_items(payload: Any) -> List[Dict[str, Any]]:
    """Meta API lists come back either bare or wrapped in ``{"items": [...]}``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return payload.get('items') or []
    return []


class XanoClient:
    """Authenticated, rate-limited access to ``<base_url>/api:meta``."""

    def __init__(self, base_url: str, token: str, rate_limit: float = DEFAULT_RATE_LIMIT,
                 session: Optional[requests.Session] = None, timeout: float = 30):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.rate_limit = rate_limit
        self.timeout = timeout
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/api:meta{path}"

    def _request(self, method: str, path: str, label: str, content_type: str = 'application/json',
                 **kwargs) -> Any:
        if self.rate_limit:
            time.sleep(self.rate_limit)
        headers = {
            'Authorization': f"Bearer {self.token}",
            'Content-Type': content_type,
        }
        logger.debug("%s %s", method, path)
        resp = self.session.request(method, self.url(path), headers=headers,
                                    timeout=self.timeout, **kwargs)
        if not resp.ok:
            raise XanoAPIError(label, path, resp.status_code, resp.text)
        if not resp.content:
            return None
        return resp.json()

    def get(self, path: str) -> Any:
        return self._request('GET', path, 'GET')

    def post_json(self, path: str, body: Dict[str, Any]) -> Any:
        return self._request('POST', path, 'POST', json=body)

    def post_script(self, path: str, script: str) -> Any:
        return self._request('POST', path, 'XS', content_type=XANOSCRIPT_CONTENT_TYPE,
                             data=script.encode('utf-8'))

    def put_script(self, path: str, script: str) -> Any:
        return self._request('PUT', path, 'PUT', content_type=XANOSCRIPT_CONTENT_TYPE,
                             data=script.encode('utf-8'))
