# walletstore/network/transport.py
import json
from typing import Any, Dict, Optional

import requests

from walletstore.config import get_endpoint, get_request_timeout, use_msgpack
from walletstore.utils.console import print_debug

try:
    import msgpack  # type: ignore
    _HAS_MSGPACK = True
except Exception:
    msgpack = None
    _HAS_MSGPACK = False


class TransportError(Exception):
    """Raised when the remote service rejects or fails a request"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HttpTransport:
    """
    Minimal REST adapter for network modules: one resource collection per
    module, addressed as ``{endpoint}/{collection}``.
    """

    def __init__(self, endpoint_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.endpoint_url = (endpoint_url or get_endpoint()).rstrip('/')
        self.timeout = timeout or get_request_timeout()
        self.session = session or requests.Session()
        self.use_msgpack = use_msgpack() and _HAS_MSGPACK

    def _encode_payload(self, payload: Dict):
        if self.use_msgpack:
            raw = msgpack.packb(payload, use_bin_type=True)
            headers = {"Content-Type": "application/msgpack", "Accept": "application/msgpack"}
        else:
            raw = json.dumps(payload).encode("utf-8")
            headers = {"Content-Type": "application/json"}
        return raw, headers

    def _decode_response(self, response) -> Any:
        content_type = response.headers.get("Content-Type", "")
        if "msgpack" in content_type and _HAS_MSGPACK:
            return msgpack.unpackb(response.content, raw=False)
        if not response.content:
            return None
        return response.json()

    def _url(self, collection: str) -> str:
        if not collection:
            raise ValueError("Collection name is required")
        return f"{self.endpoint_url}/{collection.strip('/')}"

    def create(self, collection: str, payload: Dict) -> Any:
        """POST a new resource; returns the decoded server response."""
        raw, headers = self._encode_payload(payload)
        url = self._url(collection)
        print_debug(f"➡️  POST {url}")
        response = self.session.post(url, data=raw, headers=headers, timeout=self.timeout)
        if response.status_code not in (200, 201):
            raise TransportError(f"HTTP {response.status_code}: {response.text}", response.status_code)
        return self._decode_response(response)

    def get(self, collection: str) -> Any:
        """GET a resource collection"""
        url = self._url(collection)
        print_debug(f"➡️  GET {url}")
        response = self.session.get(url, timeout=self.timeout)
        if response.status_code != 200:
            raise TransportError(f"HTTP {response.status_code}: {response.text}", response.status_code)
        return self._decode_response(response)
