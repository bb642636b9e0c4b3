"""
Blockchain height provider used when deriving confirmation counts.
"""

import threading
from typing import Any, Optional

import requests

from walletstore.config import get_endpoint, get_request_timeout
from walletstore.core import types
from walletstore.utils.console import print_debug, print_warn
from walletstore.utils.validation import parse_int


class BlockchainState:
    """Holds the current chain tip height reported by the node"""

    def __init__(self, endpoint_url: Optional[str] = None, current_block_height: Optional[int] = None):
        self.endpoint_url = (endpoint_url or get_endpoint()).rstrip('/')
        self._height = current_block_height
        self._lock = threading.RLock()

    @property
    def current_block_height(self) -> Optional[int]:
        with self._lock:
            return self._height

    def set_block_height(self, payload: Any) -> Optional[int]:
        """Accepts an int or ``{"currentBlockHeight": n}``; invalid values are ignored."""
        if isinstance(payload, dict):
            payload = payload.get("currentBlockHeight", payload.get("height"))
        height = parse_int(payload)
        if height is None or height < 0:
            print_warn(f"⚠️  Ignoring invalid block height: {payload!r}")
            return self.current_block_height
        with self._lock:
            self._height = height
        print_debug(f"📊 Block height now {height}")
        return height

    def refresh(self) -> Optional[int]:
        """Fetch the height from the node endpoint. Keeps the old value on failure."""
        try:
            response = requests.get(f'{self.endpoint_url}/blockchain/height', timeout=get_request_timeout())
            if response.status_code == 200:
                return self.set_block_height(response.json())
            print_warn(f"⚠️  Height endpoint returned HTTP {response.status_code}")
        except requests.exceptions.RequestException as e:
            print_warn(f"⚠️  Blockchain height error: {e}")
        except ValueError as e:
            print_warn(f"⚠️  Malformed height response: {e}")
        return self.current_block_height

    def bind(self, bus) -> None:
        bus.subscribe(types.SET_BLOCK_HEIGHT, self.set_block_height)
