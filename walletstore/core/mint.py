"""Receives mint updates forwarded by the address store."""

import threading
from typing import Dict, List, Optional

from walletstore.core import types
from walletstore.utils.console import print_debug, print_warn


class MintLedger:
    """Latest mint update per transaction id, in first-seen order"""

    def __init__(self):
        self._mints: Dict[str, Dict] = {}
        self._lock = threading.RLock()

    def update_mint(self, mint: Dict) -> bool:
        if not isinstance(mint, dict) or not mint.get("id"):
            print_warn(f"⚠️  Ignoring mint update without id: {mint!r}")
            return False
        with self._lock:
            self._mints[mint["id"]] = dict(mint)
        print_debug(f"🪙 Mint {mint['id']} recorded (used={mint.get('used')})")
        return True

    def get_mint(self, tx_id: str) -> Optional[Dict]:
        with self._lock:
            mint = self._mints.get(tx_id)
            return dict(mint) if mint else None

    def get_mints(self) -> List[Dict]:
        with self._lock:
            return [dict(mint) for mint in self._mints.values()]

    def get_unused_mints(self) -> List[Dict]:
        return [mint for mint in self.get_mints() if not mint.get("used")]

    def bind(self, bus) -> None:
        bus.subscribe(types.UPDATE_MINT, self.update_mint)
