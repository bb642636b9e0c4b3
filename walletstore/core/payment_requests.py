"""Payment requests created through the payment-request network module."""

import threading
from typing import Any, Dict, List, Optional

from walletstore.core import types
from walletstore.utils.console import print_success, print_warn
from walletstore.utils.formatting import format_amount


class PaymentRequestStore:
    """
    Payment requests keyed by the address the server assigned to them.

    Fed by the ``ADD_PAYMENT_REQUEST`` follow-up event, the same way the
    address store is fed by subscriptions; a repeated response for the same
    address replaces the earlier one.
    """

    def __init__(self):
        self._requests: Dict[str, Dict] = {}
        self._lock = threading.RLock()

    def add_payment_request(self, response: Any) -> bool:
        # The server may wrap the record as {"data": {...}}
        if isinstance(response, dict) and isinstance(response.get("data"), dict):
            response = response["data"]
        if not isinstance(response, dict) or not response.get("address"):
            print_warn(f"⚠️  Ignoring payment request without address: {response!r}")
            return False

        record = {
            "address": response["address"],
            "amount": response.get("amount"),
            "label": response.get("label"),
            "message": response.get("message"),
            "created_at": response.get("createdAt"),
            "state": response.get("state", "active"),
        }
        with self._lock:
            self._requests[record["address"]] = record
        print_success(f"🧾 Payment request for {format_amount(record['amount'])} at {record['address']}")
        return True

    def get_payment_request(self, address: str) -> Optional[Dict]:
        with self._lock:
            record = self._requests.get(address)
            return dict(record) if record else None

    def get_payment_requests(self) -> List[Dict]:
        with self._lock:
            return [dict(record) for record in self._requests.values()]

    def bind(self, bus) -> None:
        bus.subscribe(types.ADD_PAYMENT_REQUEST, self.add_payment_request)
