"""
Wallet client entry point: builds the stores and network modules and wires
them through one event bus.
"""

from typing import Any, Dict, Optional

from walletstore.core import types
from walletstore.core.address_store import AddressStore, MissingCategoryPolicy
from walletstore.core.blockchain import BlockchainState
from walletstore.core.events import EventBus
from walletstore.core.last_seen import LastSeenTracker
from walletstore.core.mint import MintLedger
from walletstore.core.payment_requests import PaymentRequestStore
from walletstore.network.payment_request import PaymentRequestModule
from walletstore.network.transport import HttpTransport


class WalletClient:
    """Headless wallet state: stores, blockchain height and network modules"""

    def __init__(self, endpoint_url: Optional[str] = None,
                 transport: Optional[HttpTransport] = None,
                 missing_category_policy: Optional[MissingCategoryPolicy] = None,
                 current_block_height: Optional[int] = None):
        self.bus = EventBus()
        self.blockchain = BlockchainState(endpoint_url, current_block_height=current_block_height)
        self.mint = MintLedger()
        self.payment_requests = PaymentRequestStore()
        self.addresses = AddressStore(
            blockchain=self.blockchain,
            last_seen=LastSeenTracker("transaction"),
            missing_category_policy=missing_category_policy,
        )
        self.transport = transport or HttpTransport(endpoint_url)
        self.payment_request_module = PaymentRequestModule(self.transport)

        for component in (self.blockchain, self.mint, self.payment_requests,
                          self.addresses, self.payment_request_module):
            component.bind(self.bus)

    def dispatch(self, event: str, payload: Any = None) -> int:
        return self.bus.dispatch(event, payload)

    # Inbound events

    def on_address_subscription(self, payload: Any) -> int:
        return self.dispatch(types.ON_ADDRESS_SUBSCRIPTION, payload)

    def on_transaction_subscription(self, payload: Any) -> int:
        return self.dispatch(types.ON_TRANSACTION_SUBSCRIPTION, payload)

    def update_tx_label(self, tx_id: str, label: str) -> int:
        return self.dispatch(types.UPDATE_TX_LABEL, {"id": tx_id, "label": label})

    def set_block_height(self, height: int) -> int:
        return self.dispatch(types.SET_BLOCK_HEIGHT, height)

    def create_payment_request(self, label: Optional[str] = None, message: Optional[str] = None,
                               amount: Optional[float] = None) -> int:
        return self.dispatch(types.CREATE_PAYMENT_REQUEST, {
            "label": label,
            "message": message,
            "amount": amount,
        })

    def get_summary(self) -> Dict:
        summary = self.addresses.get_summary()
        summary["mints"] = len(self.mint.get_mints())
        summary["payment_requests"] = len(self.payment_requests.get_payment_requests())
        return summary


def create_wallet_client(endpoint_url: Optional[str] = None, **kwargs) -> WalletClient:
    """Create a new WalletClient instance"""
    return WalletClient(endpoint_url, **kwargs)
