from .address_store import AddressStore, MissingCategoryPolicy
from .blockchain import BlockchainState
from .events import EventBus
from .last_seen import LastSeenTracker
from .mint import MintLedger
from .payment_requests import PaymentRequestStore
from .records import AddressPartition, Category

__all__ = [
    "AddressStore",
    "MissingCategoryPolicy",
    "BlockchainState",
    "EventBus",
    "LastSeenTracker",
    "MintLedger",
    "PaymentRequestStore",
    "AddressPartition",
    "Category",
]
