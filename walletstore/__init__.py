"""
walletstore - wallet address and transaction state for wallet front-ends
"""
from .client import WalletClient, create_wallet_client
from .core.address_store import AddressStore, MissingCategoryPolicy
from .core.events import EventBus
from .network.payment_request import PaymentRequestModule

__version__ = "1.0.0"
__all__ = [
    'WalletClient',
    'create_wallet_client',
    'AddressStore',
    'MissingCategoryPolicy',
    'EventBus',
    'PaymentRequestModule',
]
