from .module import NetworkModule
from .payment_request import PaymentRequestModule
from .transport import HttpTransport

__all__ = ["NetworkModule", "PaymentRequestModule", "HttpTransport"]
