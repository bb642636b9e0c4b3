from typing import Any, Optional

from walletstore.core import types
from walletstore.network.module import NetworkModule
from walletstore.utils.console import print_info


class PaymentRequestModule(NetworkModule):
    namespace = "PaymentRequest"
    collection = "payment-request"
    mutations = {
        types.CREATE_PAYMENT_REQUEST: "create_payment_request",
    }

    def create_payment_request(self, label: Optional[str] = None, message: Optional[str] = None,
                               amount: Optional[float] = None, **_ignored) -> Any:
        print_info("🧾 Creating payment request")

        return self.send("create", {
            "label": label,
            "amount": amount,
            "message": message,
        }, types.ADD_PAYMENT_REQUEST)
