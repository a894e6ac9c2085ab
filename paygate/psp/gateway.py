"""Per-merchant gateway facade bundling the request builder and the verifier."""
from typing import Callable, Dict, Optional

from ..schemas import Merchant, Order
from .adapter import NotifyMethod, ProviderConfig, detect_notify_method
from .parameters import Channel, ParameterStore
from .request_builder import SignedRequest, SignedRequestBuilder
from .transport import GatewayClient
from .verifier import NotificationVerifier, VerificationResult


class PaymentGateway:
    """
    Signed-redirect payment gateway for one merchant.

    Example::

        gateway = PaymentGateway(TENPAY, merchant)
        url = gateway.build_payment_url(order, client_ip="203.0.113.7")
    """

    def __init__(self, config: ProviderConfig, merchant: Merchant, client: Optional[GatewayClient] = None):
        self.config = config
        self.merchant = merchant
        self.builder = SignedRequestBuilder(config, merchant)
        self.verifier = NotificationVerifier(config, self.builder, client)

    @property
    def provider(self):
        return self.config.provider

    def build_payment_request(self, order: Order, client_ip: str) -> SignedRequest:
        return self.builder.build_payment_request(order, client_ip)

    def build_payment_url(self, order: Order, client_ip: str) -> str:
        return self.build_payment_request(order, client_ip).url

    def build_payment_form(self, order: Order, client_ip: str) -> Dict[str, str]:
        """Form fields to POST to ``config.pay_url``; rendering is up to the caller."""
        return self.build_payment_request(order, client_ip).form_fields()

    def notify_method(self, http_method: str, user_agent: Optional[str]) -> NotifyMethod:
        return detect_notify_method(http_method, user_agent)

    def verify_notification(
        self,
        fields,
        order: Order,
        acknowledge: Optional[Callable[[str], None]] = None,
        notify_method: NotifyMethod = NotifyMethod.SERVER_NOTIFY,
    ) -> VerificationResult:
        """``fields`` is a ParameterStore or a plain mapping (read as GET fields)."""
        params = fields if isinstance(fields, ParameterStore) else ParameterStore.from_mapping(fields, Channel.GET)
        return self.verifier.verify_notification(params, order, acknowledge, notify_method)

    def query_now(self, order: Order, params: Optional[ParameterStore] = None) -> VerificationResult:
        return self.verifier.query_order(order, params)

    def close(self):
        self.verifier.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self):
        return f"<{self.__class__.__name__}(provider={self.config.provider.value}, merchant={self.merchant.account_id})>"
