"""
Signed outbound requests: payment initiation, order query and notification
confirmation.
"""
from dataclasses import dataclass
from typing import Dict
from urllib.parse import urlencode

from ..exceptions import FieldEncodingError
from ..logging_config import get_logger
from ..schemas import Merchant, Order, to_minor_units
from .adapter import ProviderConfig
from .parameters import ParameterStore
from .signer import Signer

logger = get_logger(__name__)


@dataclass
class SignedRequest:
    """Ready-to-transmit payload. Sending it is the caller's (or transport's) job."""
    endpoint: str
    parameters: ParameterStore
    encoding: str = "GBK"

    @property
    def query_string(self) -> str:
        return urlencode([(p.name, p.value) for p in self.parameters.all()], encoding=self.encoding)

    @property
    def url(self) -> str:
        return f"{self.endpoint}?{self.query_string}"

    def form_fields(self) -> Dict[str, str]:
        """Fields for an auto-submitting POST form, in insertion order."""
        return self.parameters.as_dict()


def _sign_last(params: ParameterStore, signer: Signer, sign_field: str) -> None:
    """Check every value is representable in the signing encoding, then append the signature."""
    for param in params.all():
        try:
            param.value.encode(signer.encoding)
        except UnicodeEncodeError as e:
            raise FieldEncodingError(param.name, signer.encoding) from e
    params.set(sign_field, signer.sign(params))


class SignedRequestBuilder:
    """Builds signed requests for one merchant against one provider."""

    def __init__(self, config: ProviderConfig, merchant: Merchant):
        self.config = config
        self.merchant = merchant
        self.signer = Signer(
            merchant.key,
            encoding=config.encoding,
            digest=config.digest,
            uppercase=config.uppercase_signature,
            sign_field=config.fields.sign,
            key_field=config.fields.key,
        )
        self.query_signer = Signer(
            merchant.key,
            encoding=config.query_encoding,
            digest=config.digest,
            uppercase=config.uppercase_signature,
            sign_field=config.fields.sign,
            key_field=config.fields.key,
        )

    def build_payment_request(self, order: Order, client_ip: str) -> SignedRequest:
        f = self.config.fields
        params = ParameterStore()
        params.set(f.subject, order.subject)
        params.set(f.fee_type, self.config.fee_type)
        params.set(f.notify_url, self.merchant.notify_url)
        params.set(f.order_id, order.id)
        params.set(f.account, self.merchant.account_id)
        params.set(f.return_url, self.merchant.return_url)
        params.set(f.client_ip, client_ip)
        params.set(f.amount, to_minor_units(order.amount))
        params.set(f.input_charset, self.config.input_charset)
        # Sign last so the signature covers the final field set.
        _sign_last(params, self.signer, f.sign)

        logger.info(
            "payment_request_built",
            provider=self.config.provider.value,
            order_id=order.id,
            total_fee=params.get(f.amount),
        )
        return SignedRequest(self.config.pay_url, params, self.config.encoding)

    def build_query_request(self, order: Order) -> SignedRequest:
        f = self.config.fields
        params = ParameterStore()
        params.set(f.order_id, order.id)
        params.set(f.account, self.merchant.account_id)
        _sign_last(params, self.query_signer, f.sign)
        return SignedRequest(self.config.query_url, params, self.config.query_encoding)

    def build_confirmation_request(self, notify_id: str) -> SignedRequest:
        f = self.config.fields
        params = ParameterStore()
        params.set(f.notify_id, notify_id)
        params.set(f.account, self.merchant.account_id)
        _sign_last(params, self.signer, f.sign)
        return SignedRequest(self.config.verify_notify_url, params, self.config.encoding)
