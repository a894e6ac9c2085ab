"""
Provider adapter boundary.

A provider plugs in by supplying a ``ProviderConfig``: endpoints, field-name
table, signing digest/encoding and the literal values a successful payment
must carry. The builder and verifier are written against these interfaces
only.
"""
import codecs
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Protocol
from urllib.parse import urlsplit

from ..exceptions import ConfigurationError


class PSPProvider(str, Enum):
    """Supported redirect-style providers."""
    TENPAY = "tenpay"


class NotifyMethod(str, Enum):
    """How a notification reached us."""
    SERVER_NOTIFY = "server_notify"   # provider pushes to notify_url
    AUTO_RETURN = "auto_return"       # customer's browser is redirected back


@dataclass(frozen=True)
class FieldNames:
    """Provider field-name table."""
    sign: str = "sign"
    key: str = "key"
    account: str = "partner"
    order_id: str = "out_trade_no"
    amount: str = "total_fee"
    notify_id: str = "notify_id"
    subject: str = "body"
    fee_type: str = "fee_type"
    notify_url: str = "notify_url"
    return_url: str = "return_url"
    client_ip: str = "spbill_create_ip"
    input_charset: str = "input_charset"


def _check_endpoint(name: str, url: str):
    parts = urlsplit(url or "")
    if parts.scheme != "https" or not parts.netloc:
        raise ConfigurationError(f"{name} must be an absolute https URL", {"field": name, "value": url})


def _check_encoding(name: str, encoding: str):
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigurationError(f"Unknown text encoding for {name}: {encoding}") from e


@dataclass(frozen=True)
class ProviderConfig:
    """Everything provider-specific about the signed-redirect protocol."""

    provider: PSPProvider
    pay_url: str
    verify_notify_url: str
    query_url: str
    encoding: str = "GBK"
    query_encoding: Optional[str] = None
    input_charset: str = "GBK"
    digest: str = "md5"
    uppercase_signature: bool = True
    fee_type: str = "1"
    expected_fields: Mapping[str, str] = field(default_factory=dict)
    confirmation_required: bool = True
    ack_token: str = "success"
    fields: FieldNames = field(default_factory=FieldNames)

    def __post_init__(self):
        _check_endpoint("pay_url", self.pay_url)
        _check_endpoint("verify_notify_url", self.verify_notify_url)
        _check_endpoint("query_url", self.query_url)
        _check_encoding("encoding", self.encoding)
        if self.query_encoding is None:
            object.__setattr__(self, "query_encoding", self.encoding)
        _check_encoding("query_encoding", self.query_encoding)
        object.__setattr__(self, "expected_fields", MappingProxyType(dict(self.expected_fields)))


class PaymentRequestBuilder(Protocol):
    def build_payment_request(self, order, client_ip: str):
        """Signed payload that sends the customer to the provider's pay page."""
        ...

    def build_query_request(self, order):
        """Signed order-status query."""
        ...

    def build_confirmation_request(self, notify_id: str):
        """Signed 'is this notification genuine' request."""
        ...


class NotifyVerifier(Protocol):
    def verify_notification(
        self,
        params,
        order,
        acknowledge: Optional[Callable[[str], None]] = None,
        notify_method: NotifyMethod = NotifyMethod.SERVER_NOTIFY,
    ):
        """Authenticate an inbound notification and reconcile ``order``."""
        ...

    def query_order(self, order, params=None):
        """Ask the provider directly whether ``order`` has been paid."""
        ...


def detect_notify_method(http_method: str, user_agent: Optional[str]) -> NotifyMethod:
    """
    Server pushes arrive as GET redirects or form POSTs without a User-Agent;
    everything else is the customer's browser coming back from the pay page.
    """
    if (http_method or "").upper() in ("GET", "POST") and not user_agent:
        return NotifyMethod.SERVER_NOTIFY
    return NotifyMethod.AUTO_RETURN
