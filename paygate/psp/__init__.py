"""Signed-redirect payment gateway protocol."""
from .adapter import FieldNames, NotifyMethod, ProviderConfig, PSPProvider, detect_notify_method
from .gateway import PaymentGateway
from .parameters import Channel, Parameter, ParameterSnapshot, ParameterStore
from .request_builder import SignedRequest, SignedRequestBuilder
from .signer import Signer
from .tenpay import TENPAY
from .verifier import NotificationVerifier, NotifyState, VerificationResult

__all__ = [
    "Channel",
    "FieldNames",
    "NotificationVerifier",
    "NotifyMethod",
    "NotifyState",
    "Parameter",
    "ParameterSnapshot",
    "ParameterStore",
    "PaymentGateway",
    "ProviderConfig",
    "PSPProvider",
    "SignedRequest",
    "SignedRequestBuilder",
    "Signer",
    "TENPAY",
    "VerificationResult",
    "detect_notify_method",
]
