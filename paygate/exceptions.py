"""
Paygate exception hierarchy.

Verification failures are *not* exceptions: a notification that does not
verify is reported through ``VerificationResult``. The classes here cover
conditions where the outcome cannot be determined at all.
"""
from typing import Optional, Dict, Any


class PaygateError(Exception):
    """Base exception for all paygate errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(PaygateError, ValueError):
    """
    Merchant or provider configuration is unusable.

    Examples:
    - Merchant signing key missing
    - Endpoint URL is not absolute https
    - Unknown digest algorithm or text encoding
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("paygate:config:invalid", message, details)


class GatewayTransportError(PaygateError):
    """
    Confirmation or query call to the provider did not complete.

    This means "unable to determine", not "rejected". Callers decide
    whether to retry.
    """

    def __init__(self, message: str, url: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.url = url
        super().__init__("paygate:transport:failed", message, details)


class MalformedResponseError(PaygateError):
    """Provider reply could not be parsed as field markup."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("paygate:response:malformed", message, details)


class FieldEncodingError(PaygateError, ValueError):
    """
    An outbound field cannot be represented in the provider's text encoding.

    Example:
    - Order subject contains an emoji and the provider signs in GBK
    """

    def __init__(self, field: str, encoding: str, details: Optional[Dict[str, Any]] = None):
        self.field = field
        self.encoding = encoding
        super().__init__(
            "paygate:request:unencodable_field",
            f"Field '{field}' cannot be encoded as {encoding}",
            {"field": field, "encoding": encoding, **(details or {})},
        )
