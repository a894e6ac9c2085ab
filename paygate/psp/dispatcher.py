"""PSP Gateway Dispatcher - Routes to correct gateway based on provider."""
import threading
from typing import Dict, Optional

from ..config import Settings, settings
from ..exceptions import ConfigurationError
from ..schemas import Merchant
from .adapter import ProviderConfig, PSPProvider
from .gateway import PaymentGateway
from .tenpay import TENPAY
from .transport import GatewayClient

PROVIDER_CONFIGS: Dict[PSPProvider, ProviderConfig] = {
    PSPProvider.TENPAY: TENPAY,
}


class PSPDispatcher:
    """
    Dispatcher that selects and initializes the gateway for a provider.
    Loads merchant credentials from settings.
    """

    _gateways: Dict[PSPProvider, PaymentGateway] = {}
    _client: Optional[GatewayClient] = None
    _lock = threading.RLock()

    @classmethod
    def _merchant_for(cls, provider: PSPProvider, current: Settings) -> Merchant:
        if provider == PSPProvider.TENPAY:
            if not current.TENPAY_PARTNER or not current.TENPAY_KEY or not current.TENPAY_NOTIFY_URL:
                raise ConfigurationError("TENPAY_PARTNER, TENPAY_KEY or TENPAY_NOTIFY_URL not set")
            return Merchant.create(
                account_id=current.TENPAY_PARTNER,
                key=current.TENPAY_KEY,
                notify_url=current.TENPAY_NOTIFY_URL,
                return_url=current.TENPAY_RETURN_URL,
            )
        raise ConfigurationError(f"Unsupported PSP provider: {provider}")

    @classmethod
    def get_gateway(cls, provider: str, current: Optional[Settings] = None) -> PaymentGateway:
        """
        Get the gateway for the given provider.

        Args:
            provider: provider name (tenpay, ...)
            current: settings override, mainly for tests. Passing it always
                rebuilds the cached gateway from these settings.

        Raises:
            ConfigurationError: If provider is not supported or credentials missing
        """
        try:
            key = PSPProvider(provider.lower())
        except ValueError as e:
            raise ConfigurationError(f"Unsupported PSP provider: {provider}", {"provider": provider}) from e

        # get_gateway runs in FastAPI's threadpool
        with cls._lock:
            if current is None and key in cls._gateways:
                return cls._gateways[key]

            merchant = cls._merchant_for(key, current or settings)
            if cls._client is None:
                cls._client = GatewayClient()
            gateway = PaymentGateway(PROVIDER_CONFIGS[key], merchant, cls._client)

            cls._gateways[key] = gateway
            return gateway

    @classmethod
    def clear_cache(cls):
        """Clear cached gateways (useful for testing)."""
        with cls._lock:
            cls._gateways = {}
            if cls._client is not None:
                cls._client.close()
            cls._client = None


# Convenience functions
def get_tenpay_gateway() -> PaymentGateway:
    """Get Tenpay gateway."""
    return PSPDispatcher.get_gateway(PSPProvider.TENPAY.value)
