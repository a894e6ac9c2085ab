"""
Notification verification.

A notification is only trusted after three checks:

1. the provider-defined status fields carry their success literals,
2. the signature over the received fields matches (the key never travels,
   so a forger cannot recompute it),
3. the provider itself confirms the notification id out of band.

Step 3 reuses the caller's parameter store: it is snapshotted and cleared,
filled with the confirmation reply, checked, and restored. The caller
always sees the original notification afterwards.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..exceptions import MalformedResponseError
from ..logging_config import get_logger
from ..schemas import Order, from_minor_units, to_minor_units
from .adapter import NotifyMethod, ProviderConfig
from .markup import load_markup
from .parameters import ParameterStore
from .request_builder import SignedRequestBuilder
from .transport import GatewayClient

logger = get_logger(__name__)


class NotifyState(str, Enum):
    RECEIVED = "received"
    FIELDS_CHECKED = "fields_checked"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class VerificationResult:
    verified: bool
    state: NotifyState
    reason: Optional[str] = None

    def __bool__(self):
        return self.verified


def _rejected(reason: str) -> VerificationResult:
    return VerificationResult(False, NotifyState.REJECTED, reason)


class NotificationVerifier:
    """Authenticates notifications and order queries for one merchant."""

    def __init__(
        self,
        config: ProviderConfig,
        builder: SignedRequestBuilder,
        client: Optional[GatewayClient] = None,
    ):
        self.config = config
        self.builder = builder
        self._owns_client = client is None
        self.client = client or GatewayClient()

    def close(self):
        """Close the HTTP client if this verifier created it."""
        if self._owns_client:
            self.client.close()

    def check_fields(self, params: ParameterStore, signer=None) -> Optional[str]:
        """
        Return ``None`` when every expected field matches and the signature
        verifies, otherwise the reason for rejection.
        """
        for name, expected in self.config.expected_fields.items():
            if params.get(name) != expected:
                return f"field_mismatch:{name}"
        signer = signer or self.builder.signer
        if not signer.verify(params):
            return "signature_mismatch"
        return None

    def verify_notification(
        self,
        params: ParameterStore,
        order: Order,
        acknowledge: Optional[Callable[[str], None]] = None,
        notify_method: NotifyMethod = NotifyMethod.SERVER_NOTIFY,
    ) -> VerificationResult:
        """
        Verify an inbound notification. On success ``order`` takes the
        notification's amount and id, and ``acknowledge`` receives the ack
        token for server pushes.

        Raises:
            GatewayTransportError: confirmation call could not be made
        """
        f = self.config.fields
        log = logger.bind(
            provider=self.config.provider.value,
            order_id=params.get(f.order_id),
            notify_id=params.get(f.notify_id),
            notify_method=notify_method.value,
        )

        reason = self.check_fields(params)
        if reason:
            log.warning("notification_rejected", stage=NotifyState.RECEIVED.value, reason=reason)
            return _rejected(reason)

        try:
            amount = from_minor_units(params.get(f.amount))
        except (TypeError, ValueError):
            log.warning("notification_rejected", stage=NotifyState.FIELDS_CHECKED.value, reason="invalid_amount")
            return _rejected("invalid_amount")
        order_id = params.get(f.order_id)
        if not order_id:
            log.warning("notification_rejected", stage=NotifyState.FIELDS_CHECKED.value, reason="missing_order_id")
            return _rejected("missing_order_id")

        if self.config.confirmation_required:
            reason = self._confirm(params)
            if reason:
                log.warning("notification_rejected", stage=NotifyState.FIELDS_CHECKED.value, reason=reason)
                return _rejected(reason)

        order.amount = amount
        order.id = order_id
        log.info("notification_confirmed", total_fee=params.get(f.amount))

        if acknowledge is not None and notify_method == NotifyMethod.SERVER_NOTIFY:
            acknowledge(self.config.ack_token)
        return VerificationResult(True, NotifyState.CONFIRMED)

    def _confirm(self, params: ParameterStore) -> Optional[str]:
        notify_id = params.get(self.config.fields.notify_id)
        if not notify_id:
            return "missing_notify_id"

        request = self.builder.build_confirmation_request(notify_id)
        snapshot = params.snapshot()
        params.clear()
        try:
            body = self.client.get_text(request.url, self.config.encoding)
            try:
                load_markup(params, body)
            except MalformedResponseError as e:
                logger.warning("confirmation_malformed", error=e.message)
                return "malformed_response"
            reason = self.check_fields(params)
            return f"confirmation_{reason}" if reason else None
        finally:
            params.restore(snapshot)

    def query_order(self, order: Order, params: Optional[ParameterStore] = None) -> VerificationResult:
        """
        Ask the provider whether ``order`` is paid. The reply must pass the
        field and signature checks and match the order's amount and id.

        Raises:
            GatewayTransportError: query call could not be made
        """
        f = self.config.fields
        params = params if params is not None else ParameterStore()
        log = logger.bind(provider=self.config.provider.value, order_id=order.id)

        request = self.builder.build_query_request(order)
        body = self.client.get_text(request.url, self.config.query_encoding)
        try:
            load_markup(params, body)
        except MalformedResponseError as e:
            log.warning("order_query_rejected", reason="malformed_response", error=e.message)
            return _rejected("malformed_response")

        reason = self.check_fields(params, signer=self.builder.query_signer)
        if reason is None:
            if params.get(f.amount) != str(to_minor_units(order.amount)):
                reason = "amount_mismatch"
            elif params.get(f.order_id) != order.id:
                reason = "order_id_mismatch"
        if reason:
            log.warning("order_query_rejected", reason=reason)
            return _rejected(reason)

        log.info("order_query_confirmed")
        return VerificationResult(True, NotifyState.CONFIRMED)
