"""
Gateway notifications: GET|POST /v1/notify/{provider}
- Server pushes (GET or POST without User-Agent) are answered with the provider's
  literal ack token so it stops redelivering
- Browser returns get a JSON summary of the reconciled order
- Nothing is acknowledged unless the provider confirmed the notification id
"""
from __future__ import annotations

from typing import List
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from paygate.exceptions import ConfigurationError, GatewayTransportError
from paygate.logging_config import bind_notification_context, get_logger
from paygate.psp.adapter import NotifyMethod, PSPProvider
from paygate.psp.dispatcher import PSPDispatcher
from paygate.psp.gateway import PaymentGateway
from paygate.psp.parameters import Channel, ParameterStore
from paygate.schemas import Order

router = APIRouter(tags=["Gateway Notifications"])
logger = get_logger(__name__)


def get_gateway(provider: str) -> PaymentGateway:
    if provider.lower() not in {p.value for p in PSPProvider}:
        raise HTTPException(status_code=404, detail="Unknown provider")
    try:
        return PSPDispatcher.get_gateway(provider)
    except ConfigurationError as e:
        logger.error("gateway_not_configured", provider=provider, error=e.message)
        raise HTTPException(status_code=503, detail="Gateway not configured")


async def read_notification(request: Request, encoding: str) -> ParameterStore:
    """Query fields as GET, urlencoded body fields as POST, decoded in the provider encoding."""
    params = ParameterStore()
    for name, value in parse_qsl(request.url.query, keep_blank_values=True, encoding=encoding, errors="replace"):
        params.set(name, value, Channel.GET)
    if request.method == "POST":
        body = await request.body()
        if body:
            text = body.decode(encoding, errors="replace")
            for name, value in parse_qsl(text, keep_blank_values=True, encoding=encoding, errors="replace"):
                params.set(name, value, Channel.POST)
    return params


@router.api_route("/{provider}", methods=["GET", "POST"])
async def notify(provider: str, request: Request, gateway: PaymentGateway = Depends(get_gateway)):
    config = gateway.config
    params = await read_notification(request, config.encoding)
    method = gateway.notify_method(request.method, request.headers.get("user-agent"))
    order = Order(id=params.get(config.fields.order_id) or "")
    bind_notification_context(gateway.provider.value, method.value, order.id)

    acks: List[str] = []
    try:
        result = await run_in_threadpool(
            gateway.verify_notification, params, order, acks.append, method
        )
    except GatewayTransportError as e:
        logger.error("notification_undetermined", provider=provider, error=e.message)
        raise HTTPException(status_code=502, detail="Gateway confirmation unavailable")

    if not result:
        raise HTTPException(status_code=400, detail=result.reason)

    if method == NotifyMethod.SERVER_NOTIFY:
        return PlainTextResponse("".join(acks))
    return {"status": "ok", "order_id": order.id, "amount": str(order.amount)}
