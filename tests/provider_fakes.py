"""Fake Tenpay endpoints and fixtures shared by the test modules."""
from typing import Callable, Dict, List, Optional
from urllib.parse import parse_qsl, urlsplit
from xml.sax.saxutils import escape

import httpx

from paygate.psp.gateway import PaymentGateway
from paygate.psp.signer import Signer
from paygate.psp.tenpay import TENPAY
from paygate.psp.transport import GatewayClient
from paygate.schemas import Merchant

PARTNER = "M1"
KEY = "K"
NOTIFY_URL = "https://shop.example.com/v1/notify/tenpay"


def make_merchant(**overrides) -> Merchant:
    fields = {"account_id": PARTNER, "key": KEY, "notify_url": NOTIFY_URL}
    fields.update(overrides)
    return Merchant(**fields)


def signed(fields: Dict[str, str], key: str = KEY) -> Dict[str, str]:
    out = dict(fields)
    out["sign"] = Signer(key).sign(out)
    return out


def notification(**overrides) -> Dict[str, str]:
    """A correctly signed server-push notification for order ORD1 (25.00)."""
    fields = {
        "trade_state": "0",
        "trade_mode": "1",
        "fee_type": "1",
        "total_fee": "2500",
        "out_trade_no": "ORD1",
        "notify_id": "N123",
        "partner": PARTNER,
        "transaction_id": "1900000109201210180000000001",
    }
    fields.update(overrides)
    return signed(fields)


def xml_reply(fields: Dict[str, str]) -> bytes:
    body = "".join(f"<{name}>{escape(value)}</{name}>" for name, value in fields.items())
    return f'<?xml version="1.0" encoding="GBK"?><root>{body}</root>'.encode("gbk")


def confirmation_reply(**overrides) -> bytes:
    fields = {
        "retcode": "0",
        "retmsg": "",
        "partner": PARTNER,
        "trade_state": "0",
        "trade_mode": "1",
        "fee_type": "1",
        "total_fee": "2500",
        "out_trade_no": "ORD1",
        "transaction_id": "1900000109201210180000000001",
    }
    fields.update(overrides)
    return xml_reply(signed(fields))


class FakeProvider:
    """Records every request and answers with ``reply``."""

    def __init__(self, reply: Optional[Callable[[httpx.Request], httpx.Response]] = None, body: bytes = b""):
        self.requests: List[httpx.Request] = []
        self._reply = reply
        self._body = body

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._reply is not None:
            return self._reply(request)
        return httpx.Response(200, content=self._body)

    def last_query(self) -> Dict[str, str]:
        return dict(parse_qsl(urlsplit(str(self.requests[-1].url)).query, encoding="gbk"))


def make_gateway(provider: FakeProvider, merchant: Optional[Merchant] = None, config=TENPAY) -> PaymentGateway:
    client = GatewayClient(client=httpx.Client(transport=httpx.MockTransport(provider.handler)), timeout=5)
    return PaymentGateway(config, merchant or make_merchant(), client)
