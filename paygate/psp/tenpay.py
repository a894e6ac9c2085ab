"""Tenpay provider configuration."""
from .adapter import FieldNames, ProviderConfig, PSPProvider

PAY_GATEWAY_URL = "https://gw.tenpay.com/gateway/pay.htm"
VERIFY_NOTIFY_GATEWAY_URL = "https://gw.tenpay.com/gateway/verifynotifyid.xml"
QUERY_GATEWAY_URL = "https://gw.tenpay.com/gateway/normalorderquery.xml"

# trade_state 0 = paid, trade_mode 1 = instant transfer, fee_type 1 = RMB
SUCCESS_FIELDS = {
    "trade_state": "0",
    "trade_mode": "1",
    "fee_type": "1",
}

TENPAY = ProviderConfig(
    provider=PSPProvider.TENPAY,
    pay_url=PAY_GATEWAY_URL,
    verify_notify_url=VERIFY_NOTIFY_GATEWAY_URL,
    query_url=QUERY_GATEWAY_URL,
    # GB2312 is a subset of GBK; subjects with Chinese text must hash identically
    encoding="GBK",
    input_charset="GBK",
    digest="md5",
    uppercase_signature=True,
    fee_type="1",
    expected_fields=SUCCESS_FIELDS,
    confirmation_required=True,
    ack_token="success",
    fields=FieldNames(),
)
