"""
Parser for the tag-per-field XML replies of the confirmation and query
endpoints::

    <root><retcode>0</retcode><trade_state>0</trade_state>...</root>
"""
import re
import xml.etree.ElementTree as ET
from typing import List, Tuple

from ..exceptions import MalformedResponseError
from .parameters import Channel, ParameterStore

# Body is decoded before parsing; a GBK declaration would make expat refuse it.
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def parse_markup(text: str) -> List[Tuple[str, str]]:
    """Return ``(tag, text)`` for every child of the root element."""
    if not text or not text.strip():
        raise MalformedResponseError("Empty response body")
    body = _XML_DECLARATION.sub("", text, count=1)
    if "<!DOCTYPE" in body or "<!ENTITY" in body:
        raise MalformedResponseError("Document type declarations are not accepted")
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise MalformedResponseError(f"Unparseable response: {e}") from e
    fields = [(child.tag, "".join(child.itertext())) for child in root]
    if not fields:
        raise MalformedResponseError("Response carries no fields")
    # Values are signed as transmitted; never trim them.
    return fields


def load_markup(params: ParameterStore, text: str) -> int:
    """Parse ``text`` into ``params``; returns the number of fields read."""
    fields = parse_markup(text)
    for name, value in fields:
        params.set(name, value, Channel.GET)
    return len(fields)
