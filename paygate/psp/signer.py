"""
Query-string signer used by redirect-style gateways.

Canonical form: non-empty parameters except the signature field, sorted by
the bytes of each name in the signing encoding, joined as
``name=value&...``, then ``&key=<secret>``.
The result is hashed in the provider's text encoding.
"""
import codecs
import hashlib
import hmac
from typing import Mapping, Union

from ..exceptions import ConfigurationError
from .parameters import ParameterStore

SignableParams = Union[ParameterStore, Mapping[str, str]]


class Signer:
    """Deterministic signature over a parameter set plus a shared key."""

    def __init__(
        self,
        key: str,
        encoding: str = "GBK",
        digest: str = "md5",
        uppercase: bool = True,
        sign_field: str = "sign",
        key_field: str = "key",
    ):
        if not key:
            raise ConfigurationError("Signing key not configured")
        if digest not in hashlib.algorithms_available:
            raise ConfigurationError(f"Unsupported digest algorithm: {digest}")
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown text encoding: {encoding}") from e

        self._key = key
        self.encoding = encoding
        self.digest = digest
        self.uppercase = uppercase
        self.sign_field = sign_field
        self.key_field = key_field

    def _items(self, params: SignableParams):
        if isinstance(params, ParameterStore):
            return [(p.name, p.value) for p in params.all()]
        return [(name, "" if value is None else str(value)) for name, value in params.items()]

    def canonical_string(self, params: SignableParams) -> str:
        """String the digest is computed over. Contains the shared key."""
        selected = [
            (name, value) for name, value in self._items(params)
            if value != "" and name != self.sign_field
        ]
        # Byte order in the signing encoding; the provider recomputes the same string.
        selected.sort(key=lambda item: item[0].encode(self.encoding))
        pairs = [f"{name}={value}" for name, value in selected]
        pairs.append(f"{self.key_field}={self._key}")
        return "&".join(pairs)

    def sign(self, params: SignableParams) -> str:
        data = self.canonical_string(params).encode(self.encoding)
        signature = hashlib.new(self.digest, data).hexdigest()
        return signature.upper() if self.uppercase else signature

    def verify(self, params: SignableParams, signature: str = None) -> bool:
        """Compare the received signature (defaults to the sign field) with a fresh one."""
        if signature is None:
            signature = params.get(self.sign_field)
        if not signature:
            return False
        try:
            expected = self.sign(params)
        except UnicodeEncodeError:
            # value not representable in the provider encoding, cannot have been signed by it
            return False
        return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))

    def __repr__(self):
        return f"<Signer(digest={self.digest}, encoding={self.encoding})>"
