import binascii
import hashlib
import hmac
import re
import time
from datetime import timedelta
from typing import Callable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from gradient_labs.common.errors import InvalidWebhookSignatureError


SIGNATURE_HEADER = "X-GradientLabs-Signature"
DEFAULT_LEEWAY = timedelta(minutes=5)

_TIMESTAMP_RE = re.compile(r"[+-]?[0-9]+")
# Unix seconds must fit in a signed 64-bit integer.
_MIN_TIMESTAMP = -(2**63)
_MAX_TIMESTAMP = 2**63 - 1


class SignatureFormatError(ValueError):
    """The signature header does not follow the `t=...,v1=...` grammar.

    Never surfaced to callers: the verifier collapses it into
    InvalidWebhookSignatureError.
    """


class SignatureHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int
    signatures: List[bytes] = Field(default_factory=list)


class VerifierConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret: bytes
    leeway: timedelta = DEFAULT_LEEWAY
    header_name: str = SIGNATURE_HEADER


def parse_signature_header(header: str) -> SignatureHeader:
    """Parse a header of the form `t=<unix seconds>,v1=<hex>[,v1=<hex>...]`."""
    timestamp: Optional[int] = None
    signatures: List[bytes] = []

    for pair in header.split(","):
        key, sep, value = pair.partition("=")
        if not sep:
            raise SignatureFormatError("signature header pair has no value")

        if key == "t":
            if timestamp is not None:
                raise SignatureFormatError("signature header has more than one timestamp")
            if not _TIMESTAMP_RE.fullmatch(value):
                raise SignatureFormatError("invalid timestamp component")
            try:
                timestamp = int(value)
            except ValueError:
                raise SignatureFormatError("invalid timestamp component")
            if not _MIN_TIMESTAMP <= timestamp <= _MAX_TIMESTAMP:
                raise SignatureFormatError("timestamp component out of range")
        elif key == "v1":
            try:
                signatures.append(binascii.unhexlify(value))
            except (binascii.Error, ValueError):
                raise SignatureFormatError("invalid signature component")

    if timestamp is None:
        raise SignatureFormatError("signature header contains no timestamp component")

    return SignatureHeader(timestamp=timestamp, signatures=signatures)


def compute_signature(secret: bytes, timestamp: int, body: bytes) -> bytes:
    """HMAC-SHA256 over `<timestamp>.<body>`, with the body taken verbatim."""
    mac = hmac.new(secret, digestmod=hashlib.sha256)
    mac.update(str(timestamp).encode("ascii"))
    mac.update(b".")
    mac.update(body)
    return mac.digest()


class WebhookVerifier:
    """Verifies webhook requests using the platform's signature header.

    One verifier holds one secret. To rotate secrets without downtime run one
    verifier per secret and accept a request that passes either.
    """

    def __init__(
        self,
        config: VerifierConfig,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.clock = clock

    @property
    def header_name(self) -> str:
        return self.config.header_name

    def verify_signature(self, body: bytes, header: Optional[str]) -> None:
        """Raise InvalidWebhookSignatureError unless `header` signs `body`."""
        if not header:
            raise InvalidWebhookSignatureError(self.header_name)

        try:
            parsed = parse_signature_header(header)
        except SignatureFormatError:
            raise InvalidWebhookSignatureError(self.header_name) from None

        if abs(self.clock() - parsed.timestamp) > self.config.leeway.total_seconds():
            raise InvalidWebhookSignatureError(self.header_name)

        expected = compute_signature(self.config.secret, parsed.timestamp, body)

        # Check every candidate: during rotation the match may not be first.
        matched = False
        for candidate in parsed.signatures:
            if hmac.compare_digest(expected, candidate):
                matched = True

        if not matched:
            raise InvalidWebhookSignatureError(self.header_name)

    def verify_request(self, body: bytes, headers: Mapping[str, str]) -> None:
        """Verify a request given its raw body and its headers."""
        self.verify_signature(body, _get_header(headers, self.header_name))


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None
