import hashlib
import hmac
import json
import logging
import time

from pydantic import ValidationError

from stripe_relay.core.config import ConfigError
from stripe_relay.schemas.ingest import VerifiedEvent

logger = logging.getLogger(__name__)

SIGNATURE_SCHEME = "v1"
DEFAULT_TOLERANCE = 300  # seconds


class WebhookError(Exception):
    pass


class SignatureError(WebhookError):
    pass


class InvalidPayloadError(WebhookError):
    pass


def compute_signature(secret: str, timestamp: int, raw_body: bytes) -> str:
    """Hex HMAC-SHA256 of ``"{timestamp}.{raw_body}"`` keyed with ``secret``."""
    signed_payload = str(timestamp).encode("utf-8") + b"." + raw_body
    return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()


def parse_header(header: str) -> tuple[int, list[str]]:
    """
    Split a Stripe-Signature header into its timestamp and v1 signatures.

    Raise SignatureError if the header is malformed.
    """
    timestamps = []
    signatures = []
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            raise SignatureError("Malformed Stripe-Signature header")
        if key == "t":
            timestamps.append(value)
        elif key == SIGNATURE_SCHEME:
            signatures.append(value)

    if len(timestamps) != 1:
        raise SignatureError("Unable to extract timestamp from header")
    try:
        timestamp = int(timestamps[0])
    except ValueError:
        raise SignatureError("Unable to extract timestamp from header")
    if not signatures:
        raise SignatureError("No signatures found with expected scheme")
    return timestamp, signatures


class WebhookVerifier:
    """Checks Stripe-Signature headers against one signing secret."""

    def __init__(self, secret: str | None, tolerance: int = DEFAULT_TOLERANCE):
        if not secret:
            raise ConfigError("Webhook signing secret is not configured")
        self._secret = secret
        self.tolerance = tolerance

    def verify(self, raw_body: bytes, header: str | None) -> VerifiedEvent:
        """
        Return the parsed event, or raise SignatureError / InvalidPayloadError.

        ``raw_body`` must be the bytes exactly as received.
        """
        if not header:
            raise SignatureError("Missing Stripe-Signature header")

        timestamp, signatures = parse_header(header)

        expected = compute_signature(self._secret, timestamp, raw_body)
        if not any(hmac.compare_digest(expected, sig) for sig in signatures):
            logger.warning("Rejecting webhook: no matching signature")
            raise SignatureError(
                "No signatures found matching the expected signature for payload"
            )

        # Future timestamps are accepted
        if self.tolerance and timestamp < time.time() - self.tolerance:
            logger.warning(
                f"Rejecting webhook: timestamp {timestamp} is older than "
                f"{self.tolerance}s"
            )
            raise SignatureError("Timestamp outside the tolerance zone")

        return self._parse(raw_body)

    @staticmethod
    def _parse(raw_body: bytes) -> VerifiedEvent:
        try:
            body = json.loads(raw_body)
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise InvalidPayloadError("Invalid JSON payload")
        if not isinstance(body, dict) or not isinstance(body.get("type"), str):
            raise InvalidPayloadError("Event payload has no type")

        data = body.get("data") or {}
        payload = data.get("object") if isinstance(data, dict) else None
        try:
            return VerifiedEvent(
                type=body["type"],
                payload=payload if isinstance(payload, dict) else {},
                id=body.get("id"),
                created=body.get("created"),
                livemode=body.get("livemode"),
            )
        except ValidationError as ve:
            raise InvalidPayloadError(f"Invalid event payload: {ve.errors()[0]['msg']}")


def verify(
    raw_body: bytes, header: str | None, secret: str, tolerance: int = DEFAULT_TOLERANCE
) -> VerifiedEvent:
    """One-shot form of ``WebhookVerifier(secret, tolerance).verify(raw_body, header)``."""
    return WebhookVerifier(secret, tolerance=tolerance).verify(raw_body, header)
