#!/usr/bin/env python3
"""
Print a Stripe-Signature header for a payload, for poking the webhook locally.

Usage:
    python scripts/make_sig.py <secret> <payload_json> [timestamp]
"""
import json
import sys
import time

from stripe_relay.services.stripe_verify import SIGNATURE_SCHEME, compute_signature


def make_stripe_signature(secret: str, payload: str, timestamp: int | None = None) -> str:
    """Generate a Stripe webhook signature header for testing."""
    ts = int(time.time()) if timestamp is None else timestamp
    sig = compute_signature(secret, ts, payload.encode("utf-8"))
    return f"t={ts},{SIGNATURE_SCHEME}={sig}"


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print("Usage: make_sig.py <secret> <payload_json> [timestamp]")
        sys.exit(1)

    secret = sys.argv[1]
    payload = sys.argv[2]
    timestamp = int(sys.argv[3]) if len(sys.argv) == 4 else None

    # Validate payload is valid JSON
    try:
        json.loads(payload)
    except json.JSONDecodeError:
        print("Error: Payload must be valid JSON", file=sys.stderr)
        sys.exit(1)

    print(make_stripe_signature(secret, payload, timestamp))
