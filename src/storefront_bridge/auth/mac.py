"""HMAC verification for platform-signed requests.

Two schemes share the same secret but differ in canonicalization:

- Query: drop ``hmac``, sort the remaining keys, join as
  ``key=value&key=value`` (values as received, not re-encoded),
  HMAC-SHA256, lowercase hex.
- Raw body: HMAC-SHA256 over the exact request bytes, base64.

Verification never raises; a failed check is a normal outcome.
"""

from __future__ import annotations

import base64
import hashlib
import hmac as hmac_module
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

QUERY_MAC_PARAM = "hmac"


class MacScheme(StrEnum):
    QUERY = "query"
    RAW_BODY = "raw_body"


@dataclass(frozen=True)
class MacVerificationResult:
    """Outcome of a single MAC check. Truthy iff the MAC matched."""

    valid: bool
    scheme: MacScheme

    def __bool__(self) -> bool:
        return self.valid


def canonical_query(params: Mapping[str, str]) -> str:
    """Build the canonical message for the query scheme.

    Args:
        params: Query parameters; the ``hmac`` entry is ignored if present.

    Returns:
        Sorted ``key=value`` pairs joined with ``&``.
    """
    return "&".join(
        f"{k}={v}" for k, v in sorted(params.items()) if k != QUERY_MAC_PARAM
    )


def compute_query_mac(params: Mapping[str, str], secret: str) -> str:
    """Compute the hex HMAC-SHA256 over sorted query params."""
    message = canonical_query(params)
    return hmac_module.new(
        secret.encode(), message.encode(), hashlib.sha256
    ).hexdigest()


def compute_body_mac(raw_body: bytes, secret: str) -> str:
    """Compute the base64 HMAC-SHA256 over the raw request body."""
    digest = hmac_module.new(secret.encode(), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def _matches(expected: str, provided: str | None) -> bool:
    if not provided:
        return False
    try:
        return hmac_module.compare_digest(expected, provided)
    except TypeError:
        # compare_digest rejects non-ASCII str input
        return False


def verify_query_mac(
    params: Mapping[str, str], secret: str
) -> MacVerificationResult:
    """Verify an HMAC-signed set of query parameters.

    Args:
        params: All query parameters, including ``hmac``.
        secret: Shared secret. An empty secret never verifies.

    Returns:
        Result carrying the query scheme.
    """
    provided = params.get(QUERY_MAC_PARAM)
    if not secret:
        return MacVerificationResult(valid=False, scheme=MacScheme.QUERY)
    expected = compute_query_mac(params, secret)
    return MacVerificationResult(
        valid=_matches(expected, provided), scheme=MacScheme.QUERY
    )


def verify_body_mac(
    raw_body: bytes, provided_mac: str | None, secret: str
) -> MacVerificationResult:
    """Verify a base64 HMAC over the unparsed request body.

    The body must be captured before any content-type based parsing;
    re-serialized JSON will not match.
    """
    if not secret:
        return MacVerificationResult(valid=False, scheme=MacScheme.RAW_BODY)
    expected = compute_body_mac(raw_body, secret)
    return MacVerificationResult(
        valid=_matches(expected, provided_mac), scheme=MacScheme.RAW_BODY
    )
