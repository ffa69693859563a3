"""GitHub webhook signature computation and verification.

GitHub signs each delivery with the hook's secret and sends the result in
the X-Hub-Signature header as ``sha1=<hexdigest>``. The digest covers the
raw request body exactly as sent; any re-encoding or JSON round-trip
before hashing breaks verification.
"""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha1="


def compute_signature(secret: str, raw_body: bytes) -> str:
    """Return the ``sha1=<hex>`` signature GitHub would send for this body."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha1).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, raw_body: bytes, claimed_signature: str) -> bool:
    """Check a claimed X-Hub-Signature value against the raw body.

    Args:
        secret: The repository's derived webhook secret.
        raw_body: Request body bytes, untouched.
        claimed_signature: Value of the X-Hub-Signature header.

    Returns:
        True only when the claimed value equals the computed one.
    """
    computed = compute_signature(secret, raw_body)
    # Constant-time comparison to prevent timing attacks
    return hmac.compare_digest(
        computed.encode("utf-8"), claimed_signature.encode("utf-8")
    )
