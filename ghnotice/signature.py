"""GitHub webhook signature checks."""

from __future__ import annotations

import hashlib
import hmac

from ghnotice.errors import Unauthorized

_DIGESTS = {
    "sha256": hashlib.sha256,
    "sha1": hashlib.sha1,
}


def verify_signature(secret: str, body: bytes, signature_header: str | None) -> bool:
    """
    Verify a GitHub webhook HMAC signature.

    Accepts `sha256=<hex>` (X-Hub-Signature-256) and the legacy
    `sha1=<hex>` (X-Hub-Signature). `body` must be the raw request bytes.

    Returns
    -------
    bool
        True if valid, False otherwise.
    """
    if not secret or not signature_header or "=" not in signature_header:
        return False
    algo, sig = signature_header.split("=", 1)
    digestmod = _DIGESTS.get(algo.strip().lower())
    sig = sig.strip().lower()
    if digestmod is None or not sig or not sig.isascii():
        return False
    mac = hmac.new(secret.encode(), msg=body, digestmod=digestmod).hexdigest()
    return hmac.compare_digest(mac, sig)


def pick_signature(sha256_header: str | None, sha1_header: str | None) -> str | None:
    """Prefer the SHA-256 header; fall back to the legacy SHA-1 one."""
    return sha256_header or sha1_header or None


def require_signature(secret: str, body: bytes, signature_header: str | None) -> None:
    if not signature_header:
        raise Unauthorized("missing signature")
    if not verify_signature(secret, body, signature_header):
        raise Unauthorized("payload signature check failed")
