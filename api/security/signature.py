# api/security/signature.py
"""
Framer webhook signature verification.

Framer signs each submission with HMAC-SHA256 over the raw body followed by the
submission id (Framer-Webhook-Submission-Id header), keyed with the webhook
secret, and sends it as "sha256=<hex>" in the Framer-Signature header.

Nothing in the relay calls this yet; submissions are forwarded unverified.
"""

import hashlib
import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Framer-Signature"
SUBMISSION_ID_HEADER = "Framer-Webhook-Submission-Id"
SIGNATURE_PREFIX = "sha256="


def compute_framer_signature(body: bytes, submission_id: str, secret: str) -> str:
    """Signature header value Framer would send for this body and submission id"""
    digest = hmac.new(
        secret.encode("utf-8"),
        body + submission_id.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_framer_signature(body: bytes, submission_id: Optional[str],
                            signature_header: Optional[str], secret: Optional[str]) -> bool:
    """
    Verify a Framer webhook signature in constant time.

    Args:
        body: Raw request body bytes
        submission_id: Value of the Framer-Webhook-Submission-Id header
        signature_header: Value of the Framer-Signature header
        secret: FRAMER_WEBHOOK_SECRET

    Returns:
        True if the signature is valid. A missing secret, header or submission
        id always fails.
    """
    if not secret:
        logger.warning("FRAMER_WEBHOOK_SECRET not set - rejecting signature")
        return False
    if not signature_header or not submission_id:
        return False
    if not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    expected = compute_framer_signature(body, submission_id, secret)
    return hmac.compare_digest(expected, signature_header)
