import hashlib
import hmac
from typing import Optional

SIGNATURE_HEADER = "x-paystack-signature"


def compute_signature(secret: str, payload: bytes) -> str:
    """Hex HMAC-SHA512 of the raw request body, keyed with the gateway secret."""
    return hmac.new(secret.encode(), payload, hashlib.sha512).hexdigest()


def verify_signature(secret: str, payload: bytes, signature: Optional[str]) -> bool:
    if not signature:
        return False
    expected = compute_signature(secret, payload).encode()
    return hmac.compare_digest(expected, signature.strip().lower().encode("utf-8", "replace"))
