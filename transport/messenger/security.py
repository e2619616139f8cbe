"""
Messenger Signature Verification

SECURITY BOUNDARY - Verify Meta HMAC signature.
No bot imports. No retries. No logic.
"""

import hashlib
import hmac
from typing import Optional

from fastapi import HTTPException, Request, status

# Header name -> algorithm, strongest first
SIGNATURE_HEADERS = (
    ("X-Hub-Signature-256", "sha256"),
    ("X-Hub-Signature", "sha1"),
)


class SignatureVerificationError(Exception):
    """Signature verification failed."""
    pass


def compute_signature(app_secret: str, body: bytes, algorithm: str = "sha256") -> str:
    """Signature header value Meta would send for this body."""
    digestmod = hashlib.sha256 if algorithm == "sha256" else hashlib.sha1
    digest = hmac.new(key=app_secret.encode("utf-8"), msg=body, digestmod=digestmod).hexdigest()
    return f"{algorithm}={digest}"


def check_signature(app_secret: str, body: bytes, headers) -> bool:
    """
    Check the request signature against the app secret.

    Raises:
        SignatureVerificationError: no signature header present

    Returns:
        True when the strongest signature header present matches
    """
    for header, algorithm in SIGNATURE_HEADERS:
        signature = headers.get(header)
        if not signature:
            continue
        expected = compute_signature(app_secret, body, algorithm)
        # Compare (constant-time to prevent timing attacks)
        return hmac.compare_digest(signature, expected)

    raise SignatureVerificationError("Missing X-Hub-Signature-256 / X-Hub-Signature header")


async def verify_signature(
    request: Request,
    body: bytes,
    app_secret: Optional[str],
) -> None:
    """
    Verify Meta HMAC signature on a Messenger webhook.

    Meta sends:
    - X-Hub-Signature-256 header (sha256=<hex>), and/or
    - X-Hub-Signature header (sha1=<hex>)

    Raises:
        HTTPException(401): Missing signature
        HTTPException(403): Invalid signature
        HTTPException(500): App secret not configured
    """
    if not app_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="APP_SECRET not configured"
        )

    try:
        valid = check_signature(app_secret, body, request.headers)
    except SignatureVerificationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )

    if not valid:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid signature"
        )


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_challenge: Optional[str],
    hub_verify_token: Optional[str],
    expected_token: str,
) -> str:
    """
    Verify webhook subscription challenge from Meta.

    Meta calls GET /webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    Returns:
        The challenge string to echo back

    Raises:
        HTTPException(400): Invalid mode
        HTTPException(403): Invalid token
    """
    if hub_mode != "subscribe":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid hub.mode"
        )

    if not expected_token or not hub_verify_token or not hmac.compare_digest(hub_verify_token, expected_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid hub.verify_token"
        )

    return hub_challenge or ""
