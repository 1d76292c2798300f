import os
import hmac
import logging

from fastapi import Header, HTTPException, status
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def get_backend_tokens():
    tokens = os.getenv("MOCK_BACKEND_TOKENS", "")
    return [t.strip() for t in tokens.split(",") if t.strip()]


async def bearer_token_protection(authorization: str = Header(default=None)):
    """Accept `Authorization: Bearer <token>` for any configured token.

    With no MOCK_BACKEND_TOKENS configured every caller is let through, so the
    development backend also serves anonymous checkouts.
    """
    valid_tokens = get_backend_tokens()
    if not valid_tokens:
        return None

    scheme, _, candidate = (authorization or "").partition(" ")
    candidate = candidate.strip()
    ok = scheme.lower() == "bearer" and bool(candidate) and any(hmac.compare_digest(candidate, t) for t in valid_tokens)
    if not ok:
        logger.info("Bearer check failed: header_present=%s", bool(authorization))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials were not provided.",
        )
    return candidate
