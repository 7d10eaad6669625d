from typing import Optional
from app.core.security import verify_token

def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate access token"""
    payload = verify_token(token)
    if payload is None:
        return None

    # Check token type
    if payload.get("type") != "access":
        return None

    # jose already rejects expired tokens, but a missing exp is still invalid
    if payload.get("exp") is None:
        return None

    return payload
