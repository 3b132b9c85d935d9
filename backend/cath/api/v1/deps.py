# cath/api/v1/deps.py

from datetime import datetime

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cath.core.config import settings
from cath.core.security import decode_publisher_token

security = HTTPBearer()

# ============================================================================
# JWT Dependency
# ============================================================================

def verify_api_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Verify the bearer token sent by upstream publishing systems. The token
    must be addressed to the publication API and carry the publisher role.
    """
    token = credentials.credentials

    try:
        payload = decode_publisher_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired"
        )
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    exp = payload.get("exp")
    if exp and datetime.utcfromtimestamp(exp) < datetime.utcnow():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired"
        )

    roles = payload.get("roles")
    if not isinstance(roles, list) or settings.PUBLISHER_API_ROLE not in roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient permissions. Required role: {settings.PUBLISHER_API_ROLE}"
        )

    return payload
