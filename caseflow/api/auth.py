"""
API authentication module

The bearer API key authenticates the calling frontend. The caller identity
itself arrives in the X-User-Id / X-User-Type headers set by the auth gateway
and is trusted as-is.
"""
from fastapi import HTTPException, Security, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from config.settings import settings
from caseflow.types import CallerIdentity
from caseflow.utils.constants import USER_TYPES, normalize_user_type
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)

security = HTTPBearer()


def verify_api_key(credentials: HTTPAuthorizationCredentials = Security(security)) -> str:
    """
    Verify the API key

    Args:
        credentials: HTTP Bearer token

    Returns:
        verified API key

    Raises:
        HTTPException: authentication failed
    """
    token = credentials.credentials

    if token != settings.api_secret_key:
        logger.warning(f"Invalid API key attempt: {token[:10]}...")
        raise HTTPException(
            status_code=401,
            detail="Invalid API key."
        )

    return token


def get_caller(
    x_user_id: str = Header(..., alias="X-User-Id"),
    x_user_type: str = Header(..., alias="X-User-Type"),
    _: str = Security(verify_api_key)
) -> CallerIdentity:
    """
    Caller identity from the gateway headers

    Legacy role names (verified_lawyer, verified_client, user) are normalised.

    Raises:
        HTTPException: unknown role
    """
    user_type = normalize_user_type(x_user_type)
    if user_type not in USER_TYPES:
        logger.warning(f"Unknown user type from gateway: {x_user_type}")
        raise HTTPException(status_code=401, detail=f"Unknown user type: {x_user_type}")

    return {"user_id": x_user_id, "user_type": user_type}
