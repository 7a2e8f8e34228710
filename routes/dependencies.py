from typing import Optional
from fastapi import Depends, Header, Request

from services.auth_service import AuthService, build_auth_service, extract_bearer_token
from utils.logger import setup_logger
from utils.request_context import AuthenticatedUser, RequestContext

logger = setup_logger(__name__)

_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = build_auth_service()
    return _auth_service


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthenticatedUser:
    token = extract_bearer_token(authorization)
    return auth_service.verify_token(token)


def get_request_context(
    request: Request,
    current_user: AuthenticatedUser = Depends(get_current_user)
) -> RequestContext:
    correlation_id = getattr(request.state, "correlation_id", None)
    return RequestContext.for_user(current_user, correlation_id=correlation_id)
