from datetime import datetime, timedelta, timezone
from typing import Optional, Union
import jwt
import requests

from config.settings import settings
from services.errors import AuthenticationError
from utils.logger import setup_logger
from utils.request_context import AuthenticatedUser

logger = setup_logger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError("Missing Authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must be a bearer token")

    return token.strip()


def _identity_from_claims(claims) -> AuthenticatedUser:
    if not isinstance(claims, dict):
        raise AuthenticationError("Token carries no user identity")

    # The auth service issues "userId"; standard tokens carry "sub"
    user_id = claims.get("userId") or claims.get("sub")
    if not user_id:
        raise AuthenticationError("Token carries no user identity")

    return AuthenticatedUser(
        user_id=str(user_id),
        email=claims.get("email"),
        username=claims.get("username")
    )


class JWTAuthService:
    """Verifies tokens locally against the shared signing secret."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM

    def verify_token(self, token: str) -> AuthenticatedUser:
        if not token:
            raise AuthenticationError("token is required")

        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Access token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid access token")

        return _identity_from_claims(claims)

    def create_access_token(self, user_id: str, email: Optional[str] = None, expires_in_days: int = 7) -> str:
        """Issue a token in the auth service's format. Used by local tooling and tests."""
        issued_at = datetime.now(timezone.utc)
        claims = {
            "userId": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(days=expires_in_days)
        }
        if email:
            claims["email"] = email
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)


class RemoteAuthService:
    """Delegates verification to the auth service's GET /verify endpoint."""

    def __init__(self, base_url: Optional[str] = None, timeout_seconds: Optional[float] = None):
        base_url = base_url or settings.AUTH_SERVICE_URL
        if not base_url:
            raise ValueError("AUTH_SERVICE_URL must be set when AUTH_MODE is remote")

        self.verify_url = base_url.rstrip("/") + "/verify"
        self.timeout_seconds = timeout_seconds or settings.AUTH_TIMEOUT_SECONDS

    def verify_token(self, token: str) -> AuthenticatedUser:
        if not token:
            raise AuthenticationError("token is required")

        try:
            response = requests.get(
                self.verify_url,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout_seconds
            )
        except requests.RequestException as e:
            logger.error(
                "Auth service unreachable",
                extra={"verify_url": self.verify_url, "error": str(e)}
            )
            raise AuthenticationError("Unable to verify token")

        if response.status_code != 200:
            logger.warning(
                "Auth service denied token",
                extra={"status_code": response.status_code, "body": response.text[:200]}
            )
            raise AuthenticationError("Invalid access token")

        try:
            claims = response.json()
        except ValueError:
            raise AuthenticationError("Auth service returned an unreadable identity")

        return _identity_from_claims(claims)


AuthService = Union[JWTAuthService, RemoteAuthService]


def build_auth_service() -> AuthService:
    if settings.AUTH_MODE == "remote":
        return RemoteAuthService()
    if settings.AUTH_MODE == "jwt":
        return JWTAuthService()
    raise ValueError(f"Unknown AUTH_MODE: {settings.AUTH_MODE}")
