"""FastAPI dependencies for authentication and services."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from seatmanager.auth.session_tokens import SessionTokenVerifier
from seatmanager.config import AppConfig
from seatmanager.database.database import get_db
from seatmanager.database.user_repository import UserRepository
from seatmanager.engine.user_service import UserService
from seatmanager.errors import NotFoundError, VerificationError
from seatmanager.models.user import User
from seatmanager.webhooks.signature import WebhookVerifier

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_webhook_verifier(request: Request) -> WebhookVerifier:
    return request.app.state.webhook_verifier


def get_session_verifier(request: Request) -> SessionTokenVerifier:
    return request.app.state.session_verifier


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db))


def get_external_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    verifier: SessionTokenVerifier = Depends(get_session_verifier),
) -> str:
    """Resolve the bearer token to the identity-provider user ID.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return verifier.get_external_user_id(credentials.credentials)
    except VerificationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(
    external_user_id: str = Depends(get_external_user_id),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Get the local user for the authenticated identity.

    Raises:
        HTTPException: 404 if no active local user matches the token subject
    """
    try:
        return user_service.get_by_external_id(external_user_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
