"""FastAPI web application for seatmanager."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from seatmanager.api.user_models import UpdateProfileRequest, WebhookResponse
from seatmanager.auth.dependencies import (
    get_config,
    get_current_user,
    get_user_service,
    get_webhook_verifier,
)
from seatmanager.auth.session_tokens import SessionTokenVerifier
from seatmanager.config import AppConfig, load_config
from seatmanager.database.database import init_db
from seatmanager.engine.reconciler import ReconcileOutcome, UserReconciler
from seatmanager.engine.user_service import UserService
from seatmanager.errors import NotFoundError, SeatManagerError
from seatmanager.models.user import User
from seatmanager.webhooks.events import decode_event
from seatmanager.webhooks.signature import WebhookVerifier

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


async def seatmanager_error_handler(request: Request, exc: SeatManagerError) -> JSONResponse:
    """Translate domain errors to JSON responses."""
    logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


def create_app(config: Optional[AppConfig] = None, init_database: bool = True) -> FastAPI:
    """Build the FastAPI application.

    Raises:
        ConfigurationError: webhook secret or token key is missing
    """
    config = config or load_config()
    config.validate()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database:
            init_db()
        yield

    app = FastAPI(
        title="seatmanager API",
        description="User identity bookkeeping for the seat management app",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.webhook_verifier = WebhookVerifier(config.webhook_secrets)
    app.state.session_verifier = SessionTokenVerifier(config)

    if config.frontend_url:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[config.frontend_url],
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Origin", "Content-Type", "Authorization"],
            expose_headers=["Content-Length"],
            allow_credentials=True,
        )

    app.add_exception_handler(SeatManagerError, seatmanager_error_handler)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "version": VERSION}

    @app.post("/api/webhooks/clerk", response_model=WebhookResponse)
    async def clerk_webhook(
        request: Request,
        config: AppConfig = Depends(get_config),
        verifier: WebhookVerifier = Depends(get_webhook_verifier),
        user_service: UserService = Depends(get_user_service),
    ):
        """Apply a signed user lifecycle event from the identity provider.

        Verification and decode failures are 400s. Missing users on update or
        delete are acknowledged with 200 so the provider stops redelivering.
        """
        body = await request.body()
        if config.debug:
            logger.debug(f"Received webhook payload: {body.decode('utf-8', 'replace')}")

        verifier.verify(body, request.headers)
        event = decode_event(body)
        logger.info(f"Webhook event type: {event.type}")

        try:
            # Session work is blocking; keep it off the event loop
            result = await run_in_threadpool(UserReconciler(user_service).handle, event)
        except NotFoundError as e:
            logger.warning(f"{event.type} could not be applied: {e}")
            return WebhookResponse(
                message="event received but the user was not found",
                outcome="not_found",
                error=str(e),
            )

        if result.outcome == ReconcileOutcome.IGNORED:
            message = "event type not handled"
        else:
            message = "webhook processed"
        return WebhookResponse(message=message, outcome=result.outcome.value)

    @app.get("/api/users/me", response_model=User)
    def get_me(
        current_user: User = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service),
    ):
        """Return the authenticated user and record the login."""
        try:
            user_service.touch_last_login(current_user.id)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to update last login for user {current_user.id}: {type(e).__name__}: {str(e)}")
        return current_user

    @app.put("/api/users/me", response_model=User)
    def update_me(
        request: UpdateProfileRequest,
        current_user: User = Depends(get_current_user),
        user_service: UserService = Depends(get_user_service),
    ):
        """Update the authenticated user's editable profile fields."""
        return user_service.update_profile(
            current_user,
            name=request.name,
            avatar_url=request.avatar_url,
            default_privacy_setting=request.default_privacy_setting,
        )

    return app
