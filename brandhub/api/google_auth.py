"""
Google account connection endpoints (OAuth consent, callback, status, disconnect).
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from brandhub.api.deps import get_current_user_context
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import users as user_repo
from brandhub.services.google_oauth import (
    GoogleOAuthConfig,
    GoogleOAuthError,
    build_auth_url,
    exchange_code,
    get_google_oauth_config,
    verify_state,
)
from brandhub.utils.runtime import client_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth/google", tags=["google"])


def _redirect(query: str) -> RedirectResponse:
    return RedirectResponse(url=f"{client_url()}?{query}", status_code=302)


@router.get("/", response_model=schemas.GoogleAuthUrl)
def google_auth_url(
    user_context=Depends(get_current_user_context),
    config: GoogleOAuthConfig = Depends(get_google_oauth_config),
):
    if not config.is_configured:
        raise HTTPException(status_code=503, detail="Google integration is not configured")
    user, _ = user_context
    return schemas.GoogleAuthUrl(auth_url=build_auth_url(config, user.id))


@router.get("/callback")
def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: Session = Depends(get_db),
    config: GoogleOAuthConfig = Depends(get_google_oauth_config),
):
    if not code or not state:
        return _redirect("google_error=missing_params")
    try:
        user_id = verify_state(config, state)
        user = user_repo.get_user(db, user_id)
        if user is None:
            raise GoogleOAuthError("OAuth state names an unknown user")
        tokens = exchange_code(config, code)
    except GoogleOAuthError as exc:
        logger.warning("google_callback_failed: %s", exc)
        return _redirect("google_error=auth_failed")

    user_repo.set_google_tokens(
        db,
        user,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expiry=tokens.expiry,
    )
    audit_log(
        db,
        action=AuditAction.GOOGLE_CONNECT,
        target_type="user",
        target_id=user.id,
        actor_user_id=user.id,
        metadata={"has_refresh_token": bool(user.google_refresh_token)},
    )
    return _redirect("google_connected=true")


@router.get("/status", response_model=schemas.GoogleStatus)
def google_status(user_context=Depends(get_current_user_context)):
    user, _ = user_context
    has_refresh = bool(user.google_refresh_token)
    return schemas.GoogleStatus(connected=has_refresh, has_refresh_token=has_refresh)


@router.delete("/disconnect")
def google_disconnect(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    user_repo.clear_google_tokens(db, user)
    audit_log(
        db,
        action=AuditAction.GOOGLE_DISCONNECT,
        target_type="user",
        target_id=user.id,
        actor_user_id=user.id,
    )
    return {"message": "Google account disconnected"}
