from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from emr.db import get_db
from emr.dependencies import get_client_ip, get_user_agent
from emr.models import User
from emr.schemas import LoginRequest, LoginResponse, StatusResponse
from emr.security.passwords import verify_and_upgrade
from emr.security.sessions import bearer_token, create_api_session, revoke_api_session
from emr.services.audit_service import log_auth_event

router = APIRouter(prefix='/api/auth', tags=['auth'])

INVALID_LOGIN = {'detail': 'Invalid username or password'}


def _reject(db: Session, payload: LoginRequest, request: Request, reason: str, user: User | None) -> JSONResponse:
    log_auth_event(
        db,
        attempted_username=payload.username,
        success=False,
        failure_reason=reason,
        user_id=user.id if user else None,
        ip=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    db.commit()
    return JSONResponse(INVALID_LOGIN, status_code=status.HTTP_401_UNAUTHORIZED)


@router.post('/login', response_model=LoginResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    username = payload.username.strip()
    user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user:
        return _reject(db, payload, request, 'UNKNOWN_USERNAME', None)
    if not user.active:
        return _reject(db, payload, request, 'INACTIVE_USER', user)

    valid, upgraded_hash = verify_and_upgrade(payload.password, user.password_hash)
    if not valid:
        return _reject(db, payload, request, 'BAD_PASSWORD', user)
    if upgraded_hash:
        user.password_hash = upgraded_hash

    ip = get_client_ip(request)
    api_session = create_api_session(db, user.id, ip=ip, user_agent=get_user_agent(request))
    log_auth_event(
        db,
        attempted_username=username,
        success=True,
        user_id=user.id,
        ip=ip,
        user_agent=get_user_agent(request),
    )
    return LoginResponse(access_token=api_session.session_token, expires_at=api_session.expires_at)


@router.post('/logout', response_model=StatusResponse)
def logout(request: Request, db: Session = Depends(get_db)):
    token = bearer_token(request)
    if token:
        revoke_api_session(db, token)
    return StatusResponse(status=True)
