from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from emr.auth import Principal, Role
from emr.config import settings
from emr.db import SessionLocal
from emr.models import ApiSession, User, UserEntitlement

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _session_expiry() -> datetime:
    return _now() + timedelta(minutes=settings.session_ttl_minutes)


def is_exempt_path(path: str) -> bool:
    # Exempt entries also cover their sub-paths, e.g. /docs/oauth2-redirect.
    return any(path == exempt or path.startswith(exempt.rstrip('/') + '/') for exempt in settings.auth_exempt_paths)


def bearer_token(request: Request) -> str | None:
    header = request.headers.get('authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def create_api_session(db: Session, user_id: uuid.UUID, ip: str | None, user_agent: str | None) -> ApiSession:
    api_session = ApiSession(
        session_token=secrets.token_urlsafe(48),
        user_id=user_id,
        ip=ip,
        user_agent=user_agent,
        expires_at=_session_expiry(),
    )
    db.add(api_session)
    db.flush()
    return api_session


def revoke_api_session(db: Session, token: str) -> None:
    api_session = db.execute(select(ApiSession).where(ApiSession.session_token == token)).scalar_one_or_none()
    if not api_session or api_session.revoked_at is not None:
        return
    api_session.revoked_at = _now()


def load_principal_from_token(db: Session, token: str | None) -> Principal | None:
    if not token:
        return None

    row = db.execute(
        select(ApiSession, User)
        .join(User, User.id == ApiSession.user_id)
        .where(ApiSession.session_token == token)
    ).one_or_none()
    if not row:
        return None

    api_session, user = row
    now = _now()
    if api_session.revoked_at is not None or _as_utc(api_session.expires_at) <= now:
        return None

    api_session.last_seen_at = now
    api_session.expires_at = _session_expiry()
    grants = db.execute(
        select(UserEntitlement.entity_name, UserEntitlement.entitlement).where(UserEntitlement.user_id == user.id)
    ).all()
    role = Role(user.role.value)
    return Principal(
        id=user.id,
        tenant_id=user.tenant_id,
        username=user.username,
        role=role,
        active=user.active,
        entitlements=frozenset((entity_name.lower(), entitlement) for entity_name, entitlement in grants),
    )


def install_auth_session_middleware(app: FastAPI) -> None:
    @app.middleware('http')
    async def auth_session_middleware(request: Request, call_next):
        token = bearer_token(request)
        with SessionLocal() as db:
            principal = load_principal_from_token(db, token)
            request.state.principal = principal
            db.commit()

        if not is_exempt_path(request.url.path) and request.state.principal is None:
            if token:
                logger.info('Rejected expired or unknown API token for %s', request.url.path)
            return JSONResponse(
                {'detail': 'Not authenticated'},
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={'WWW-Authenticate': 'Bearer'},
            )

        response = await call_next(request)
        return response
