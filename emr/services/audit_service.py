from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from emr.models import AuthEvent

logger = logging.getLogger(__name__)


def log_auth_event(
    db: Session,
    *,
    attempted_username: str,
    success: bool,
    ip: str | None,
    user_agent: str | None,
    user_id: uuid.UUID | None = None,
    failure_reason: str | None = None,
) -> None:
    db.add(
        AuthEvent(
            attempted_username=attempted_username,
            success=success,
            failure_reason=failure_reason,
            user_id=user_id,
            ip=ip,
            user_agent=user_agent,
        )
    )
    if success:
        logger.info('Login succeeded for %s', attempted_username)
    else:
        logger.warning('Login failed for %s: %s', attempted_username, failure_reason)
