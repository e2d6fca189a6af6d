from __future__ import annotations

import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from emr.models import Base, Entitlement, User, UserEntitlement, UserRole
from emr.security.sessions import create_api_session

TENANT_ID = uuid.UUID('11111111-1111-4111-8111-111111111111')


def make_session_factory() -> sessionmaker:
    engine = create_engine(
        'sqlite+pysqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def add_user(
    db: Session,
    *,
    username: str,
    password_hash: str = 'not-a-real-hash',
    role: UserRole = UserRole.USER,
    active: bool = True,
    grants: dict[str, list[Entitlement]] | None = None,
) -> User:
    user = User(tenant_id=TENANT_ID, username=username, password_hash=password_hash, role=role, active=active)
    db.add(user)
    db.flush()
    for entity_name, entitlements in (grants or {}).items():
        for entitlement in entitlements:
            db.add(UserEntitlement(user_id=user.id, entity_name=entity_name, entitlement=entitlement))
    db.flush()
    return user


def issue_token(db: Session, user: User) -> str:
    return create_api_session(db, user.id, ip='127.0.0.1', user_agent='unittest').session_token
