from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum

from fastapi import Depends, HTTPException, Request, status

from emr.models import Entitlement


class Role(str, Enum):
    ADMIN = 'ADMIN'
    USER = 'USER'


@dataclass
class Principal:
    id: uuid.UUID
    tenant_id: uuid.UUID
    username: str
    role: Role
    active: bool
    entitlements: frozenset[tuple[str, Entitlement]] = field(default_factory=frozenset)

    def has_entitlement(self, entity_name: str, entitlement: Entitlement) -> bool:
        if self.role == Role.ADMIN:
            return True
        return (entity_name.lower(), entitlement) in self.entitlements


def get_current_principal(request: Request) -> Principal:
    principal = getattr(request.state, 'principal', None)
    if not principal:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    if not principal.active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return principal


def require_entitlement(entity_name: str, entitlement: Entitlement):
    def _dep(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_entitlement(entity_name, entitlement):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f'Missing {entitlement.value} entitlement for {entity_name}',
            )
        return principal

    return _dep
