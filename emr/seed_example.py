import uuid

from sqlalchemy import select

from emr.db import SessionLocal, engine
from emr.models import Base, ChiefComplaint, Entitlement, Location, User, UserEntitlement, UserRole
from emr.security.passwords import hash_password

DEMO_TENANT_ID = uuid.UUID('00000000-0000-4000-8000-000000000001')
DEMO_COMPLAINTS = ['Fever', 'Headache', 'Cough']


def seed() -> None:
    Base.metadata.create_all(engine)
    with SessionLocal() as db:
        location = db.execute(select(Location).where(Location.name == 'Main Clinic')).scalar_one_or_none()
        if not location:
            db.add(Location(id=uuid.uuid4(), tenant_id=DEMO_TENANT_ID, name='Main Clinic', code='MAIN', is_active=True))

        existing = set(db.execute(select(ChiefComplaint.name)).scalars().all())
        for name in DEMO_COMPLAINTS:
            if name not in existing:
                db.add(ChiefComplaint(id=uuid.uuid4(), tenant_id=DEMO_TENANT_ID, name=name, is_active=True))

        admin = db.execute(select(User).where(User.username == 'admin')).scalar_one_or_none()
        if not admin:
            db.add(
                User(
                    tenant_id=DEMO_TENANT_ID,
                    username='admin',
                    password_hash=hash_password('adminpass'),
                    role=UserRole.ADMIN,
                    active=True,
                )
            )

        clerk = db.execute(select(User).where(User.username == 'frontdesk')).scalar_one_or_none()
        if not clerk:
            clerk = User(
                tenant_id=DEMO_TENANT_ID,
                username='frontdesk',
                password_hash=hash_password('frontdeskpass'),
                role=UserRole.USER,
                active=True,
            )
            db.add(clerk)
            db.flush()
            for entitlement in (Entitlement.READ, Entitlement.CREATE, Entitlement.UPDATE):
                db.add(UserEntitlement(user_id=clerk.id, entity_name='Patient', entitlement=entitlement))
                db.add(UserEntitlement(user_id=clerk.id, entity_name='Appointment', entitlement=entitlement))

        db.commit()


if __name__ == '__main__':
    seed()
    print('Seed data inserted/verified.')
