import os
import tempfile

# Settings are read once at import time, so they have to be in place before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEFAULT_ADMIN"] = "false"
os.environ["EMAIL_SERVER"] = ""
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["GROUP_CHAT_ID"] = ""
os.environ["NOTIFICATION_LOG_FILE"] = os.path.join(
    tempfile.mkdtemp(prefix="ticketing-tests-"), "notifications.log"
)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.init import Base, get_db
from database.models import Company, Property, User
from enums.user_role import UserRole
from services.notifications.channels import ChannelResult, NotificationChannel
from services.notifications.dispatcher import NotificationDispatcher
from services.property_service import build_units, occupy_unit
from utils.dependencies import create_access_token, get_dispatcher, hash_password

PASSWORD = "secret123"
HASHED_PASSWORD = hash_password(PASSWORD)


class RecordingChannel(NotificationChannel):
    """Channel that remembers every event it was handed."""

    name = "recording"

    def __init__(self):
        self.sent = []

    async def send(self, event, ticket, actor) -> ChannelResult:
        self.sent.append((event, ticket.id, actor.id))
        return ChannelResult(channel=self.name, success=True, recipients=["test"])


class FailingChannel(NotificationChannel):
    name = "failing"

    async def send(self, event, ticket, actor) -> ChannelResult:
        raise RuntimeError("channel is down")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def recorder():
    return RecordingChannel()


@pytest.fixture
def dispatcher(recorder):
    return NotificationDispatcher([recorder])


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role=UserRole.TENANT, name=None, **kwargs):
        counter["n"] += 1
        role_value = getattr(role, "value", role)
        user = User(
            name=name or f"{role_value.title()} {counter['n']}",
            email=kwargs.pop("email", f"{role_value}{counter['n']}@example.com"),
            hashed_password=HASHED_PASSWORD,
            role=role_value,
            is_active=kwargs.pop("is_active", True),
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user(UserRole.OWNER, name="Olivia Owner")


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Adam Admin")


@pytest.fixture
def worker(make_user):
    return make_user(UserRole.WORKER, name="Walter Worker", phone="+27820000001")


@pytest.fixture
def prop(db, owner):
    building = Property(
        name="Sunset Residences",
        street="12 Long Street",
        city="Cape Town",
        total_units=12,
        owner_id=owner.id,
        units=build_units(12),
    )
    db.add(building)
    db.commit()
    db.refresh(building)
    return building


@pytest.fixture
def make_tenant(db, make_user, prop):
    def _make_tenant(unit_number="A001", **kwargs):
        tenant = make_user(UserRole.TENANT, **kwargs)
        occupy_unit(db, prop, unit_number, tenant)
        db.commit()
        db.refresh(tenant)
        return tenant

    return _make_tenant


@pytest.fixture
def tenant(make_tenant):
    return make_tenant("A001", name="Tina Tenant")


@pytest.fixture
def other_tenant(make_tenant):
    return make_tenant("A002", name="Tom Tenant")


@pytest.fixture
def company(db, owner):
    contractor = Company(
        name="Rapid Plumbing",
        category="plumbing",
        phone="+27215550000",
        email="jobs@rapid-plumbing.example.com",
        owner_id=owner.id,
    )
    db.add(contractor)
    db.commit()
    db.refresh(contractor)
    return contractor


@pytest.fixture
def client(db, dispatcher):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}
