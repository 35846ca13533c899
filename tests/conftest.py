import json
import os
from dataclasses import dataclass, field
from typing import Optional

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RESEND_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from frontdesk import main  # noqa: E402
from frontdesk.auth import RequestContext  # noqa: E402
from frontdesk.database import Base, get_db  # noqa: E402
from frontdesk.identity import IdentityProviderError, get_identity_client  # noqa: E402
from frontdesk.routes.rpc import PROCEDURES  # noqa: E402
from frontdesk.rpc import MUTATION  # noqa: E402


@dataclass
class FakeIdentity:
    """In-memory stand-in for the identity provider's backend API"""

    organizations: dict[str, dict] = field(default_factory=dict)
    users: dict[str, dict] = field(default_factory=dict)
    memberships: dict[str, list[dict]] = field(default_factory=dict)
    fail: bool = False
    calls: list[str] = field(default_factory=list)

    def _check(self, name: str):
        self.calls.append(name)
        if self.fail:
            raise IdentityProviderError("identity provider unavailable", status_code=503)

    async def get_organization(self, org_id: str) -> dict:
        self._check("get_organization")
        return self.organizations[org_id]

    async def get_user(self, user_id: str) -> dict:
        self._check("get_user")
        return self.users[user_id]

    async def get_user_memberships(self, user_id: str) -> list[dict]:
        self._check("get_user_memberships")
        return self.memberships.get(user_id, [])

    async def create_user(self, email, username, password, first_name, last_name=None) -> dict:
        self._check("create_user")
        user_id = f"user_{len(self.users) + 1}"
        self.users[user_id] = {"id": user_id, "first_name": first_name, "last_name": last_name}
        return {"id": user_id}

    async def update_user(self, user_id: str, **fields) -> dict:
        self._check("update_user")
        self.users.setdefault(user_id, {}).update(fields)
        return self.users[user_id]

    async def delete_user(self, user_id: str) -> None:
        self._check("delete_user")
        self.users.pop(user_id, None)

    async def create_organization_membership(self, org_id: str, user_id: str, role: str) -> dict:
        self._check("create_organization_membership")
        membership = {"organization": {"id": org_id}, "role": role}
        self.memberships.setdefault(user_id, []).append(membership)
        return membership

    def add_admin(self, user_id: str, org_id: str, first_name: str = "Ada", last_name: str = "Admin"):
        self.organizations.setdefault(org_id, {"id": org_id, "name": "Acme Corp", "slug": "acme"})
        self.users[user_id] = {
            "id": user_id,
            "first_name": first_name,
            "last_name": last_name,
            "primary_email_address_id": "email_1",
            "email_addresses": [{"id": "email_1", "email_address": f"{first_name.lower()}@acme.test"}],
        }
        self.memberships[user_id] = [{"organization": {"id": org_id}, "role": "org:admin"}]


@dataclass
class BrowserSession:
    """Caller identity the auth middleware reports for the next requests"""

    context: RequestContext = field(default_factory=RequestContext)

    def login(self, user_id: str, org_id: Optional[str] = "org_1"):
        self.context = RequestContext(user_id=user_id, org_id=org_id)

    def logout(self):
        self.context = RequestContext()


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def browser():
    return BrowserSession()


@pytest.fixture
def client(db, identity, browser, monkeypatch):
    async def fake_resolve(request):
        return browser.context

    def override_get_db():
        yield db

    monkeypatch.setattr(main, "resolve_request_context", fake_resolve)
    main.app.dependency_overrides[get_db] = override_get_db
    main.app.dependency_overrides[get_identity_client] = lambda: identity
    yield TestClient(main.app, follow_redirects=False)
    main.app.dependency_overrides.clear()


@pytest.fixture
def rpc(client):
    """Call a procedure the way the browser client does"""

    def call(procedure: str, payload=None, method: Optional[str] = None):
        if method is None:
            entry = PROCEDURES.get(procedure)
            method = "POST" if entry is not None and entry.kind == MUTATION else "GET"
        if method == "GET":
            params = {"input": json.dumps(payload)} if payload is not None else {}
            return client.get(f"/api/trpc/{procedure}", params=params)
        return client.post(f"/api/trpc/{procedure}", json=payload)

    return call
